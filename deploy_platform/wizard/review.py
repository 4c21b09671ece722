# deploy_platform/wizard/review.py
"""Review step: full validation, cost estimate and simulated deployment."""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from deploy_platform.core.errors import ConfigurationInvalid
from deploy_platform.wizard.form_state import NetworkFormState
from deploy_platform.wizard.rules import section_of, to_number


logger = logging.getLogger(__name__)


# ============================================
# Cost estimate
# ============================================

# Monthly price per node. Matched by substring, first hit wins.
NODE_PRICES = {
    "aws": ([
        ("t3.small", 20), ("t3.medium", 40), ("t3.large", 80),
        ("m5.large", 90), ("m5.xlarge", 180), ("m5.2xlarge", 360),
    ], 50),
    "gcp": ([
        ("e2-standard-2", 70), ("e2-standard-4", 140), ("e2-standard-8", 280),
    ], 90),
    "azure": ([
        ("Standard_B2s", 30), ("Standard_B2ms", 60), ("Standard_B4ms", 120),
    ], 70),
    "digital_ocean": ([
        ("s-2vcpu-2gb", 15), ("s-2vcpu-4gb", 25), ("s-4vcpu-8gb", 50),
    ], 30),
}
FALLBACK_NODE_PRICE = 50

STORAGE_PRICE_PER_100GB = 10
MONITORING_FEE = 20


def node_price(provider: str, node_type: Optional[str]) -> float:
    if not isinstance(provider, str):
        return FALLBACK_NODE_PRICE
    prices, default = NODE_PRICES.get(provider, ([], FALLBACK_NODE_PRICE))
    for name, price in prices:
        if isinstance(node_type, str) and name in node_type:
            return price
    return default


def estimate_monthly_cost(
    provider: Optional[str] = None,
    node_type: Optional[str] = None,
    disk_size: Any = None,
    validator_count: Any = None,
) -> float:
    """
    (node price + $10 per 100 GB of disk) x validators + $20 monitoring.

    Missing inputs fall back to aws, 100 GB and 4 validators.
    """
    provider = provider or "aws"
    disk = to_number(disk_size) or 100
    count = to_number(validator_count) or 4

    storage = disk / 100 * STORAGE_PRICE_PER_100GB
    return (node_price(provider, node_type) + storage) * count + MONITORING_FEE


def estimate_for_config(config: Dict[str, Any]) -> float:
    return estimate_monthly_cost(
        provider=config.get("provider"),
        node_type=config.get("node_type"),
        disk_size=config.get("disk_size"),
        validator_count=section_of(config, "validators").get("count"),
    )


def format_token_amount(amount: Optional[float]) -> str:
    if not amount:
        return "0"
    if amount >= 1_000_000_000:
        return f"{amount / 1_000_000_000:.2f} Billion"
    if amount >= 1_000_000:
        return f"{amount / 1_000_000:.2f} Million"
    if amount >= 1_000:
        return f"{amount / 1_000:.2f} Thousand"
    return f"{amount:g}"


# ============================================
# Deployment progress
# ============================================

DEPLOYMENT_PHASES = [
    "Validating configuration",
    "Creating infrastructure",
    "Configuring nodes",
    "Setting up validators",
    "Initializing blockchain",
]

PENDING = "pending"
IN_PROGRESS = "in_progress"
COMPLETED = "completed"
FAILED = "error"


@dataclass
class DeploymentProgress:
    steps: List[Dict[str, str]] = field(
        default_factory=lambda: [{"label": label, "status": PENDING} for label in DEPLOYMENT_PHASES]
    )
    current: int = 0
    result: Any = None

    def start(self, index: int) -> None:
        self.current = index
        self.steps[index]["status"] = IN_PROGRESS

    def complete(self, index: int) -> None:
        self.steps[index]["status"] = COMPLETED

    def fail(self) -> None:
        self.steps[self.current]["status"] = FAILED

    @property
    def finished(self) -> bool:
        return all(step["status"] == COMPLETED for step in self.steps)


class ReviewOrchestrator:
    """
    Drives the wizard's final step.

    ``submit`` refuses a config with errors, then walks the fixed deployment
    phases on a timer and finally hands the config to ``on_submit`` (for
    example a function that creates the network record).
    """

    def __init__(
        self,
        form_state: NetworkFormState,
        on_submit: Optional[Callable[[Dict[str, Any]], Any]] = None,
        phase_interval: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        on_progress: Optional[Callable[[DeploymentProgress], None]] = None,
    ):
        self.form_state = form_state
        self.on_submit = on_submit
        self.phase_interval = phase_interval
        self._sleep = sleep
        self._on_progress = on_progress
        self.progress: Optional[DeploymentProgress] = None

    def validate_all(self) -> Dict[str, str]:
        return self.form_state.validate_all()

    def estimate_monthly_cost(self) -> float:
        return estimate_for_config(self.form_state.config)

    def summary(self) -> Dict[str, Any]:
        return {
            "config": self.form_state.config,
            "errors": self.validate_all(),
            "estimated_monthly_cost": round(self.estimate_monthly_cost(), 2),
            "token_distribution": [
                dict(entry, formatted=format_token_amount(entry["amount"]))
                for entry in self.form_state.token_distribution
            ],
        }

    def _notify(self) -> None:
        if self._on_progress:
            self._on_progress(self.progress)

    def submit(self, confirm: bool = True) -> Optional[DeploymentProgress]:
        """
        Returns None when the user did not confirm.
        Raises ConfigurationInvalid while the error map is non-empty.
        """
        errors = self.validate_all()
        if errors:
            raise ConfigurationInvalid(errors)

        if not confirm:
            return None

        self.progress = DeploymentProgress()
        config = self.form_state.config
        logger.info(f"Deploying network '{config.get('name')}'")

        try:
            for index, label in enumerate(DEPLOYMENT_PHASES):
                self.progress.start(index)
                self._notify()
                self._sleep(self.phase_interval)
                self.progress.complete(index)
                logger.info(f"[deploy] {label} -> done")

            if self.on_submit:
                self.progress.result = self.on_submit(config)
        except Exception:
            self.progress.fail()
            self._notify()
            raise

        self._notify()
        return self.progress
