# deploy_platform/wizard/form_state.py
"""In-progress network configuration held by the creation wizard."""

import copy
import logging
from typing import Any, Dict, List, Optional

from deploy_platform.core.errors import PlatformValidationError
from deploy_platform.wizard import rules
from deploy_platform.wizard.catalog import (
    CORE_MODULES, PROCESSING_PERIOD_DAYS, REQUIRED_PROPOSAL_TYPES,
    default_network_config, default_validator, node_types_for, regions_for,
)


logger = logging.getLogger(__name__)


TOKEN_DISTRIBUTION = [
    ("Genesis Validators", "validators_allocation", 40),
    ("Community Pool", "community_pool_allocation", 30),
    ("Strategic Reserve", "strategic_reserve_allocation", 20),
    ("Airdrops", "airdrop_allocation", 10),
]


class NetworkFormState:
    """
    Holds one configuration while a network is being designed.

    Each mutation validates the touched field (``errors`` keeps the live
    error map) and recomputes the chart series:
    - ``power_distribution``: per-validator power and share of the total
    - ``token_distribution``: genesis allocation percentages and amounts
    - ``governance_timeline``: deposit, voting and processing phase lengths
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config: Dict[str, Any] = copy.deepcopy(config) if config else default_network_config()
        self.errors: Dict[str, str] = {}

        self.power_distribution: List[Dict[str, Any]] = []
        self.token_distribution: List[Dict[str, Any]] = []
        self.governance_timeline: List[Dict[str, Any]] = []
        self._recompute()

    # -------------------------
    # Field updates
    # -------------------------

    def get(self, path: str, default: Any = None) -> Any:
        node: Any = self.config
        for part in path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set_field(self, path: str, value: Any) -> Optional[str]:
        """
        Set a (dotted) field from raw input and validate it.

        Numeric fields are coerced, the token symbol is upper-cased and a
        provider change clears a region or node type the provider lacks.
        Returns the field's error message, if any.
        """
        section, field = self._split(path)

        if section and field in rules.NUMERIC_FIELDS.get(section, ()):
            number = rules.to_number(value)
            value = number if number is not None else value
        elif section == "token_economics" and field == "symbol" and isinstance(value, str):
            value = value.upper()

        return self._assign(path, value)

    def set_slider(self, path: str, value: Any) -> Optional[str]:
        """Slider input is already numeric; stored as given."""
        return self._assign(path, value)

    def _assign(self, path: str, value: Any) -> Optional[str]:
        section, field = self._split(path)
        target = self.config
        if section:
            target = self.config.setdefault(section, {})
        target[field] = value

        if not section and field == "provider":
            self._reset_provider_choices()

        message = self._validate(path)
        self._recompute()
        return message

    def _split(self, path: str):
        if "." in path:
            section, field = path.split(".", 1)
            return section, field
        return None, path

    def _reset_provider_choices(self) -> None:
        provider = self.config.get("provider")
        if self.config.get("region") and self.config["region"] not in regions_for(provider):
            self.config["region"] = ""
        if self.config.get("node_type") and self.config["node_type"] not in node_types_for(provider):
            self.config["node_type"] = ""

    def _validate(self, path: str) -> Optional[str]:
        section, field = self._split(path)

        if section == "token_economics" and field in rules.ALLOCATION_FIELDS:
            self._record("token_economics.total_allocation",
                         rules.allocation_total_rule(self.config["token_economics"]))
            return self.errors.get("token_economics.total_allocation")

        rule, section_name, name = rules.rule_for(path)
        if section_name:
            context = self.config.get(section_name) or {}
        else:
            context = self.config
        message = rule(name, self.get(path), context)
        self._record(path, message)
        return message

    def _record(self, key: str, message: Optional[str]) -> None:
        if message:
            self.errors[key] = message
        else:
            self.errors.pop(key, None)

    # -------------------------
    # Custom validators
    # -------------------------

    @property
    def _validators(self) -> Dict[str, Any]:
        return self.config.setdefault("validators", {})

    @property
    def custom_validators(self) -> List[Dict[str, Any]]:
        return self._validators.setdefault("custom_validators", [])

    def toggle_custom_validators(self, enabled: bool) -> None:
        """Switching on with an empty list seeds ``count`` validators with equal power."""
        self._validators["use_custom_validators"] = bool(enabled)

        if enabled and not self.custom_validators:
            count = int(rules.to_number(self._validators.get("count")) or 4)
            self._validators["custom_validators"] = [
                default_validator(moniker=f"Validator {i + 1}", power=100 / count)
                for i in range(count)
            ]
        self._recompute()

    def add_or_update_validator(self, entry: Dict[str, Any], index: Optional[int] = None) -> Dict[str, str]:
        """
        Validate ``entry`` and store it (append, or replace at ``index``).

        Nothing is stored when the entry has errors; the errors are returned.
        """
        validator = default_validator()
        commission = dict(validator["commission"])
        commission.update(entry.get("commission") or {})
        validator.update({k: v for k, v in entry.items() if k != "commission"})
        validator["commission"] = commission

        power = rules.to_number(validator.get("power"))
        if power is not None:
            validator["power"] = power

        errors = rules.validate_validator_entry(validator)
        if errors:
            return errors

        if index is None:
            self.custom_validators.append(validator)
        else:
            if not 0 <= index < len(self.custom_validators):
                raise PlatformValidationError("Validator not found")
            self.custom_validators[index] = validator

        self._recompute()
        return {}

    def remove_validator(self, index: int) -> Dict[str, Any]:
        if not 0 <= index < len(self.custom_validators):
            raise PlatformValidationError("Validator not found")
        removed = self.custom_validators.pop(index)
        self._recompute()
        return removed

    # -------------------------
    # Governance / modules toggles
    # -------------------------

    def toggle_proposal_type(self, type_id: str) -> bool:
        """Returns False when the type is required and was left enabled."""
        if type_id in REQUIRED_PROPOSAL_TYPES:
            return False

        governance = self.config.setdefault("governance", {})
        enabled = governance.setdefault("enabled_proposal_types", list(REQUIRED_PROPOSAL_TYPES))
        if type_id in enabled:
            enabled.remove(type_id)
        else:
            enabled.append(type_id)
        return True

    def toggle_module(self, module: str) -> bool:
        """Returns False when a core module was left enabled."""
        modules = self.config.setdefault("modules", {"enabled": list(CORE_MODULES), "params": {}})
        enabled = modules.setdefault("enabled", list(CORE_MODULES))

        if module in enabled:
            if module in CORE_MODULES:
                return False
            enabled.remove(module)
        else:
            enabled.append(module)

        self._record("modules.enabled", rules.modules_rule(modules))
        return True

    def set_module_param(self, module: str, param: str, value: Any) -> None:
        modules = self.config.setdefault("modules", {"enabled": list(CORE_MODULES), "params": {}})
        modules.setdefault("params", {}).setdefault(module, {})[param] = value

    def reset_module_params(self, module: str) -> None:
        params = self.get("modules.params") or {}
        params.pop(module, None)

    # -------------------------
    # Derived series
    # -------------------------

    def _recompute(self) -> None:
        self.power_distribution = self._power_distribution()
        self.token_distribution = self._token_distribution()
        self.governance_timeline = self._governance_timeline()

    def _power_distribution(self) -> List[Dict[str, Any]]:
        validators = rules.section_of(self.config, "validators")
        custom = validators.get("custom_validators")
        custom = [v for v in custom if isinstance(v, dict)] if isinstance(custom, list) else []

        if custom:
            powers = [rules.to_number(v.get("power")) or 0 for v in custom]
            total = sum(powers)
            return [
                {
                    "name": validator.get("moniker") or f"Validator {i + 1}",
                    "power": power,
                    "percentage": (power / total * 100) if total else 100 / len(custom),
                }
                for i, (validator, power) in enumerate(zip(custom, powers))
            ]

        count = int(min(max(rules.to_number(validators.get("count")) or 4, 1), 50))
        return [
            {"name": f"Validator {i + 1}", "power": 100 / count, "percentage": 100 / count}
            for i in range(count)
        ]

    def _token_distribution(self) -> List[Dict[str, Any]]:
        economics = rules.section_of(self.config, "token_economics")
        supply = rules.to_number(economics.get("initial_supply")) or 0
        series = []
        for label, field, fallback in TOKEN_DISTRIBUTION:
            percentage = rules.to_number(economics.get(field)) or fallback
            series.append({
                "name": label,
                "value": percentage,
                "amount": supply * percentage / 100,
            })
        return series

    def _governance_timeline(self) -> List[Dict[str, Any]]:
        governance = rules.section_of(self.config, "governance")
        return [
            {
                "phase": "Deposit",
                "days": rules.to_number(governance.get("max_deposit_period")) or 14,
                "description": "Collecting minimum deposit",
            },
            {
                "phase": "Voting",
                "days": rules.to_number(governance.get("voting_period")) or 14,
                "description": "Community voting period",
            },
            {
                "phase": "Processing",
                "days": PROCESSING_PERIOD_DAYS,
                "description": "Proposal execution if passed",
            },
        ]

    # -------------------------
    # Whole form
    # -------------------------

    def validate_all(self) -> Dict[str, str]:
        """Re-run every rule; replaces the live error map."""
        self.errors = rules.validate_config(self.config)
        return dict(self.errors)

    def charts(self) -> Dict[str, Any]:
        return {
            "power_distribution": self.power_distribution,
            "token_distribution": self.token_distribution,
            "governance_timeline": self.governance_timeline,
        }
