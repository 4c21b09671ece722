"""Network creation wizard."""

from .catalog import catalog, default_network_config
from .form_state import NetworkFormState
from .review import ReviewOrchestrator, estimate_monthly_cost
from .rules import validate_config


__all__ = [
    "catalog",
    "default_network_config",
    "NetworkFormState",
    "ReviewOrchestrator",
    "estimate_monthly_cost",
    "validate_config",
]
