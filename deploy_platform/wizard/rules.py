# deploy_platform/wizard/rules.py
"""
Per-field validation rules for the network creation wizard.

Every rule has the shape ``(name, value, context) -> message | None``.
``context`` is the mapping the field lives in (the section for nested
fields, the whole config for basic info, the entry for a custom validator).
Rules are pure: they never touch their inputs.
"""

import math
import re
from typing import Any, Dict, Mapping, Optional

from deploy_platform.wizard.catalog import (
    CORE_MODULES, node_types_for, provider_ids, regions_for,
)


NETWORK_NAME_PATTERN = re.compile(r"[a-z0-9-]+")
SYMBOL_PATTERN = re.compile(r"[A-Z]+")
WEBSITE_PATTERN = re.compile(r"(https?://)?([\w-]+\.)+[\w-]+(/[\w\-./?%&=]*)?")
IDENTITY_PATTERN = re.compile(r"[A-F0-9]{16}")

BASIC_INFO_FIELDS = ("name", "provider", "region", "node_type", "disk_size", "description")

TOKEN_ECONOMICS_FIELDS = (
    "name", "symbol", "decimals", "initial_supply", "inflation_rate",
    "inflation_rate_change", "inflation_max", "inflation_min",
    "bonded_ratio_goal", "blocks_per_year", "community_tax",
)
ALLOCATION_FIELDS = (
    "validators_allocation", "community_pool_allocation",
    "strategic_reserve_allocation", "airdrop_allocation",
)

VALIDATORS_FIELDS = (
    "count", "block_time", "unbonding_time", "max_validators",
    "max_entries", "historical_entries",
)

VALIDATOR_ENTRY_FIELDS = (
    "moniker", "power", "commission.rate", "commission.max_rate", "commission.max_change_rate",
)

GOVERNANCE_FIELDS = (
    "min_deposit", "max_deposit_period", "voting_period", "quorum",
    "threshold", "veto_threshold", "max_title_length", "max_description_length",
)

NUMERIC_FIELDS = {
    "token_economics": set(TOKEN_ECONOMICS_FIELDS + ALLOCATION_FIELDS) - {"name", "symbol"},
    "validators": set(VALIDATORS_FIELDS),
    "governance": set(GOVERNANCE_FIELDS),
}


# ============================================
# Value helpers
# ============================================

def to_number(value: Any) -> Optional[float]:
    """Numeric view of a raw field value, or None if it is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    if isinstance(number, float) and not math.isfinite(number):
        return None
    return number


def _blank(value: Any) -> bool:
    """Missing, non-numeric or zero."""
    number = to_number(value)
    return number is None or number == 0


def _fmt(number: float) -> str:
    return f"{number:g}"


def section_of(config: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = config.get(name)
    return section if isinstance(section, Mapping) else {}


# ============================================
# Basic info
# ============================================

def basic_info_rule(name: str, value: Any, context: Optional[Mapping[str, Any]] = None) -> Optional[str]:
    context = context or {}

    if name == "name":
        if not value:
            return "Network name is required"
        if not isinstance(value, str):
            return "Network name must be text"
        if len(value) < 3:
            return "Network name must be at least 3 characters"
        if len(value) > 30:
            return "Network name must be less than 30 characters"
        if not NETWORK_NAME_PATTERN.fullmatch(value):
            return "Network name can only contain lowercase letters, numbers, and hyphens"
        return None

    if name == "provider":
        if not value:
            return "Cloud provider is required"
        if value not in provider_ids():
            return "Unsupported cloud provider"
        return None

    if name == "region":
        if not value:
            return "Region is required"
        provider = context.get("provider")
        if provider in provider_ids() and value not in regions_for(provider):
            return "Region is not available for the selected provider"
        return None

    if name == "node_type":
        if not value:
            return "Node type is required"
        provider = context.get("provider")
        if provider in provider_ids() and value not in node_types_for(provider):
            return "Node type is not available for the selected provider"
        return None

    if name == "disk_size":
        if _blank(value):
            return "Disk size is required"
        return None

    if name == "description":
        if value and not isinstance(value, str):
            return "Description must be text"
        if value and len(value) > 500:
            return "Description must be less than 500 characters"
        return None

    return None


# ============================================
# Token economics
# ============================================

def token_economics_rule(name: str, value: Any, context: Optional[Mapping[str, Any]] = None) -> Optional[str]:
    context = context or {}
    number = to_number(value)

    if name == "name":
        if not value:
            return "Token name is required"
        if not isinstance(value, str):
            return "Token name must be text"
        if len(value) < 3:
            return "Token name must be at least 3 characters"
        if len(value) > 30:
            return "Token name must be less than 30 characters"
        return None

    if name == "symbol":
        if not value:
            return "Token symbol is required"
        if not isinstance(value, str):
            return "Token symbol must be text"
        if len(value) < 2:
            return "Token symbol must be at least 2 characters"
        if len(value) > 10:
            return "Token symbol must be less than 10 characters"
        if not SYMBOL_PATTERN.fullmatch(value):
            return "Token symbol must contain only uppercase letters"
        return None

    if name == "decimals":
        if number is None:
            return "Decimals is required"
        if number < 0 or number != int(number):
            return "Decimals must be a non-negative integer"
        if number > 18:
            return "Decimals must be at most 18"
        return None

    if name == "initial_supply":
        if _blank(value):
            return "Initial supply is required"
        if number <= 0:
            return "Initial supply must be greater than 0"
        if number > 1_000_000_000_000:
            return "Initial supply must be less than or equal to 1 trillion"
        return None

    if name == "inflation_rate":
        if number is None:
            return "Inflation rate is required"
        if number < 0:
            return "Inflation rate must be non-negative"
        if number > 100:
            return "Inflation rate must be less than or equal to 100"
        return None

    if number is None and name != "blocks_per_year":
        # optional numeric fields
        return None

    if name == "inflation_rate_change":
        if number < 0:
            return "Inflation rate change must be non-negative"
        if number > 10:
            return "Inflation rate change must be less than or equal to 10"
        return None

    if name == "inflation_max":
        rate = to_number(context.get("inflation_rate")) or 0
        if number < rate:
            return "Max inflation must be greater than or equal to inflation rate"
        if number > 100:
            return "Max inflation must be less than or equal to 100"
        return None

    if name == "inflation_min":
        rate = to_number(context.get("inflation_rate")) or 0
        if number < 0:
            return "Min inflation must be non-negative"
        if number > rate:
            return "Min inflation must be less than or equal to inflation rate"
        return None

    if name == "bonded_ratio_goal":
        if number < 0:
            return "Goal bonded ratio must be non-negative"
        if number > 100:
            return "Goal bonded ratio must be less than or equal to 100"
        return None

    if name == "blocks_per_year":
        if _blank(value):
            return "Blocks per year is required"
        if number < 0:
            return "Blocks per year must be non-negative"
        if number > 100_000_000:
            return "Blocks per year is too large"
        return None

    if name == "community_tax":
        if number < 0:
            return "Community tax must be non-negative"
        if number > 100:
            return "Community tax must be less than or equal to 100"
        return None

    return None


def allocation_total_rule(context: Mapping[str, Any]) -> Optional[str]:
    """The four genesis allocations must add up to exactly 100%."""
    total = sum(to_number(context.get(field)) or 0 for field in ALLOCATION_FIELDS)
    if abs(total - 100) > 1e-9:
        return "Total allocation must equal 100%"
    return None


# ============================================
# Validators
# ============================================

def validators_rule(name: str, value: Any, context: Optional[Mapping[str, Any]] = None) -> Optional[str]:
    context = context or {}
    number = to_number(value)

    if name == "count":
        if _blank(value):
            return "Number of validators is required"
        if number < 1:
            return "Must have at least 1 validator"
        if number > 50:
            return "Maximum 50 validators allowed"
        return None

    if name == "block_time":
        if _blank(value):
            return "Block time is required"
        if number < 1:
            return "Block time must be at least 1 second"
        if number > 60:
            return "Block time must be at most 60 seconds"
        return None

    if name == "unbonding_time":
        if _blank(value):
            return "Unbonding time is required"
        if number < 1:
            return "Unbonding time must be at least 1 day"
        if number > 90:
            return "Unbonding time must be at most 90 days"
        return None

    if name == "max_validators":
        count = to_number(context.get("count")) or 4
        if _blank(value):
            return "Max validators is required"
        if number < count:
            return f"Max validators must be at least {_fmt(count)}"
        if number > 500:
            return "Max validators must be at most 500"
        return None

    if number is None:
        return None

    if name == "max_entries":
        if number < 1:
            return "Max entries must be at least 1"
        if number > 100:
            return "Max entries must be at most 100"
        return None

    if name == "historical_entries":
        if number < 0:
            return "Historical entries must be non-negative"
        if number > 100000:
            return "Historical entries must be at most 100,000"
        return None

    return None


def _commission(entry: Mapping[str, Any]) -> Mapping[str, Any]:
    return section_of(entry, "commission")


def validator_entry_rule(name: str, value: Any, context: Optional[Mapping[str, Any]] = None) -> Optional[str]:
    """Rules for one custom validator; ``context`` is the entry itself."""
    context = context or {}
    number = to_number(value)

    if name == "moniker":
        if not value:
            return "Validator name is required"
        if not isinstance(value, str):
            return "Validator name must be text"
        if len(value) < 3:
            return "Name must be at least 3 characters"
        if len(value) > 30:
            return "Name must be at most 30 characters"
        return None

    if name == "website":
        if value and not (isinstance(value, str) and WEBSITE_PATTERN.fullmatch(value)):
            return "Please enter a valid URL"
        return None

    if name == "identity":
        if value and not (isinstance(value, str) and IDENTITY_PATTERN.fullmatch(value)):
            return "Identity must be a 16-character hex string"
        return None

    if number is None:
        return None

    commission = _commission(context)
    max_rate = to_number(commission.get("max_rate"))
    if max_rate is None:
        max_rate = 100

    if name == "power":
        if number < 1:
            return "Power must be at least 1"
        if number > 1000:
            return "Power must be at most 1000"
        return None

    if name == "commission.rate":
        if number < 0:
            return "Rate must be non-negative"
        if number > max_rate:
            return f"Rate must be at most {_fmt(max_rate)}%"
        return None

    if name == "commission.max_rate":
        rate = to_number(commission.get("rate")) or 0
        if number < rate:
            return "Max rate must be at least the commission rate"
        if number > 100:
            return "Max rate must be at most 100%"
        return None

    if name == "commission.max_change_rate":
        if number < 0:
            return "Max change rate must be non-negative"
        if number > max_rate:
            return "Max change rate must be at most the max rate"
        return None

    return None


def entry_value(entry: Mapping[str, Any], field: str) -> Any:
    """Read ``field`` from a validator entry; ``commission.x`` reads nested."""
    if field.startswith("commission."):
        return _commission(entry).get(field.split(".", 1)[1])
    return entry.get(field)


def validate_validator_entry(entry: Mapping[str, Any]) -> Dict[str, str]:
    """All rules for one custom validator. Website and identity only when set."""
    errors = {}
    fields = list(VALIDATOR_ENTRY_FIELDS)
    if entry.get("website"):
        fields.append("website")
    if entry.get("identity"):
        fields.append("identity")

    for field in fields:
        message = validator_entry_rule(field, entry_value(entry, field), entry)
        if message:
            errors[field] = message
    return errors


# ============================================
# Governance
# ============================================

def governance_rule(name: str, value: Any, context: Optional[Mapping[str, Any]] = None) -> Optional[str]:
    number = to_number(value)

    if name == "min_deposit":
        if _blank(value):
            return "Minimum deposit is required"
        if number <= 0:
            return "Minimum deposit must be greater than 0"
        if number > 1_000_000_000:
            return "Minimum deposit is too large"
        return None

    if name == "max_deposit_period":
        if _blank(value):
            return "Maximum deposit period is required"
        if number < 1:
            return "Maximum deposit period must be at least 1 day"
        if number > 90:
            return "Maximum deposit period must be at most 90 days"
        return None

    if name == "voting_period":
        if _blank(value):
            return "Voting period is required"
        if number < 1:
            return "Voting period must be at least 1 day"
        if number > 90:
            return "Voting period must be at most 90 days"
        return None

    if name == "quorum":
        if number is None:
            return "Quorum is required"
        if number < 0:
            return "Quorum must be non-negative"
        if number > 100:
            return "Quorum must be at most 100%"
        return None

    if name == "threshold":
        if number is None:
            return "Threshold is required"
        if number <= 0:
            return "Threshold must be greater than 0"
        if number > 100:
            return "Threshold must be at most 100%"
        return None

    if name == "veto_threshold":
        if number is None:
            return "Veto threshold is required"
        if number < 0:
            return "Veto threshold must be non-negative"
        if number > 100:
            return "Veto threshold must be at most 100%"
        return None

    if name == "max_title_length":
        if _blank(value):
            return "Maximum title length is required"
        if number < 10:
            return "Maximum title length must be at least 10 characters"
        if number > 500:
            return "Maximum title length must be at most 500 characters"
        return None

    if name == "max_description_length":
        if _blank(value):
            return "Maximum description length is required"
        if number < 100:
            return "Maximum description length must be at least 100 characters"
        if number > 50000:
            return "Maximum description length must be at most 50,000 characters"
        return None

    return None


# ============================================
# Modules
# ============================================

def modules_rule(context: Mapping[str, Any]) -> Optional[str]:
    enabled = context.get("enabled")
    if not isinstance(enabled, list):
        enabled = []
    missing = [module for module in CORE_MODULES if module not in enabled]
    if missing:
        return f"The following core modules are required: {', '.join(missing)}"
    return None


# ============================================
# Whole sections
# ============================================

SECTION_RULES = {
    "token_economics": token_economics_rule,
    "validators": validators_rule,
    "governance": governance_rule,
}


def rule_for(path: str):
    """Resolve a dotted path to ``(rule, section, field)``."""
    if "." in path:
        section, field = path.split(".", 1)
        if section in SECTION_RULES:
            return SECTION_RULES[section], section, field
    return basic_info_rule, None, path


def _collect(errors: Dict[str, str], prefix: str, rule, fields, context: Mapping[str, Any]) -> None:
    for field in fields:
        message = rule(field, context.get(field), context)
        if message:
            errors[f"{prefix}{field}"] = message


def validate_basic_info(config: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    _collect(errors, "", basic_info_rule, BASIC_INFO_FIELDS, config)
    return errors


def validate_token_economics(section: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    _collect(errors, "token_economics.", token_economics_rule, TOKEN_ECONOMICS_FIELDS, section)
    message = allocation_total_rule(section)
    if message:
        errors["token_economics.total_allocation"] = message
    return errors


def validate_validators(section: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    _collect(errors, "validators.", validators_rule, VALIDATORS_FIELDS, section)
    if section.get("use_custom_validators"):
        entries = section.get("custom_validators")
        for index, entry in enumerate(entries if isinstance(entries, list) else []):
            if not isinstance(entry, Mapping):
                errors[f"validators.custom_validators.{index}"] = "Validator entry must be an object"
                continue
            for field, message in validate_validator_entry(entry).items():
                errors[f"validators.custom_validators.{index}.{field}"] = message
    return errors


def validate_governance(section: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    _collect(errors, "governance.", governance_rule, GOVERNANCE_FIELDS, section)
    return errors


def validate_modules(section: Mapping[str, Any]) -> Dict[str, str]:
    message = modules_rule(section)
    return {"modules.enabled": message} if message else {}


def validate_config(config: Mapping[str, Any]) -> Dict[str, str]:
    """Run every section's rules; empty result means the config can be deployed."""
    errors: Dict[str, str] = {}
    errors.update(validate_basic_info(config))
    errors.update(validate_token_economics(section_of(config, "token_economics")))
    errors.update(validate_validators(section_of(config, "validators")))
    errors.update(validate_modules(section_of(config, "modules")))
    errors.update(validate_governance(section_of(config, "governance")))
    return errors
