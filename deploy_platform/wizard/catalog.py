# deploy_platform/wizard/catalog.py
"""Static choices offered by the network creation wizard."""

import copy
from typing import Any, Dict, List


# ============================================
# Hosting
# ============================================

CLOUD_PROVIDERS = [
    {"value": "aws", "label": "Amazon Web Services (AWS)"},
    {"value": "gcp", "label": "Google Cloud Platform (GCP)"},
    {"value": "azure", "label": "Microsoft Azure"},
    {"value": "digital_ocean", "label": "Digital Ocean"},
    {"value": "custom", "label": "Custom (Self-Hosted)"},
]

REGIONS: Dict[str, List[Dict[str, str]]] = {
    "aws": [
        {"value": "us-east-1", "label": "US East (N. Virginia)"},
        {"value": "us-east-2", "label": "US East (Ohio)"},
        {"value": "us-west-1", "label": "US West (N. California)"},
        {"value": "us-west-2", "label": "US West (Oregon)"},
        {"value": "eu-west-1", "label": "EU (Ireland)"},
        {"value": "eu-central-1", "label": "EU (Frankfurt)"},
        {"value": "ap-northeast-1", "label": "Asia Pacific (Tokyo)"},
        {"value": "ap-southeast-1", "label": "Asia Pacific (Singapore)"},
    ],
    "gcp": [
        {"value": "us-central1", "label": "Iowa (us-central1)"},
        {"value": "us-east1", "label": "South Carolina (us-east1)"},
        {"value": "us-east4", "label": "Northern Virginia (us-east4)"},
        {"value": "us-west1", "label": "Oregon (us-west1)"},
        {"value": "europe-west1", "label": "Belgium (europe-west1)"},
        {"value": "europe-west3", "label": "Frankfurt (europe-west3)"},
        {"value": "asia-east1", "label": "Taiwan (asia-east1)"},
        {"value": "asia-southeast1", "label": "Singapore (asia-southeast1)"},
    ],
    "azure": [
        {"value": "eastus", "label": "East US (Virginia)"},
        {"value": "eastus2", "label": "East US 2 (Virginia)"},
        {"value": "westus", "label": "West US (California)"},
        {"value": "westus2", "label": "West US 2 (Washington)"},
        {"value": "northeurope", "label": "North Europe (Ireland)"},
        {"value": "westeurope", "label": "West Europe (Netherlands)"},
        {"value": "eastasia", "label": "East Asia (Hong Kong)"},
        {"value": "southeastasia", "label": "Southeast Asia (Singapore)"},
    ],
    "digital_ocean": [
        {"value": "nyc1", "label": "New York 1"},
        {"value": "nyc3", "label": "New York 3"},
        {"value": "sfo2", "label": "San Francisco 2"},
        {"value": "sfo3", "label": "San Francisco 3"},
        {"value": "ams3", "label": "Amsterdam 3"},
        {"value": "lon1", "label": "London 1"},
        {"value": "sgp1", "label": "Singapore 1"},
        {"value": "fra1", "label": "Frankfurt 1"},
    ],
    "custom": [
        {"value": "custom", "label": "Custom Environment"},
    ],
}

NODE_TYPES: Dict[str, List[Dict[str, str]]] = {
    "aws": [
        {"value": "t3.small", "label": "t3.small (2 vCPU, 2 GiB RAM)"},
        {"value": "t3.medium", "label": "t3.medium (2 vCPU, 4 GiB RAM)"},
        {"value": "t3.large", "label": "t3.large (2 vCPU, 8 GiB RAM)"},
        {"value": "m5.large", "label": "m5.large (2 vCPU, 8 GiB RAM)"},
        {"value": "m5.xlarge", "label": "m5.xlarge (4 vCPU, 16 GiB RAM)"},
        {"value": "m5.2xlarge", "label": "m5.2xlarge (8 vCPU, 32 GiB RAM)"},
    ],
    "gcp": [
        {"value": "e2-standard-2", "label": "e2-standard-2 (2 vCPU, 8 GiB RAM)"},
        {"value": "e2-standard-4", "label": "e2-standard-4 (4 vCPU, 16 GiB RAM)"},
        {"value": "e2-standard-8", "label": "e2-standard-8 (8 vCPU, 32 GiB RAM)"},
        {"value": "n2-standard-2", "label": "n2-standard-2 (2 vCPU, 8 GiB RAM)"},
        {"value": "n2-standard-4", "label": "n2-standard-4 (4 vCPU, 16 GiB RAM)"},
        {"value": "n2-standard-8", "label": "n2-standard-8 (8 vCPU, 32 GiB RAM)"},
    ],
    "azure": [
        {"value": "Standard_B2s", "label": "Standard_B2s (2 vCPU, 4 GiB RAM)"},
        {"value": "Standard_B2ms", "label": "Standard_B2ms (2 vCPU, 8 GiB RAM)"},
        {"value": "Standard_B4ms", "label": "Standard_B4ms (4 vCPU, 16 GiB RAM)"},
        {"value": "Standard_D2s_v3", "label": "Standard_D2s_v3 (2 vCPU, 8 GiB RAM)"},
        {"value": "Standard_D4s_v3", "label": "Standard_D4s_v3 (4 vCPU, 16 GiB RAM)"},
        {"value": "Standard_D8s_v3", "label": "Standard_D8s_v3 (8 vCPU, 32 GiB RAM)"},
    ],
    "digital_ocean": [
        {"value": "s-2vcpu-2gb", "label": "Basic (2 vCPU, 2 GB RAM)"},
        {"value": "s-2vcpu-4gb", "label": "Standard (2 vCPU, 4 GB RAM)"},
        {"value": "s-4vcpu-8gb", "label": "Premium (4 vCPU, 8 GB RAM)"},
        {"value": "c-4", "label": "CPU-Optimized (4 vCPU, 8 GB RAM)"},
        {"value": "g-2vcpu-8gb", "label": "General Purpose (2 vCPU, 8 GB RAM)"},
        {"value": "m-2vcpu-16gb", "label": "Memory-Optimized (2 vCPU, 16 GB RAM)"},
    ],
    "custom": [
        {"value": "custom-small", "label": "Small (2 CPU, 4 GB RAM)"},
        {"value": "custom-medium", "label": "Medium (4 CPU, 8 GB RAM)"},
        {"value": "custom-large", "label": "Large (8 CPU, 16 GB RAM)"},
        {"value": "custom-xlarge", "label": "X-Large (16 CPU, 32 GB RAM)"},
    ],
}

DISK_SIZES = [
    {"value": 100, "label": "100 GB"},
    {"value": 200, "label": "200 GB"},
    {"value": 500, "label": "500 GB"},
    {"value": 1000, "label": "1 TB"},
    {"value": 2000, "label": "2 TB"},
]


def provider_ids() -> List[str]:
    return [provider["value"] for provider in CLOUD_PROVIDERS]


def regions_for(provider: str) -> List[str]:
    return [region["value"] for region in REGIONS.get(provider, [])]


def node_types_for(provider: str) -> List[str]:
    return [node_type["value"] for node_type in NODE_TYPES.get(provider, [])]


# ============================================
# Governance
# ============================================

PROPOSAL_TYPES = [
    {
        "id": "text",
        "name": "Text Proposal",
        "description": "Simple text proposals for general governance decisions",
        "required": True,
    },
    {
        "id": "parameter_change",
        "name": "Parameter Change",
        "description": "Change parameters of modules without requiring a software upgrade",
        "required": True,
    },
    {
        "id": "community_pool_spend",
        "name": "Community Pool Spend",
        "description": "Propose spending from the community pool",
        "required": True,
    },
    {
        "id": "software_upgrade",
        "name": "Software Upgrade",
        "description": "Coordinate upgrades of the blockchain software",
        "required": False,
    },
    {
        "id": "cancel_software_upgrade",
        "name": "Cancel Software Upgrade",
        "description": "Cancel a previously approved software upgrade",
        "required": False,
    },
]

REQUIRED_PROPOSAL_TYPES = [t["id"] for t in PROPOSAL_TYPES if t["required"]]

# Fixed length of the post-vote phase in the governance timeline, in days
PROCESSING_PERIOD_DAYS = 1


# ============================================
# Modules
# ============================================

CORE_MODULES = ["bank", "staking", "distribution", "gov", "slashing"]

OPTIONAL_MODULES = ["ibc", "authz", "feegrant", "group", "mint", "nft", "wasm", "upgrade", "evidence", "params"]

MODULE_METADATA = {
    "bank": {
        "name": "Bank",
        "description": "Handles token transfers between accounts",
        "params": ["send_enabled", "default_send_enabled"],
    },
    "staking": {
        "name": "Staking",
        "description": "Manages proof-of-stake validation and delegation",
        "params": ["unbonding_time", "max_validators", "max_entries", "historical_entries", "bond_denom"],
    },
    "distribution": {
        "name": "Distribution",
        "description": "Distributes rewards to validators and delegators",
        "params": ["community_tax", "base_proposer_reward", "bonus_proposer_reward", "withdraw_addr_enabled"],
    },
    "gov": {
        "name": "Governance",
        "description": "On-chain governance proposals and voting",
        "params": ["deposit_params", "voting_params", "tally_params"],
    },
    "slashing": {
        "name": "Slashing",
        "description": "Penalties for validator misbehavior",
        "params": [
            "signed_blocks_window", "min_signed_per_window", "downtime_jail_duration",
            "slash_fraction_double_sign", "slash_fraction_downtime",
        ],
    },
    "ibc": {"name": "Inter-Blockchain Communication (IBC)", "description": "Cross-chain communication and token transfers", "params": []},
    "authz": {"name": "Authorization", "description": "Allows accounts to authorize others to perform actions on their behalf", "params": []},
    "feegrant": {"name": "Fee Grant", "description": "Allows accounts to pay fees for other accounts", "params": []},
    "group": {"name": "Group", "description": "Management of on-chain multisig groups and accounts", "params": []},
    "mint": {
        "name": "Mint",
        "description": "Token minting and inflation management",
        "params": ["mint_denom", "inflation_rate_change", "inflation_max", "inflation_min", "goal_bonded", "blocks_per_year"],
    },
    "nft": {"name": "NFT", "description": "Non-fungible token management", "params": []},
    "wasm": {
        "name": "CosmWasm",
        "description": "Support for WebAssembly smart contracts",
        "params": ["code_upload_access", "instantiate_default_permission"],
    },
    "upgrade": {"name": "Upgrade", "description": "Coordinated software upgrades", "params": []},
    "evidence": {"name": "Evidence", "description": "Handles evidence of validator misbehavior", "params": ["max_evidence_age"]},
    "params": {"name": "Parameters", "description": "Global parameter store", "params": []},
}


# ============================================
# Defaults
# ============================================

DEFAULT_VALIDATOR = {
    "moniker": "",
    "power": 100,
    "commission": {
        "rate": 5,
        "max_rate": 20,
        "max_change_rate": 1,
    },
    "details": "",
    "website": "",
    "identity": "",
}

_DEFAULT_CONFIG: Dict[str, Any] = {
    # Basic info
    "name": "",
    "description": "",
    "provider": "",
    "region": "",
    "node_type": "",
    "disk_size": "",
    "advanced_mode": False,

    "token_economics": {
        "name": "",
        "symbol": "",
        "decimals": 6,
        "initial_supply": 100000000,
        "max_supply": None,
        "inflation_rate": 7,
        "inflation_rate_change": 0.13,
        "inflation_max": 20,
        "inflation_min": 2,
        "bonded_ratio_goal": 67,
        "blocks_per_year": 6311520,
        "community_tax": 2,
        "validators_allocation": 40,
        "community_pool_allocation": 30,
        "strategic_reserve_allocation": 20,
        "airdrop_allocation": 10,
    },

    "validators": {
        "count": 4,
        "block_time": 5,
        "unbonding_time": 21,
        "max_validators": 100,
        "max_entries": 7,
        "historical_entries": 10000,
        "use_custom_validators": False,
        "custom_validators": [],
    },

    "governance": {
        "min_deposit": 10000,
        "max_deposit_period": 14,
        "voting_period": 14,
        "quorum": 33.4,
        "threshold": 50,
        "veto_threshold": 33.4,
        "max_title_length": 140,
        "max_description_length": 10000,
        "enabled_proposal_types": [t["id"] for t in PROPOSAL_TYPES],
    },

    "modules": {
        "enabled": ["bank", "staking", "distribution", "gov", "slashing", "ibc", "authz", "feegrant"],
        "params": {},
    },
}


def default_network_config() -> Dict[str, Any]:
    """Fresh copy of the wizard's starting configuration."""
    return copy.deepcopy(_DEFAULT_CONFIG)


def default_validator(**overrides) -> Dict[str, Any]:
    validator = copy.deepcopy(DEFAULT_VALIDATOR)
    validator.update(overrides)
    return validator


def catalog() -> Dict[str, Any]:
    """Everything a client needs to render the wizard's choices."""
    return {
        "providers": CLOUD_PROVIDERS,
        "regions": REGIONS,
        "node_types": NODE_TYPES,
        "disk_sizes": DISK_SIZES,
        "proposal_types": PROPOSAL_TYPES,
        "core_modules": CORE_MODULES,
        "optional_modules": OPTIONAL_MODULES,
        "module_metadata": MODULE_METADATA,
    }
