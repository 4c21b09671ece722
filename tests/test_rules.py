"""Test the wizard's field rules."""

import pytest

from deploy_platform.wizard import rules
from deploy_platform.wizard.catalog import default_network_config


def valid_config():
    config = default_network_config()
    config.update({
        "name": "cosmic-testnet",
        "provider": "aws",
        "region": "us-east-1",
        "node_type": "t3.medium",
        "disk_size": 100,
    })
    config["token_economics"].update({"name": "Cosmic Token", "symbol": "CSM"})
    return config


class TestToNumber:

    @pytest.mark.parametrize("raw, expected", [
        (5, 5),
        (2.5, 2.5),
        ("14", 14.0),
        (" 33.4 ", 33.4),
    ])
    def test_numeric_input(self, raw, expected):
        assert rules.to_number(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", True, float("nan"), "inf"])
    def test_non_numeric_input(self, raw):
        assert rules.to_number(raw) is None


class TestGovernanceRule:
    """Test governance bounds."""

    @pytest.mark.parametrize("value, message", [
        (0, "Voting period is required"),
        ("", "Voting period is required"),
        (0.5, "Voting period must be at least 1 day"),
        (91, "Voting period must be at most 90 days"),
        (14, None),
    ])
    def test_voting_period(self, value, message):
        assert rules.governance_rule("voting_period", value) == message

    @pytest.mark.parametrize("value, message", [
        (None, "Quorum is required"),
        (-1, "Quorum must be non-negative"),
        (101, "Quorum must be at most 100%"),
        (0, None),
        (33.4, None),
    ])
    def test_quorum(self, value, message):
        assert rules.governance_rule("quorum", value) == message

    def test_threshold_must_be_positive(self):
        assert rules.governance_rule("threshold", 0) == "Threshold must be greater than 0"
        assert rules.governance_rule("threshold", 50) is None

    def test_min_deposit(self):
        assert rules.governance_rule("min_deposit", 0) == "Minimum deposit is required"
        assert rules.governance_rule("min_deposit", 2_000_000_000) == "Minimum deposit is too large"


class TestBasicInfoRule:

    def test_network_name(self):
        assert rules.basic_info_rule("name", "") == "Network name is required"
        assert rules.basic_info_rule("name", "ab") == "Network name must be at least 3 characters"
        assert rules.basic_info_rule("name", "My_Chain") == (
            "Network name can only contain lowercase letters, numbers, and hyphens"
        )
        assert rules.basic_info_rule("name", "my-chain-1") is None

    def test_non_text_values(self):
        assert rules.basic_info_rule("name", 12345) == "Network name must be text"
        assert rules.basic_info_rule("description", ["x"]) == "Description must be text"
        assert rules.token_economics_rule("name", 7) == "Token name must be text"
        assert rules.token_economics_rule("symbol", {"a": 1}) == "Token symbol must be text"

    def test_provider(self):
        assert rules.basic_info_rule("provider", "") == "Cloud provider is required"
        assert rules.basic_info_rule("provider", "linode") == "Unsupported cloud provider"

    def test_region_must_belong_to_provider(self):
        """Test region membership is checked against the chosen provider."""
        context = {"provider": "gcp"}

        assert rules.basic_info_rule("region", "us-east-1", context) == (
            "Region is not available for the selected provider"
        )
        assert rules.basic_info_rule("region", "us-east1", context) is None

    def test_node_type_must_belong_to_provider(self):
        context = {"provider": "aws"}

        assert rules.basic_info_rule("node_type", "e2-standard-2", context) == (
            "Node type is not available for the selected provider"
        )
        assert rules.basic_info_rule("node_type", "t3.small", context) is None


class TestTokenEconomicsRule:

    def test_symbol(self):
        assert rules.token_economics_rule("symbol", "") == "Token symbol is required"
        assert rules.token_economics_rule("symbol", "A") == "Token symbol must be at least 2 characters"
        assert rules.token_economics_rule("symbol", "csm") == "Token symbol must contain only uppercase letters"
        assert rules.token_economics_rule("symbol", "CSM") is None

    def test_inflation_bounds_follow_rate(self):
        """Test max/min inflation are compared to the inflation rate."""
        context = {"inflation_rate": 7}

        assert rules.token_economics_rule("inflation_max", 5, context) == (
            "Max inflation must be greater than or equal to inflation rate"
        )
        assert rules.token_economics_rule("inflation_min", 8, context) == (
            "Min inflation must be less than or equal to inflation rate"
        )

    def test_optional_fields_may_be_empty(self):
        assert rules.token_economics_rule("community_tax", None) is None

    def test_allocation_total(self):
        """Test the four allocations must sum to exactly 100."""
        section = {
            "validators_allocation": 40,
            "community_pool_allocation": 30,
            "strategic_reserve_allocation": 20,
            "airdrop_allocation": 10,
        }
        assert rules.allocation_total_rule(section) is None

        section["airdrop_allocation"] = 15
        assert rules.allocation_total_rule(section) == "Total allocation must equal 100%"


class TestValidatorsRule:
    """Test validator section bounds."""

    @pytest.mark.parametrize("value, message", [
        (0, "Number of validators is required"),
        (0.5, "Must have at least 1 validator"),
        (51, "Maximum 50 validators allowed"),
        (50, None),
        (1, None),
    ])
    def test_count(self, value, message):
        assert rules.validators_rule("count", value) == message

    def test_max_validators_not_below_count(self):
        context = {"count": 10}

        assert rules.validators_rule("max_validators", 5, context) == "Max validators must be at least 10"
        assert rules.validators_rule("max_validators", 10, context) is None


class TestValidatorEntryRule:
    """Test rules for one custom validator."""

    def entry(self, **overrides):
        entry = {
            "moniker": "node-one",
            "power": 100,
            "commission": {"rate": 5, "max_rate": 20, "max_change_rate": 1},
            "website": "",
            "identity": "",
        }
        entry.update(overrides)
        return entry

    def test_valid_entry(self):
        assert rules.validate_validator_entry(self.entry()) == {}

    def test_identity_pattern(self):
        """Test identity must be 16 uppercase hex characters."""
        assert rules.validate_validator_entry(self.entry(identity="0123456789ABCDEF")) == {}
        assert rules.validate_validator_entry(self.entry(identity="xyz")) == {
            "identity": "Identity must be a 16-character hex string",
        }

    def test_website(self):
        assert rules.validate_validator_entry(self.entry(website="https://node.example.com")) == {}
        assert rules.validate_validator_entry(self.entry(website="not a url")) == {
            "website": "Please enter a valid URL",
        }

    def test_moniker_and_power(self):
        errors = rules.validate_validator_entry(self.entry(moniker="ab", power=0))

        assert errors == {
            "moniker": "Name must be at least 3 characters",
            "power": "Power must be at least 1",
        }
        assert rules.validator_entry_rule("power", 1001) == "Power must be at most 1000"

    def test_commission_rate_above_max_rate(self):
        """Test the commission fields are checked against each other."""
        errors = rules.validate_validator_entry(self.entry(
            commission={"rate": 25, "max_rate": 20, "max_change_rate": 30},
        ))

        assert errors == {
            "commission.rate": "Rate must be at most 20%",
            "commission.max_rate": "Max rate must be at least the commission rate",
            "commission.max_change_rate": "Max change rate must be at most the max rate",
        }

    def test_zero_max_rate_bounds_the_other_commission_fields(self):
        errors = rules.validate_validator_entry(self.entry(
            commission={"rate": 0, "max_rate": 0, "max_change_rate": 5},
        ))

        assert errors == {"commission.max_change_rate": "Max change rate must be at most the max rate"}
        assert rules.validator_entry_rule(
            "commission.rate", 1, {"commission": {"max_rate": 0}},
        ) == "Rate must be at most 0%"

    def test_non_text_values(self):
        errors = rules.validate_validator_entry(self.entry(moniker=12345, website=42, identity=["A"]))

        assert errors == {
            "moniker": "Validator name must be text",
            "website": "Please enter a valid URL",
            "identity": "Identity must be a 16-character hex string",
        }


class TestModulesRule:

    def test_core_modules_required(self):
        message = rules.modules_rule({"enabled": ["bank", "staking", "gov"]})

        assert message == "The following core modules are required: distribution, slashing"

    def test_all_core_modules_present(self):
        assert rules.modules_rule({"enabled": ["bank", "staking", "distribution", "gov", "slashing"]}) is None


class TestValidateConfig:
    """Test whole-config validation."""

    def test_default_config_lists_missing_inputs(self):
        errors = rules.validate_config(default_network_config())

        assert set(errors) == {
            "name", "provider", "region", "node_type", "disk_size",
            "token_economics.name", "token_economics.symbol",
        }

    def test_complete_config_is_valid(self):
        assert rules.validate_config(valid_config()) == {}

    def test_errors_are_keyed_by_path(self):
        config = valid_config()
        config["governance"]["quorum"] = 150
        config["modules"]["enabled"] = ["bank"]
        config["validators"]["use_custom_validators"] = True
        config["validators"]["custom_validators"] = [{"moniker": "", "power": 10, "commission": {}}]

        errors = rules.validate_config(config)

        assert errors["governance.quorum"] == "Quorum must be at most 100%"
        assert errors["modules.enabled"].startswith("The following core modules are required")
        assert errors["validators.custom_validators.0.moniker"] == "Validator name is required"

    def test_rules_do_not_mutate_input(self):
        config = valid_config()
        snapshot = default_network_config()
        snapshot.update({k: config[k] for k in ("name", "provider", "region", "node_type", "disk_size")})
        snapshot["token_economics"].update({"name": "Cosmic Token", "symbol": "CSM"})

        rules.validate_config(config)

        assert config == snapshot

    def test_malformed_sections_are_field_errors(self):
        config = valid_config()
        config["governance"] = "fast"
        config["validators"] = {"use_custom_validators": True, "custom_validators": ["node-one"], "count": 4,
                                "block_time": 5, "unbonding_time": 21, "max_validators": 100}
        config["modules"] = {"enabled": 3}

        errors = rules.validate_config(config)

        assert errors["governance.voting_period"] == "Voting period is required"
        assert errors["validators.custom_validators.0"] == "Validator entry must be an object"
        assert errors["modules.enabled"].startswith("The following core modules are required")
