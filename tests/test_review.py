"""Test the wizard's review step."""

import pytest

from deploy_platform.core.errors import ConfigurationInvalid
from deploy_platform.wizard.form_state import NetworkFormState
from deploy_platform.wizard.review import (
    COMPLETED, DEPLOYMENT_PHASES, FAILED, ReviewOrchestrator,
    estimate_monthly_cost, format_token_amount,
)
from deploy_platform.wizard.catalog import default_network_config


def valid_form():
    config = default_network_config()
    config.update({
        "name": "cosmic-testnet",
        "provider": "aws",
        "region": "us-east-1",
        "node_type": "t3.medium",
        "disk_size": 100,
    })
    config["token_economics"].update({"name": "Cosmic Token", "symbol": "CSM"})
    return NetworkFormState(config)


class FakeSleep:

    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


class TestCostEstimate:
    """Test the monthly cost formula."""

    def test_known_node_type(self):
        # (40 + 10) * 4 + 20
        assert estimate_monthly_cost("aws", "t3.medium", 100, 4) == 220

    def test_defaults(self):
        # aws fallback price 50, 100 GB, 4 validators
        assert estimate_monthly_cost() == 260

    def test_disk_and_count_scale(self):
        # (70 + 50) * 10 + 20
        assert estimate_monthly_cost("gcp", "e2-standard-2", 500, 10) == 1220

    def test_unknown_provider_uses_fallback_price(self):
        assert estimate_monthly_cost("custom", "custom-small", 100, 1) == 80

    def test_is_deterministic(self):
        assert estimate_monthly_cost("azure", "Standard_B2s", "200", "3") == (
            estimate_monthly_cost("azure", "Standard_B2s", 200, 3)
        )


class TestFormatTokenAmount:

    @pytest.mark.parametrize("amount, text", [
        (None, "0"),
        (0, "0"),
        (500, "500"),
        (2500, "2.50 Thousand"),
        (40_000_000, "40.00 Million"),
        (1_500_000_000, "1.50 Billion"),
    ])
    def test_format(self, amount, text):
        assert format_token_amount(amount) == text


class TestReviewOrchestrator:
    """Test validation gating and the simulated deployment."""

    def test_summary(self):
        review = ReviewOrchestrator(valid_form())

        summary = review.summary()

        assert summary["errors"] == {}
        assert summary["estimated_monthly_cost"] == 220
        assert summary["token_distribution"][0]["formatted"] == "40.00 Million"

    def test_submit_refuses_invalid_config(self):
        review = ReviewOrchestrator(NetworkFormState(), sleep=FakeSleep())

        with pytest.raises(ConfigurationInvalid) as exc_info:
            review.submit()

        assert "name" in exc_info.value.errors
        assert review.progress is None

    def test_unconfirmed_submit_does_nothing(self):
        submitted = []
        review = ReviewOrchestrator(valid_form(), on_submit=submitted.append, sleep=FakeSleep())

        assert review.submit(confirm=False) is None
        assert submitted == []

    def test_phases_complete_in_order(self):
        """Test every phase runs once and the config is handed over."""
        sleep = FakeSleep()
        snapshots = []
        review = ReviewOrchestrator(
            valid_form(),
            on_submit=lambda config: config["name"],
            phase_interval=0.5,
            sleep=sleep,
            on_progress=lambda progress: snapshots.append([s["status"] for s in progress.steps]),
        )

        progress = review.submit()

        assert progress.finished
        assert [step["label"] for step in progress.steps] == DEPLOYMENT_PHASES
        assert progress.result == "cosmic-testnet"
        assert sleep.calls == [0.5] * len(DEPLOYMENT_PHASES)
        assert snapshots[0][0] == "in_progress"
        assert snapshots[-1] == [COMPLETED] * len(DEPLOYMENT_PHASES)

    def test_submit_failure_marks_step(self):
        def explode(config):
            raise RuntimeError("create failed")

        review = ReviewOrchestrator(valid_form(), on_submit=explode, sleep=FakeSleep())

        with pytest.raises(RuntimeError, match="create failed"):
            review.submit()

        assert review.progress.steps[-1]["status"] == FAILED
        assert not review.progress.finished
