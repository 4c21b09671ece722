# deploy_platform/core/state_machine.py

from datetime import datetime
from typing import Optional

from deploy_platform.core.models import Network, NetworkStatus, utcnow


class NetworkStateMachine:
    """
    Applies a status change to a network.

    Every status may follow every other; only the timestamps carry rules:
    - entering ACTIVE from another status stamps last_active_at
    - deployed_at is stamped on the first entry into ACTIVE and never again
    """

    @staticmethod
    def transition(
        network: Network,
        new_status: NetworkStatus,
        *,
        now: Optional[datetime] = None,
    ) -> NetworkStatus:
        """Move ``network`` to ``new_status``; returns the previous status."""
        now = now or utcnow()

        previous = network.status

        if new_status == NetworkStatus.ACTIVE and previous != NetworkStatus.ACTIVE:
            if network.deployed_at is None:
                network.deployed_at = now
            network.last_active_at = now

        network.status = new_status
        network.updated_at = now
        return previous
