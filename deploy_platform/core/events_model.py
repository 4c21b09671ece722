"""Audit event models for admin operations."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from deploy_platform.core.models import LogLevel, NetworkStatus, utcnow


SOURCE = "admin-panel"


@dataclass
class AuditEvent:
    """Base audit event; persisted as a SystemLog entry."""

    event_type: str
    level: LogLevel
    message: str
    source: str = SOURCE
    details: Optional[Dict[str, Any]] = None
    user_id: Optional[UUID] = None
    network_id: Optional[UUID] = None
    timestamp: datetime = field(default_factory=utcnow)

    # -------------------------
    # NETWORKS
    # -------------------------

    @staticmethod
    def network_created(network):
        return AuditEvent(
            event_type="network.created",
            level=LogLevel.INFO,
            message=f"Network {network.name} ({network.chain_id}) created",
            network_id=network.network_id,
        )

    @staticmethod
    def network_updated(network, changed_fields):
        return AuditEvent(
            event_type="network.updated",
            level=LogLevel.INFO,
            message=f"Network {network.name} ({network.chain_id}) updated",
            details={"fields": list(changed_fields)},
            network_id=network.network_id,
        )

    @staticmethod
    def network_deleted(network):
        # The record is gone, so the id travels in details instead of network_id
        return AuditEvent(
            event_type="network.deleted",
            level=LogLevel.WARNING,
            message=f"Network {network.name} ({network.chain_id}) deleted",
            details={"networkId": str(network.network_id)},
        )

    @staticmethod
    def network_status_changed(network, previous: NetworkStatus):
        return AuditEvent(
            event_type="network.status_changed",
            level=LogLevel.ERROR if network.status == NetworkStatus.ERROR else LogLevel.INFO,
            message=(
                f"Network {network.name} ({network.chain_id}) status changed "
                f"from {previous.value} to {network.status.value}"
            ),
            network_id=network.network_id,
        )

    @staticmethod
    def validator_saved(network, validator, created: bool):
        verb = "added to" if created else "updated on"
        return AuditEvent(
            event_type="network.validator_saved",
            level=LogLevel.INFO,
            message=f"Validator {validator.name} {verb} network {network.name} ({network.chain_id})",
            details={"validatorId": validator.validator_id},
            network_id=network.network_id,
        )

    @staticmethod
    def validator_removed(network, validator):
        return AuditEvent(
            event_type="network.validator_removed",
            level=LogLevel.INFO,
            message=f"Validator {validator.name} removed from network {network.name} ({network.chain_id})",
            details={"validatorId": validator.validator_id},
            network_id=network.network_id,
        )

    # -------------------------
    # USERS
    # -------------------------

    @staticmethod
    def user_created(user):
        return AuditEvent(
            event_type="user.created",
            level=LogLevel.INFO,
            message=f"User {user.email} created",
            user_id=user.user_id,
        )

    @staticmethod
    def user_updated(user, changed_fields):
        return AuditEvent(
            event_type="user.updated",
            level=LogLevel.INFO,
            message=f"User {user.email} updated",
            details={"fields": list(changed_fields)},
            user_id=user.user_id,
        )

    @staticmethod
    def user_deleted(user):
        return AuditEvent(
            event_type="user.deleted",
            level=LogLevel.WARNING,
            message=f"User {user.email} deleted",
            details={"userId": str(user.user_id)},
        )

    @staticmethod
    def password_reset(user):
        return AuditEvent(
            event_type="user.password_reset",
            level=LogLevel.INFO,
            message=f"Password reset for user {user.email}",
            user_id=user.user_id,
        )

    # -------------------------
    # SYSTEM
    # -------------------------

    @staticmethod
    def service_restarted(service: str, result: Dict[str, Any]):
        return AuditEvent(
            event_type="system.service_restarted",
            level=LogLevel.INFO,
            message=f"Service {service} restarted",
            details={"result": result},
        )
