# deploy_platform/admin/system.py
"""Host status and sibling service control."""

import logging
from datetime import timedelta
from typing import Any, Dict

from deploy_platform.core.events_model import AuditEvent
from deploy_platform.core.repository import SystemLogRepository
from deploy_platform.core.models import utcnow
from deploy_platform.infrastructure.host import HostMetrics
from deploy_platform.infrastructure.supervisor import SERVICES, ProcessSupervisor


logger = logging.getLogger(__name__)


ALERT_WINDOW = timedelta(hours=24)


class SystemService:
    """
    Operational controller for the admin panel.

    Restarts are not retried: a failing stop or start surfaces as
    ServiceControlError and no audit entry is written.
    """

    def __init__(
        self,
        host_metrics: HostMetrics,
        supervisor: ProcessSupervisor,
        log_repo: SystemLogRepository,
        database,
        event_emitters,
    ):
        self._host = host_metrics
        self._supervisor = supervisor
        self._logs = log_repo
        self._database = database
        self._emitters = event_emitters

    def get_system_status(self) -> Dict[str, Any]:
        services = {"database": self._database.status()}
        for name in SERVICES:
            services[name] = self._supervisor.status(name)

        return {
            "system": self._host.snapshot(),
            "services": services,
            "alerts": {
                "recentErrorCount": self._logs.count_errors(since=utcnow() - ALERT_WINDOW),
            },
        }

    def restart_service(self, service: str) -> Dict[str, Any]:
        logger.info(f"[system] restarting {service}")

        result = self._supervisor.restart(service)

        self._emitters.emit([AuditEvent.service_restarted(service, result)])
        logger.info(f"[system] {service} restarted")
        return result
