#deploy_platform\container.py

"""Dependency injection container - wires all services together."""

from typing import Optional

from deploy_platform.admin.logs import SystemLogService
from deploy_platform.admin.networks import NetworkService
from deploy_platform.admin.reporting import ReportingService
from deploy_platform.admin.system import SystemService
from deploy_platform.admin.users import UserService
from deploy_platform.core.events import LoggingEventEmitter, MultiEventEmitter, SystemLogEmitter
from deploy_platform.infrastructure.host import HostMetrics
from deploy_platform.infrastructure.postgres.config import Settings, settings as default_settings
from deploy_platform.infrastructure.postgres.database import Database
from deploy_platform.infrastructure.postgres.log_repository import SqlSystemLogRepository
from deploy_platform.infrastructure.postgres.network_repository import SqlNetworkRepository
from deploy_platform.infrastructure.postgres.user_repository import SqlUserRepository
from deploy_platform.infrastructure.supervisor import ProcessSupervisor, ShellProcessSupervisor


class Container:
    """Holds the database handle, repositories and services of one app."""

    def __init__(
        self,
        settings: Settings,
        database: Database,
        supervisor: ProcessSupervisor,
        host_metrics: HostMetrics,
    ):
        self.settings = settings
        self.database = database
        self.supervisor = supervisor
        self.host_metrics = host_metrics

        # ============================================
        # REPOSITORIES
        # ============================================

        self.user_repository = SqlUserRepository(database.session_factory)
        self.network_repository = SqlNetworkRepository(database.session_factory)
        self.log_repository = SqlSystemLogRepository(database.session_factory)

        # ============================================
        # EVENTS
        # ============================================

        self.emitters = MultiEventEmitter([
            SystemLogEmitter(self.log_repository),
            LoggingEventEmitter(),
        ])

        # ============================================
        # SERVICES
        # ============================================

        self.user_service = UserService(
            user_repo=self.user_repository,
            event_emitters=self.emitters,
        )

        self.network_service = NetworkService(
            network_repo=self.network_repository,
            user_repo=self.user_repository,
            event_emitters=self.emitters,
        )

        self.log_service = SystemLogService(
            log_repo=self.log_repository,
            user_repo=self.user_repository,
            network_repo=self.network_repository,
        )

        self.reporting_service = ReportingService(
            user_repo=self.user_repository,
            network_repo=self.network_repository,
            log_repo=self.log_repository,
            host_metrics=host_metrics,
            database=database,
        )

        self.system_service = SystemService(
            host_metrics=host_metrics,
            supervisor=supervisor,
            log_repo=self.log_repository,
            database=database,
            event_emitters=self.emitters,
        )


def build_container(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    supervisor: Optional[ProcessSupervisor] = None,
    host_metrics: Optional[HostMetrics] = None,
) -> Container:
    """Build a container; anything not passed in comes from settings."""
    settings = settings or default_settings
    return Container(
        settings=settings,
        database=database or Database(config=settings),
        supervisor=supervisor or ShellProcessSupervisor.from_settings(settings),
        host_metrics=host_metrics or HostMetrics(),
    )
