# deploy_platform/admin/reporting.py
"""Read-only aggregations behind the dashboard and stats endpoints."""

from datetime import timedelta
from typing import Any, Dict

from deploy_platform.admin.logs import page_count, paginate, present_logs
from deploy_platform.admin.networks import present_networks
from deploy_platform.core.models import ERROR_LEVELS, NetworkStatus, utcnow
from deploy_platform.core.repository import NetworkRepository, SystemLogRepository, UserRepository
from deploy_platform.core.schemas import UserActivityOut
from deploy_platform.infrastructure.host import HostMetrics, host_summary


RECENT_NETWORKS = 5
RECENT_DEPLOYMENTS = 5
DEPLOYMENT_WINDOW = timedelta(days=7)
RECENT_ERRORS = 5
RECENT_LOGS = 10
RECENT_LOGINS = 5
FEED_PAGE_SIZE = 20


class ReportingService:
    """
    Dashboard, quick stats, activity feed and network stats.

    Every figure is computed on request; nothing is cached.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        network_repo: NetworkRepository,
        log_repo: SystemLogRepository,
        host_metrics: HostMetrics,
        database,
    ):
        self._users = user_repo
        self._networks = network_repo
        self._logs = log_repo
        self._host = host_metrics
        self._database = database

    # ============================================
    # DASHBOARD
    # ============================================

    def dashboard(self) -> Dict[str, Any]:
        total_users = self._users.count()
        active_users = self._users.count(is_active=True)

        recent_errors = self._logs.list(levels=ERROR_LEVELS, resolved=False, limit=RECENT_ERRORS)
        recent_logs = self._logs.list(limit=RECENT_LOGS)

        return {
            "users": {
                "total": total_users,
                "active": active_users,
                "inactive": total_users - active_users,
                "byRole": self._users.count_by_role(),
            },
            "networks": {
                "total": self._networks.count(),
                "byStatus": self._networks.count_by_status(),
                "byDeployment": self._networks.count_by_deployment_type(),
                "recent": present_networks(self._networks.list_recent(RECENT_NETWORKS), self._users),
                "recentDeployments": present_networks(
                    self._networks.list_deployed_since(utcnow() - DEPLOYMENT_WINDOW, RECENT_DEPLOYMENTS),
                    self._users,
                ),
            },
            "system": host_summary(self._host, self._database.status()),
            "validators": self._networks.validator_stats(),
            "logs": {
                "recentErrors": present_logs(recent_errors, self._users, self._networks),
                "recentLogs": present_logs(recent_logs, self._users, self._networks),
            },
            "activity": [
                UserActivityOut.from_domain(user)
                for user in self._users.list_recent_logins(RECENT_LOGINS)
            ],
        }

    def quick_stats(self) -> Dict[str, int]:
        return {
            "totalUsers": self._users.count(),
            "totalNetworks": self._networks.count(),
            "activeNetworks": self._networks.count(status=NetworkStatus.ACTIVE),
            "unresolvedErrors": self._logs.count_errors(unresolved_only=True),
        }

    def activity_feed(self, page: Any = None, limit: Any = None) -> Dict[str, Any]:
        bounds = paginate(page, limit, FEED_PAGE_SIZE)

        logs = self._logs.list(offset=bounds["offset"], limit=bounds["limit"])
        total = self._logs.count()

        return {
            "logs": present_logs(logs, self._users, self._networks),
            "pagination": {
                "total": total,
                "page": bounds["page"],
                "pages": page_count(total, bounds["limit"]),
                "limit": bounds["limit"],
            },
        }

    # ============================================
    # NETWORKS
    # ============================================

    def network_stats(self) -> Dict[str, Any]:
        return {
            "total": self._networks.count(),
            "byStatus": self._networks.count_by_status(),
            "byDeploymentType": self._networks.count_by_deployment_type(),
            "activeValidators": self._networks.count_active_validators(),
            "recentNetworks": present_networks(self._networks.list_recent(RECENT_NETWORKS), self._users),
        }
