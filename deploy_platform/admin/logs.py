# deploy_platform/admin/logs.py
"""System log viewer service."""

import logging
import math
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID, uuid4

from deploy_platform.core.errors import EntityNotFound, PlatformValidationError
from deploy_platform.core.models import LogLevel, SystemLog, parse_enum
from deploy_platform.core.repository import NetworkRepository, SystemLogRepository, UserRepository
from deploy_platform.core.schemas import SystemLogOut


logger = logging.getLogger(__name__)


DEFAULT_PAGE_SIZE = 100


def present_logs(
    logs: Iterable[SystemLog],
    user_repo: UserRepository,
    network_repo: NetworkRepository,
) -> List[SystemLogOut]:
    """Views with user, network and resolver populated."""
    logs = list(logs)

    user_ids = {log.user_id for log in logs if log.user_id}
    user_ids |= {log.resolved_by for log in logs if log.resolved_by}
    network_ids = {log.network_id for log in logs if log.network_id}

    users = user_repo.list_by_ids(user_ids) if user_ids else {}
    networks = network_repo.list_by_ids(network_ids) if network_ids else {}

    return [SystemLogOut.from_domain(log, users, networks) for log in logs]


def paginate(page: Any, limit: Any, default_limit: int) -> Dict[str, int]:
    """Normalize page/limit query values into offset bounds."""
    try:
        page = int(page) if page is not None else 1
        limit = int(limit) if limit is not None else default_limit
    except (TypeError, ValueError):
        raise PlatformValidationError("Page and limit must be integers")

    if page < 1 or limit < 1:
        raise PlatformValidationError("Page and limit must be at least 1")

    return {"page": page, "limit": limit, "offset": (page - 1) * limit}


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit)


class SystemLogService:

    def __init__(
        self,
        log_repo: SystemLogRepository,
        user_repo: UserRepository,
        network_repo: NetworkRepository,
    ):
        self._repo = log_repo
        self._user_repo = user_repo
        self._network_repo = network_repo

    def list_logs(
        self,
        level: Optional[str] = None,
        source: Optional[str] = None,
        resolved: Optional[bool] = None,
        page: Any = None,
        limit: Any = None,
    ) -> Dict[str, Any]:
        """
        Filtered page of logs, newest first.

        Returns ``{"logs", "count", "total", "page", "pages"}`` where ``count``
        is the size of this page and ``total`` the size of the filtered set.
        """
        bounds = paginate(page, limit, DEFAULT_PAGE_SIZE)
        filters = {
            "level": parse_enum(LogLevel, level, "Invalid log level") if level else None,
            "source": source or None,
            "resolved": resolved,
        }

        logs = self._repo.list(offset=bounds["offset"], limit=bounds["limit"], **filters)
        total = self._repo.count(**filters)

        return {
            "logs": logs,
            "count": len(logs),
            "total": total,
            "page": bounds["page"],
            "pages": page_count(total, bounds["limit"]),
        }

    def present(self, logs: Iterable[SystemLog]) -> List[SystemLogOut]:
        return present_logs(logs, self._user_repo, self._network_repo)

    def get_log(self, log_id: UUID) -> SystemLog:
        log = self._repo.get(log_id)
        if not log:
            raise EntityNotFound("Log not found")
        return log

    def create_log(
        self,
        level: Optional[str],
        source: Optional[str],
        message: Optional[str],
        details: Any = None,
        user_id: Optional[UUID] = None,
        network_id: Optional[UUID] = None,
    ) -> SystemLog:
        if not level or not source or not message:
            raise PlatformValidationError("Please provide level, source, and message")
        self._check_refs(user_id, network_id)

        log = SystemLog(
            log_id=uuid4(),
            level=parse_enum(LogLevel, level, "Invalid log level"),
            source=source,
            message=message,
            details=details,
            user_id=user_id,
            network_id=network_id,
        )
        self._repo.create(log)

        logger.info(f"[logs] {log.level.value} from {log.source}: {log.message}")
        return log

    def resolve_log(
        self,
        log_id: UUID,
        user_id: Optional[UUID] = None,
        action: Optional[str] = None,
    ) -> SystemLog:
        """
        Mark a log resolved. Resolving twice overwrites resolver and time;
        an action entry is appended only when ``action`` is given.
        """
        log = self.get_log(log_id)
        self._check_refs(user_id)
        log.resolve(user_id, action)
        self._repo.update(log)

        logger.info(f"[logs] resolved log {log.log_id}")
        return log

    def _check_refs(self, user_id: Optional[UUID] = None, network_id: Optional[UUID] = None) -> None:
        if user_id and not self._user_repo.get(user_id):
            raise PlatformValidationError("Referenced user not found")
        if network_id and not self._network_repo.get(network_id):
            raise PlatformValidationError("Referenced network not found")
