"""System log repository."""

import logging
from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from deploy_platform.core.errors import EntityNotFound, PersistenceError
from deploy_platform.core.models import ERROR_LEVELS, LogAction, LogLevel, SystemLog, as_utc
from deploy_platform.core.repository import SystemLogRepository
from deploy_platform.infrastructure.postgres.models import SystemLogORM


logger = logging.getLogger(__name__)


def log_to_orm(log: SystemLog) -> SystemLogORM:
    """Convert log domain model to ORM."""
    return SystemLogORM(
        log_id=log.log_id,
        level=log.level,
        source=log.source,
        message=log.message,
        details=log.details,
        user_id=log.user_id,
        network_id=log.network_id,
        timestamp=log.timestamp,
        resolved=log.resolved,
        resolved_by=log.resolved_by,
        resolved_at=log.resolved_at,
        actions=[action.to_dict() for action in log.actions],
    )


def orm_to_log(orm: SystemLogORM) -> SystemLog:
    """Convert ORM to log domain model."""
    return SystemLog(
        log_id=orm.log_id,
        level=orm.level,
        source=orm.source,
        message=orm.message,
        details=orm.details,
        user_id=orm.user_id,
        network_id=orm.network_id,
        timestamp=as_utc(orm.timestamp),
        resolved=orm.resolved,
        resolved_by=orm.resolved_by,
        resolved_at=as_utc(orm.resolved_at),
        actions=[LogAction.from_dict(action) for action in (orm.actions or [])],
    )


class SqlSystemLogRepository(SystemLogRepository):
    """Repository for system log entries."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def _get_session(self):
        return self._session_factory()

    def _filtered(self, query, level=None, source=None, resolved=None, levels=None, since=None):
        if level is not None:
            query = query.filter(SystemLogORM.level == level)
        if levels is not None:
            query = query.filter(SystemLogORM.level.in_(list(levels)))
        if source is not None:
            query = query.filter(SystemLogORM.source == source)
        if resolved is not None:
            query = query.filter(SystemLogORM.resolved == resolved)
        if since is not None:
            query = query.filter(SystemLogORM.timestamp >= since)
        return query

    # -------------------------
    # CREATE / UPDATE
    # -------------------------

    def create(self, log: SystemLog) -> None:
        session = self._get_session()
        try:
            session.add(log_to_orm(log))
            session.commit()
            logger.debug(f"[repo] created log {log.log_id} [{log.level.value}] {log.source}")
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Failed to create log: {e}") from e
        finally:
            session.close()

    def update(self, log: SystemLog) -> None:
        """Only resolution state is mutable."""
        session = self._get_session()
        try:
            orm = session.get(SystemLogORM, log.log_id)
            if not orm:
                raise EntityNotFound("Log not found")

            orm.resolved = log.resolved
            orm.resolved_by = log.resolved_by
            orm.resolved_at = log.resolved_at
            orm.actions = [action.to_dict() for action in log.actions]

            session.commit()
            logger.debug(f"[repo] updated log {log.log_id}")
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Failed to update log: {e}") from e
        finally:
            session.close()

    # -------------------------
    # READ
    # -------------------------

    def get(self, log_id: UUID) -> Optional[SystemLog]:
        session = self._get_session()
        try:
            orm = session.get(SystemLogORM, log_id)
            if not orm:
                return None
            return orm_to_log(orm)
        finally:
            session.close()

    def list(
        self,
        *,
        level: Optional[LogLevel] = None,
        source: Optional[str] = None,
        resolved: Optional[bool] = None,
        levels: Optional[Iterable[LogLevel]] = None,
        offset: int = 0,
        limit: int = 100,
    ) -> List[SystemLog]:
        session = self._get_session()
        try:
            query = self._filtered(
                session.query(SystemLogORM),
                level=level, source=source, resolved=resolved, levels=levels,
            )
            orms = query.order_by(
                SystemLogORM.timestamp.desc()
            ).offset(offset).limit(limit).all()
            return [orm_to_log(orm) for orm in orms]
        finally:
            session.close()

    def count(
        self,
        *,
        level: Optional[LogLevel] = None,
        source: Optional[str] = None,
        resolved: Optional[bool] = None,
        levels: Optional[Iterable[LogLevel]] = None,
        since: Optional[datetime] = None,
    ) -> int:
        session = self._get_session()
        try:
            query = self._filtered(
                session.query(func.count(SystemLogORM.log_id)),
                level=level, source=source, resolved=resolved, levels=levels, since=since,
            )
            return query.scalar() or 0
        finally:
            session.close()

    def count_errors(
        self,
        *,
        unresolved_only: bool = False,
        since: Optional[datetime] = None,
    ) -> int:
        return self.count(
            levels=ERROR_LEVELS,
            resolved=False if unresolved_only else None,
            since=since,
        )
