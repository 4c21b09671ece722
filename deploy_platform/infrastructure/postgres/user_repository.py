"""User repository."""

import logging
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from deploy_platform.core.errors import DuplicateKeyError, EntityNotFound, PersistenceError
from deploy_platform.core.models import User, as_utc
from deploy_platform.core.repository import UserRepository
from deploy_platform.infrastructure.postgres.models import UserORM


logger = logging.getLogger(__name__)


def user_to_orm(user: User) -> UserORM:
    """Convert user domain model to ORM."""
    return UserORM(
        user_id=user.user_id,
        name=user.name,
        email=user.email,
        password_hash=user.password_hash,
        role=user.role,
        company=user.company,
        is_active=user.is_active,
        last_login=user.last_login,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def orm_to_user(orm: UserORM) -> User:
    """Convert ORM to user domain model."""
    return User(
        user_id=orm.user_id,
        name=orm.name,
        email=orm.email,
        password_hash=orm.password_hash,
        role=orm.role,
        company=orm.company or "",
        is_active=orm.is_active,
        last_login=as_utc(orm.last_login),
        created_at=as_utc(orm.created_at),
        updated_at=as_utc(orm.updated_at),
    )


class SqlUserRepository(UserRepository):
    """Repository for platform users."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def _get_session(self):
        return self._session_factory()

    # -------------------------
    # CREATE
    # -------------------------

    def create(self, user: User) -> None:
        session = self._get_session()
        try:
            session.add(user_to_orm(user))
            session.commit()
            logger.debug(f"[repo] created user {user.user_id} ({user.email})")
        except IntegrityError as e:
            session.rollback()
            raise DuplicateKeyError("Email already in use") from e
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Failed to create user: {e}") from e
        finally:
            session.close()

    # -------------------------
    # READ
    # -------------------------

    def get(self, user_id: UUID) -> Optional[User]:
        session = self._get_session()
        try:
            orm = session.get(UserORM, user_id)
            if not orm:
                return None
            return orm_to_user(orm)
        finally:
            session.close()

    def get_by_email(self, email: str) -> Optional[User]:
        session = self._get_session()
        try:
            orm = session.query(UserORM).filter(
                UserORM.email == email.lower()
            ).first()
            if not orm:
                return None
            return orm_to_user(orm)
        finally:
            session.close()

    def list_all(self) -> List[User]:
        session = self._get_session()
        try:
            orms = session.query(UserORM).order_by(UserORM.created_at.desc()).all()
            return [orm_to_user(orm) for orm in orms]
        finally:
            session.close()

    def list_by_ids(self, user_ids: Iterable[UUID]) -> Dict[UUID, User]:
        ids = {user_id for user_id in user_ids if user_id is not None}
        if not ids:
            return {}
        session = self._get_session()
        try:
            orms = session.query(UserORM).filter(UserORM.user_id.in_(ids)).all()
            return {orm.user_id: orm_to_user(orm) for orm in orms}
        finally:
            session.close()

    # -------------------------
    # UPDATE / DELETE
    # -------------------------

    def update(self, user: User) -> None:
        session = self._get_session()
        try:
            orm = session.get(UserORM, user.user_id)
            if not orm:
                raise EntityNotFound("User not found")

            orm.name = user.name
            orm.email = user.email
            orm.password_hash = user.password_hash
            orm.role = user.role
            orm.company = user.company
            orm.is_active = user.is_active
            orm.last_login = user.last_login
            orm.updated_at = user.updated_at

            session.commit()
            logger.debug(f"[repo] updated user {user.user_id}")
        except IntegrityError as e:
            session.rollback()
            raise DuplicateKeyError("Email already in use") from e
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Failed to update user: {e}") from e
        finally:
            session.close()

    def delete(self, user_id: UUID) -> bool:
        session = self._get_session()
        try:
            orm = session.get(UserORM, user_id)
            if not orm:
                return False
            session.delete(orm)
            session.commit()
            logger.debug(f"[repo] deleted user {user_id}")
            return True
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Failed to delete user: {e}") from e
        finally:
            session.close()

    # -------------------------
    # AGGREGATES
    # -------------------------

    def count(self, is_active: Optional[bool] = None) -> int:
        session = self._get_session()
        try:
            query = session.query(func.count(UserORM.user_id))
            if is_active is not None:
                query = query.filter(UserORM.is_active == is_active)
            return query.scalar() or 0
        finally:
            session.close()

    def count_by_role(self) -> Dict[str, int]:
        session = self._get_session()
        try:
            rows = session.query(
                UserORM.role, func.count(UserORM.user_id)
            ).group_by(UserORM.role).all()
            return {role.value: count for role, count in rows}
        finally:
            session.close()

    def list_recent_logins(self, limit: int) -> List[User]:
        session = self._get_session()
        try:
            orms = session.query(UserORM).filter(
                UserORM.last_login.isnot(None)
            ).order_by(UserORM.last_login.desc()).limit(limit).all()
            return [orm_to_user(orm) for orm in orms]
        finally:
            session.close()
