# deploy_platform/admin/users.py
"""User management service."""

import logging
import re
from typing import List, Optional
from uuid import UUID, uuid4

import bcrypt

from deploy_platform.core.errors import EntityNotFound, PlatformValidationError
from deploy_platform.core.events_model import AuditEvent
from deploy_platform.core.models import User, UserRole, parse_enum, utcnow
from deploy_platform.core.patches import UserPatch
from deploy_platform.core.repository import UserRepository


logger = logging.getLogger(__name__)


EMAIL_PATTERN = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


class UserService:
    """Admin-side user CRUD with audit events."""

    def __init__(self, user_repo: UserRepository, event_emitters):
        self._repo = user_repo
        self._emitters = event_emitters

    # ============================================
    # READ
    # ============================================

    def list_users(self) -> List[User]:
        return self._repo.list_all()

    def get_user(self, user_id: UUID) -> User:
        user = self._repo.get(user_id)
        if not user:
            raise EntityNotFound("User not found")
        return user

    # ============================================
    # WRITE
    # ============================================

    def create_user(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        role: Optional[str] = None,
        company: Optional[str] = None,
    ) -> User:
        name = self._clean_name(name)
        email = self._clean_email(email)
        self._check_password(password)

        if self._repo.get_by_email(email):
            raise PlatformValidationError("Email already in use")

        user = User(
            user_id=uuid4(),
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=parse_enum(UserRole, role or UserRole.USER.value, "Invalid role"),
            company=company or "",
        )

        # A concurrent insert still trips the unique index -> DuplicateKeyError
        self._repo.create(user)

        logger.info(f"[users] created user {user.user_id} ({user.email})")
        self._emit([AuditEvent.user_created(user)])
        return user

    def update_user(self, user_id: UUID, patch: UserPatch) -> User:
        user = self.get_user(user_id)

        provided = patch.provided()

        if "name" in provided:
            patch.name = self._clean_name(patch.name)
        if "email" in provided:
            patch.email = self._clean_email(patch.email)
            existing = self._repo.get_by_email(patch.email)
            if existing and existing.user_id != user.user_id:
                raise PlatformValidationError("Email already in use")
        if "role" in provided:
            patch.role = parse_enum(UserRole, patch.role, "Invalid role")
        if "is_active" in provided and not isinstance(patch.is_active, bool):
            raise PlatformValidationError("isActive must be a boolean")

        changed = patch.apply(user)
        user.touch()
        self._repo.update(user)

        logger.info(f"[users] updated user {user.user_id}: {changed}")
        self._emit([AuditEvent.user_updated(user, changed)])
        return user

    def delete_user(self, user_id: UUID) -> None:
        user = self.get_user(user_id)

        if not self._repo.delete(user_id):
            raise EntityNotFound("User not found")

        logger.info(f"[users] deleted user {user_id}")
        self._emit([AuditEvent.user_deleted(user)])

    def reset_password(self, user_id: UUID, password: Optional[str]) -> None:
        if not password:
            raise PlatformValidationError("Please provide a new password")

        user = self.get_user(user_id)
        self._check_password(password)

        user.password_hash = hash_password(password)
        user.touch()
        self._repo.update(user)

        logger.info(f"[users] password reset for {user.user_id}")
        self._emit([AuditEvent.password_reset(user)])

    def record_login(self, user_id: UUID) -> User:
        """Stamp last_login; feeds the dashboard's recent activity."""
        user = self.get_user(user_id)
        user.last_login = utcnow()
        self._repo.update(user)
        return user

    # ============================================
    # INTERNAL
    # ============================================

    @staticmethod
    def _clean_name(name: Optional[str]) -> str:
        name = (name or "").strip()
        if not name:
            raise PlatformValidationError("Please provide a name")
        if len(name) > NAME_MAX_LENGTH:
            raise PlatformValidationError("Name cannot be more than 50 characters")
        return name

    @staticmethod
    def _clean_email(email: Optional[str]) -> str:
        email = (email or "").strip().lower()
        if not email:
            raise PlatformValidationError("Please provide an email")
        if not EMAIL_PATTERN.match(email):
            raise PlatformValidationError("Please provide a valid email")
        return email

    @staticmethod
    def _check_password(password: Optional[str]) -> None:
        if not password:
            raise PlatformValidationError("Please provide a password")
        if len(password) < PASSWORD_MIN_LENGTH:
            raise PlatformValidationError("Password must be at least 6 characters")

    def _emit(self, events):
        self._emitters.emit(events)
