"""Test the user management service."""

from uuid import uuid4

import pytest

from deploy_platform.admin.users import check_password
from deploy_platform.core.errors import EntityNotFound, PlatformValidationError
from deploy_platform.core.models import UserRole
from deploy_platform.core.patches import UserPatch


class TestCreateUser:
    """Test user creation rules."""

    def test_create_hashes_password(self, user_service, user_repository):
        user = user_service.create_user("Grace", "Grace@Example.com", "hunter22", company="Navy")

        stored = user_repository.get(user.user_id)
        assert stored.email == "grace@example.com"
        assert stored.role == UserRole.USER
        assert stored.company == "Navy"
        assert stored.password_hash != "hunter22"
        assert check_password("hunter22", stored.password_hash)

    def test_create_with_role(self, user_service):
        user = user_service.create_user("Boss", "boss@example.com", "secret123", role="manager")

        assert user.role == UserRole.MANAGER

    @pytest.mark.parametrize("name, email, password, message", [
        ("", "a@example.com", "secret123", "Please provide a name"),
        ("x" * 51, "a@example.com", "secret123", "Name cannot be more than 50 characters"),
        ("Ann", "", "secret123", "Please provide an email"),
        ("Ann", "not-an-email", "secret123", "Please provide a valid email"),
        ("Ann", "a@example.com", "", "Please provide a password"),
        ("Ann", "a@example.com", "12345", "Password must be at least 6 characters"),
    ])
    def test_invalid_input(self, user_service, name, email, password, message):
        with pytest.raises(PlatformValidationError, match=message):
            user_service.create_user(name, email, password)

    def test_invalid_role(self, user_service):
        with pytest.raises(PlatformValidationError, match="Invalid role"):
            user_service.create_user("Ann", "a@example.com", "secret123", role="root")

    def test_duplicate_email(self, user_service, owner):
        with pytest.raises(PlatformValidationError, match="Email already in use"):
            user_service.create_user("Other", "OWNER@example.com", "secret123")

        assert len(user_service.list_users()) == 1

    def test_create_writes_audit_log(self, user_service, log_repository, logging_emitter):
        user = user_service.create_user("Grace", "grace@example.com", "hunter22")

        logs = log_repository.list()
        assert len(logs) == 1
        assert logs[0].message == "User grace@example.com created"
        assert logs[0].user_id == user.user_id
        assert logging_emitter.events[0].event_type == "user.created"


class TestUpdateUser:
    """Test partial updates."""

    def test_only_provided_fields_change(self, user_service, owner):
        updated = user_service.update_user(owner.user_id, UserPatch(company="Acme"))

        assert updated.company == "Acme"
        assert updated.name == "Owner One"
        assert updated.email == "owner@example.com"

    def test_from_dict_ignores_nulls(self, user_service, owner):
        patch = UserPatch.from_dict({"name": None, "is_active": False, "unknown": 1})

        updated = user_service.update_user(owner.user_id, patch)

        assert updated.is_active is False
        assert updated.name == "Owner One"

    def test_provided_empty_name_is_rejected(self, user_service, owner):
        with pytest.raises(PlatformValidationError, match="Please provide a name"):
            user_service.update_user(owner.user_id, UserPatch(name=""))

    def test_email_taken_by_other_user(self, user_service, owner):
        other = user_service.create_user("Other", "other@example.com", "secret123")

        with pytest.raises(PlatformValidationError, match="Email already in use"):
            user_service.update_user(other.user_id, UserPatch(email="owner@example.com"))

    def test_keeping_own_email_is_allowed(self, user_service, owner):
        updated = user_service.update_user(owner.user_id, UserPatch(email="Owner@Example.com", role="admin"))

        assert updated.email == "owner@example.com"
        assert updated.role == UserRole.ADMIN

    def test_is_active_must_be_boolean(self, user_service, owner):
        with pytest.raises(PlatformValidationError, match="isActive must be a boolean"):
            user_service.update_user(owner.user_id, UserPatch(is_active="yes"))

    def test_unknown_user(self, user_service):
        with pytest.raises(EntityNotFound, match="User not found"):
            user_service.update_user(uuid4(), UserPatch(name="x"))

    def test_update_is_audited_with_changed_fields(self, user_service, owner, log_repository):
        user_service.update_user(owner.user_id, UserPatch(name="Owner Two", company=""))

        latest = log_repository.list(limit=1)[0]
        assert latest.message == "User owner@example.com updated"
        assert latest.details == {"fields": ["name"]}


class TestDeleteAndPassword:

    def test_delete(self, user_service, owner, log_repository):
        user_service.delete_user(owner.user_id)

        with pytest.raises(EntityNotFound):
            user_service.get_user(owner.user_id)

        latest = log_repository.list(limit=1)[0]
        assert latest.message == "User owner@example.com deleted"
        assert latest.details == {"userId": str(owner.user_id)}

    def test_delete_unknown_user(self, user_service):
        with pytest.raises(EntityNotFound):
            user_service.delete_user(uuid4())

    def test_reset_password(self, user_service, owner, user_repository):
        user_service.reset_password(owner.user_id, "newsecret")

        stored = user_repository.get(owner.user_id)
        assert check_password("newsecret", stored.password_hash)
        assert not check_password("secret123", stored.password_hash)

    def test_reset_requires_password(self, user_service, owner):
        with pytest.raises(PlatformValidationError, match="Please provide a new password"):
            user_service.reset_password(owner.user_id, "")

    def test_reset_enforces_length(self, user_service, owner):
        with pytest.raises(PlatformValidationError, match="at least 6 characters"):
            user_service.reset_password(owner.user_id, "abc")

    def test_record_login(self, user_service, owner, user_repository):
        user_service.record_login(owner.user_id)

        assert user_repository.get(owner.user_id).last_login is not None
