"""Test SQLAlchemy repository implementations."""

from datetime import timedelta
from uuid import uuid4

import pytest

from deploy_platform.core.errors import DuplicateKeyError, EntityNotFound
from deploy_platform.core.models import (
    CloudProvider, DeploymentSpec, DockerRuntime, KubernetesRuntime, LogLevel,
    Network, NetworkModule, NetworkStatus, SystemLog, User, UserRole, utcnow,
)


def make_log(level=LogLevel.INFO, source="admin-panel", message="hello", **kwargs):
    return SystemLog(log_id=uuid4(), level=level, source=source, message=message, **kwargs)


class TestSqlUserRepository:
    """Test user persistence."""

    # -------------------------
    # CREATE / READ
    # -------------------------

    def test_create_and_get(self, user_repository, sample_user):
        """Test a created user reads back unchanged."""
        user_repository.create(sample_user)

        retrieved = user_repository.get(sample_user.user_id)

        assert retrieved is not None
        assert retrieved.email == "ada@example.com"
        assert retrieved.role == UserRole.ADMIN
        assert retrieved.created_at.tzinfo is not None

    def test_duplicate_email_fails(self, user_repository, sample_user):
        """Test the unique email index."""
        user_repository.create(sample_user)

        clone = User(
            user_id=uuid4(),
            name="Other",
            email=sample_user.email,
            password_hash="x",
        )
        with pytest.raises(DuplicateKeyError, match="Email already in use"):
            user_repository.create(clone)

    def test_get_by_email_is_case_insensitive(self, user_repository, sample_user):
        """Test lookup lowercases the input."""
        user_repository.create(sample_user)

        assert user_repository.get_by_email("ADA@Example.com").user_id == sample_user.user_id

    def test_get_nonexistent(self, user_repository):
        """Test missing user returns None."""
        assert user_repository.get(uuid4()) is None

    def test_list_by_ids(self, user_repository, sample_user):
        """Test bulk lookup skips unknown ids."""
        user_repository.create(sample_user)

        found = user_repository.list_by_ids([sample_user.user_id, uuid4()])

        assert list(found) == [sample_user.user_id]

    # -------------------------
    # UPDATE / DELETE
    # -------------------------

    def test_update(self, user_repository, sample_user):
        """Test update persists changed fields."""
        user_repository.create(sample_user)
        sample_user.company = "New Co"
        sample_user.is_active = False

        user_repository.update(sample_user)

        retrieved = user_repository.get(sample_user.user_id)
        assert retrieved.company == "New Co"
        assert retrieved.is_active is False

    def test_update_missing_user(self, user_repository, sample_user):
        """Test updating an unknown user."""
        with pytest.raises(EntityNotFound):
            user_repository.update(sample_user)

    def test_delete(self, user_repository, sample_user):
        """Test delete reports whether a row was removed."""
        user_repository.create(sample_user)

        assert user_repository.delete(sample_user.user_id) is True
        assert user_repository.delete(sample_user.user_id) is False
        assert user_repository.get(sample_user.user_id) is None

    # -------------------------
    # AGGREGATES
    # -------------------------

    def test_counts(self, user_repository):
        """Test total, active and per-role counts."""
        for i, (role, active) in enumerate([
            (UserRole.ADMIN, True),
            (UserRole.USER, True),
            (UserRole.USER, False),
        ]):
            user_repository.create(User(
                user_id=uuid4(),
                name=f"user {i}",
                email=f"user{i}@example.com",
                password_hash="x",
                role=role,
                is_active=active,
            ))

        assert user_repository.count() == 3
        assert user_repository.count(is_active=True) == 2
        assert user_repository.count_by_role() == {"admin": 1, "user": 2}

    def test_list_recent_logins(self, user_repository):
        """Test users without a login are excluded and newest come first."""
        now = utcnow()
        for i, last_login in enumerate([now - timedelta(hours=2), None, now]):
            user_repository.create(User(
                user_id=uuid4(),
                name=f"user {i}",
                email=f"user{i}@example.com",
                password_hash="x",
                last_login=last_login,
            ))

        recent = user_repository.list_recent_logins(5)

        assert [u.name for u in recent] == ["user 2", "user 0"]


class TestSqlNetworkRepository:
    """Test network persistence."""

    def test_create_round_trip_embedded_documents(self, network_repository, sample_network):
        """Test validators, modules and a tagged runtime survive storage."""
        sample_network.modules = [NetworkModule(name="bank", version="v1", config={"send_enabled": True})]
        sample_network.deployment = DeploymentSpec(
            provider=CloudProvider.AWS,
            region="us-east-1",
            resources={"cpu": 2, "memory": 4},
            runtime=KubernetesRuntime(cluster="prod", replicas=3),
        )
        network_repository.create(sample_network)

        retrieved = network_repository.get(sample_network.network_id)

        assert [v.name for v in retrieved.validators] == ["val-a", "val-b"]
        assert retrieved.validators[0].validator_id == sample_network.validators[0].validator_id
        assert retrieved.modules[0].config == {"send_enabled": True}
        assert isinstance(retrieved.deployment.runtime, KubernetesRuntime)
        assert retrieved.deployment.runtime.replicas == 3
        assert retrieved.deployment.provider == CloudProvider.AWS

    def test_docker_runtime(self, network_repository, sample_network):
        """Test the docker runtime variant."""
        sample_network.deployment = DeploymentSpec(runtime=DockerRuntime(image="gaiad:latest", ports={"rpc": 26657}))
        network_repository.create(sample_network)

        runtime = network_repository.get(sample_network.network_id).deployment.runtime

        assert isinstance(runtime, DockerRuntime)
        assert runtime.ports == {"rpc": 26657}

    def test_duplicate_chain_id_fails(self, network_repository, sample_network):
        """Test the unique chain id index."""
        network_repository.create(sample_network)

        clone = Network(network_id=uuid4(), name="Other", chain_id="testnet-1", owner_id=None)
        with pytest.raises(DuplicateKeyError, match="Chain ID already in use"):
            network_repository.create(clone)

        assert network_repository.count() == 1

    def test_get_by_chain_id(self, network_repository, sample_network):
        network_repository.create(sample_network)

        assert network_repository.get_by_chain_id("testnet-1").network_id == sample_network.network_id
        assert network_repository.get_by_chain_id("nope") is None

    def test_update_and_delete(self, network_repository, sample_network):
        """Test update then delete."""
        network_repository.create(sample_network)
        sample_network.status = NetworkStatus.ACTIVE
        sample_network.validators.pop()
        network_repository.update(sample_network)

        retrieved = network_repository.get(sample_network.network_id)
        assert retrieved.status == NetworkStatus.ACTIVE
        assert len(retrieved.validators) == 1

        assert network_repository.delete(sample_network.network_id) is True
        assert network_repository.get(sample_network.network_id) is None

    def test_group_counts(self, network_repository, sample_network):
        """Test per-status and per-deployment-type counts."""
        network_repository.create(sample_network)
        network_repository.create(Network(
            network_id=uuid4(), name="Live", chain_id="live-1", owner_id=None,
            status=NetworkStatus.ACTIVE,
        ))

        assert network_repository.count() == 2
        assert network_repository.count(status=NetworkStatus.ACTIVE) == 1
        assert network_repository.count_by_status() == {"planned": 1, "active": 1}
        assert network_repository.count_by_deployment_type() == {"testnet": 2}

    def test_validator_stats(self, network_repository, sample_network):
        """Test validators are grouped by status across networks."""
        network_repository.create(sample_network)

        stats = network_repository.validator_stats()

        assert stats == {
            "active": {"count": 1, "totalPower": 60},
            "jailed": {"count": 1, "totalPower": 40},
        }
        assert network_repository.count_active_validators() == 1

    def test_list_recent_and_deployed_since(self, network_repository):
        """Test recency ordering and the deployment window."""
        now = utcnow()
        for i in range(3):
            network_repository.create(Network(
                network_id=uuid4(),
                name=f"net {i}",
                chain_id=f"chain-{i}",
                owner_id=None,
                created_at=now - timedelta(minutes=10 - i),
                deployed_at=now - timedelta(days=10) if i == 0 else now - timedelta(days=i),
            ))

        assert [n.name for n in network_repository.list_recent(2)] == ["net 2", "net 1"]

        deployed = network_repository.list_deployed_since(now - timedelta(days=7), 5)
        assert [n.name for n in deployed] == ["net 1", "net 2"]


class TestSqlSystemLogRepository:
    """Test system log persistence."""

    def test_create_and_get(self, log_repository):
        log = make_log(details={"k": "v"})
        log_repository.create(log)

        retrieved = log_repository.get(log.log_id)

        assert retrieved.message == "hello"
        assert retrieved.details == {"k": "v"}
        assert retrieved.resolved is False

    def test_update_resolution(self, log_repository):
        """Test resolution state and actions persist."""
        log = make_log(level=LogLevel.ERROR)
        log_repository.create(log)

        log.resolve(None, "restart node")
        log_repository.update(log)

        retrieved = log_repository.get(log.log_id)
        assert retrieved.resolved is True
        assert retrieved.resolved_at is not None
        assert [a.action for a in retrieved.actions] == ["restart node"]
        assert retrieved.actions[0].result == "Log marked as resolved"

    def test_update_missing_log(self, log_repository):
        with pytest.raises(EntityNotFound, match="Log not found"):
            log_repository.update(make_log())

    def test_list_filters_and_paging(self, log_repository):
        """Test filters, newest-first order, offset and limit."""
        now = utcnow()
        for i in range(5):
            log_repository.create(make_log(
                level=LogLevel.ERROR if i % 2 else LogLevel.INFO,
                source="backend" if i == 4 else "admin-panel",
                message=f"log {i}",
                timestamp=now - timedelta(minutes=5 - i),
            ))

        assert [l.message for l in log_repository.list(limit=2)] == ["log 4", "log 3"]
        assert [l.message for l in log_repository.list(offset=2, limit=2)] == ["log 2", "log 1"]
        assert [l.message for l in log_repository.list(level=LogLevel.ERROR)] == ["log 3", "log 1"]
        assert [l.message for l in log_repository.list(source="backend")] == ["log 4"]

        assert log_repository.count() == 5
        assert log_repository.count(level=LogLevel.INFO) == 3

    def test_count_errors(self, log_repository):
        """Test error/critical counting with the unresolved and time filters."""
        now = utcnow()
        old = make_log(level=LogLevel.CRITICAL, timestamp=now - timedelta(days=2))
        resolved = make_log(level=LogLevel.ERROR)
        resolved.resolve()
        for log in (old, resolved, make_log(level=LogLevel.ERROR), make_log(level=LogLevel.WARNING)):
            log_repository.create(log)

        assert log_repository.count_errors() == 3
        assert log_repository.count_errors(unresolved_only=True) == 2
        assert log_repository.count_errors(since=now - timedelta(days=1)) == 2
