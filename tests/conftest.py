#tests\conftest.py

"""Pytest configuration and fixtures."""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from deploy_platform.admin.logs import SystemLogService
from deploy_platform.admin.networks import NetworkService
from deploy_platform.admin.reporting import ReportingService
from deploy_platform.admin.system import SystemService
from deploy_platform.admin.users import UserService
from deploy_platform.api.main import create_app
from deploy_platform.core.events import LoggingEventEmitter, MultiEventEmitter, SystemLogEmitter
from deploy_platform.core.models import Network, NetworkValidator, User, UserRole, ValidatorStatus
from deploy_platform.core.errors import ServiceControlError
from deploy_platform.infrastructure.host import HostMetrics
from deploy_platform.infrastructure.postgres.config import Settings
from deploy_platform.infrastructure.postgres.database import Database
from deploy_platform.infrastructure.postgres.log_repository import SqlSystemLogRepository
from deploy_platform.infrastructure.postgres.network_repository import SqlNetworkRepository
from deploy_platform.infrastructure.postgres.user_repository import SqlUserRepository
from deploy_platform.infrastructure.supervisor import RUNNING, STOPPED, ProcessSupervisor


# -------------------------
# Fakes
# -------------------------

class FakeHostMetrics(HostMetrics):
    """Fixed readings: 8 GB total, 2 GB free, 1d 1h 1m 1s uptime."""

    def cpu(self):
        return {"count": 4, "model": "Test CPU", "architecture": "x86_64"}

    def memory_bytes(self):
        return {"total": 8 * 1024 ** 3, "free": 2 * 1024 ** 3}

    def uptime_seconds(self):
        return 90061.0

    def disk(self):
        return {
            "filesystem": "/dev/test",
            "size": "100.0 GB",
            "used": "40.0 GB",
            "available": "60.0 GB",
            "usePercentage": "40%",
            "mountedOn": "/",
        }

    def platform_name(self):
        return "linux"

    def hostname(self):
        return "test-host"


class RecordingEventEmitter(LoggingEventEmitter):
    """Logs events and keeps them for assertions."""

    def __init__(self):
        self.events = []

    def emit(self, events):
        events = list(events)
        self.events.extend(events)
        super().emit(events)


class FakeSupervisor(ProcessSupervisor):
    """Records calls instead of touching processes."""

    def __init__(self):
        self.states = {"frontend": RUNNING, "backend": STOPPED}
        self.calls = []
        self.fail_start = set()

    def status(self, service):
        return self.states[service]

    def stop(self, service):
        self.calls.append(("stop", service))
        self.states[service] = STOPPED

    def start(self, service):
        self.calls.append(("start", service))
        if service in self.fail_start:
            raise ServiceControlError(f"Failed to start {service}: boom")
        self.states[service] = RUNNING
        return {"stdout": f"{service} started", "pid": 4242}


# -------------------------
# Database / repositories
# -------------------------

@pytest.fixture
def test_settings():
    return Settings(database_url="sqlite://", auto_create_tables=True)


@pytest.fixture
def database(test_settings):
    """Fresh in-memory SQLite database per test."""
    db = Database(config=test_settings, poolclass=StaticPool)
    db.open()
    db.create_all()

    yield db

    db.close()


@pytest.fixture
def user_repository(database):
    return SqlUserRepository(database.session_factory)


@pytest.fixture
def network_repository(database):
    return SqlNetworkRepository(database.session_factory)


@pytest.fixture
def log_repository(database):
    return SqlSystemLogRepository(database.session_factory)


# -------------------------
# Services
# -------------------------

@pytest.fixture
def logging_emitter():
    return RecordingEventEmitter()


@pytest.fixture
def emitters(log_repository, logging_emitter):
    return MultiEventEmitter([SystemLogEmitter(log_repository), logging_emitter])


@pytest.fixture
def host_metrics():
    return FakeHostMetrics()


@pytest.fixture
def supervisor():
    return FakeSupervisor()


@pytest.fixture
def user_service(user_repository, emitters):
    return UserService(user_repository, emitters)


@pytest.fixture
def network_service(network_repository, user_repository, emitters):
    return NetworkService(network_repository, user_repository, emitters)


@pytest.fixture
def log_service(log_repository, user_repository, network_repository):
    return SystemLogService(log_repository, user_repository, network_repository)


@pytest.fixture
def reporting_service(user_repository, network_repository, log_repository, host_metrics, database):
    return ReportingService(user_repository, network_repository, log_repository, host_metrics, database)


@pytest.fixture
def system_service(host_metrics, supervisor, log_repository, database, emitters):
    return SystemService(host_metrics, supervisor, log_repository, database, emitters)


# -------------------------
# Sample records
# -------------------------

@pytest.fixture
def sample_user():
    return User(
        user_id=uuid4(),
        name="Ada Admin",
        email="ada@example.com",
        password_hash="not-a-real-hash",
        role=UserRole.ADMIN,
        company="Cosmic",
    )


@pytest.fixture
def sample_network(sample_user):
    return Network(
        network_id=uuid4(),
        name="Test Net",
        chain_id="testnet-1",
        owner_id=sample_user.user_id,
        validators=[
            NetworkValidator(name="val-a", power=60),
            NetworkValidator(name="val-b", power=40, status=ValidatorStatus.JAILED),
        ],
    )


@pytest.fixture
def owner(user_service):
    """A persisted user created through the service."""
    return user_service.create_user("Owner One", "owner@example.com", "secret123")


# -------------------------
# API
# -------------------------

@pytest.fixture
def client(test_settings, database, supervisor, host_metrics):
    app = create_app(
        settings=test_settings,
        database=database,
        supervisor=supervisor,
        host_metrics=host_metrics,
    )
    with TestClient(app) as test_client:
        yield test_client
