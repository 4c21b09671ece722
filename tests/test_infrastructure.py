"""Test host metrics, the process supervisor, the database handle and emitters."""

import logging

import pytest

from deploy_platform.core.errors import PlatformValidationError
from deploy_platform.core.events import LoggingEventEmitter, NullEventEmitter, SystemLogEmitter
from deploy_platform.core.events_model import AuditEvent
from deploy_platform.core.models import LogLevel
from deploy_platform.infrastructure.host import HostMetrics, host_summary
from deploy_platform.infrastructure.postgres.config import Settings
from deploy_platform.infrastructure.postgres.database import Database
from deploy_platform.infrastructure.supervisor import ShellProcessSupervisor


class TestHostMetrics:

    def test_snapshot_shape(self):
        snapshot = HostMetrics().snapshot()

        assert set(snapshot) == {"cpu", "memory", "uptime", "platform", "hostname", "disk"}
        assert snapshot["cpu"]["count"] >= 1
        assert 0 <= snapshot["memory"]["usagePercent"] <= 100
        assert snapshot["uptime"]["seconds"] >= 0

    def test_summary(self, host_metrics):
        summary = host_summary(host_metrics, {"status": "Connected", "isConnected": True})

        assert summary["memory"] == {
            "total": 8 * 1024 ** 3,
            "free": 2 * 1024 ** 3,
            "used": 6 * 1024 ** 3,
            "percentage": 75,
        }
        assert summary["platform"] == "linux"


class TestShellProcessSupervisor:

    @pytest.fixture
    def supervisor(self, tmp_path):
        settings = Settings(platform_root=str(tmp_path), frontend_dir="web", backend_dir="api")
        return ShellProcessSupervisor.from_settings(settings)

    def test_targets(self, supervisor):
        assert supervisor.targets("all") == ["frontend", "backend"]
        assert supervisor.targets("backend") == ["backend"]

    def test_unknown_service(self, supervisor):
        with pytest.raises(PlatformValidationError, match="Invalid service"):
            supervisor.targets("database")
        with pytest.raises(PlatformValidationError, match="Invalid service"):
            supervisor.status("database")

    def test_services_from_settings(self, supervisor, tmp_path):
        frontend = supervisor._service("frontend")

        assert frontend.cwd == str(tmp_path / "web")
        assert frontend.command == "npm start"


class TestDatabase:

    def test_status_when_closed(self):
        database = Database(config=Settings(database_url="sqlite://"))

        assert database.status() == {"status": "Disconnected", "isConnected": False}
        with pytest.raises(RuntimeError, match="Database is not open"):
            database.session_factory()

    def test_status_when_open(self, database):
        assert database.status() == {"status": "Connected", "isConnected": True}


class TestEmitters:

    def test_system_log_emitter_persists(self, log_repository):
        event = AuditEvent(event_type="user.created", level=LogLevel.INFO, message="created")

        SystemLogEmitter(log_repository).emit([event])

        [log] = log_repository.list()
        assert log.message == "created"
        assert log.source == "admin-panel"

    def test_unknown_event_type(self, log_repository):
        event = AuditEvent(event_type="user.teleported", level=LogLevel.INFO, message="?")

        with pytest.raises(ValueError, match="Invalid event type"):
            SystemLogEmitter(log_repository).emit([event])

    def test_null_emitter(self):
        NullEventEmitter().emit([AuditEvent(event_type="x", level=LogLevel.INFO, message="x")])

    def test_logging_emitter_writes_to_log_only(self, caplog):
        emitter = LoggingEventEmitter()
        event = AuditEvent(event_type="user.deleted", level=LogLevel.WARNING, message="deleted")

        with caplog.at_level(logging.INFO, logger="deploy_platform.core.events"):
            emitter.emit([event, event])

        assert [r.getMessage() for r in caplog.records] == ["[event] user.deleted | deleted"] * 2
        assert caplog.records[0].levelno == logging.WARNING
        assert not hasattr(emitter, "events")
