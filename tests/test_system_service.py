"""Test host status and service restarts."""

from datetime import timedelta
from uuid import uuid4

import pytest

from deploy_platform.core.errors import PlatformValidationError, ServiceControlError
from deploy_platform.core.models import LogLevel, SystemLog, utcnow
from deploy_platform.infrastructure.host import format_uptime


class TestSystemStatus:

    def test_snapshot(self, system_service):
        status = system_service.get_system_status()

        system = status["system"]
        assert system["cpu"]["count"] == 4
        assert system["memory"] == {
            "total": "8.0 GB",
            "free": "2.0 GB",
            "used": "6.0 GB",
            "usagePercent": 75,
        }
        assert system["uptime"] == {"seconds": 90061.0, "formatted": "1d 1h 1m 1s"}
        assert system["platform"] == "linux"

    def test_services(self, system_service):
        services = system_service.get_system_status()["services"]

        assert services == {
            "database": {"status": "Connected", "isConnected": True},
            "frontend": "running",
            "backend": "stopped",
        }

    def test_alerts_count_recent_errors(self, system_service, log_repository):
        now = utcnow()
        for level, age in [
            (LogLevel.ERROR, timedelta(hours=1)),
            (LogLevel.CRITICAL, timedelta(hours=2)),
            (LogLevel.ERROR, timedelta(hours=30)),
            (LogLevel.WARNING, timedelta(hours=1)),
        ]:
            log_repository.create(SystemLog(
                log_id=uuid4(), level=level, source="backend", message="x", timestamp=now - age,
            ))

        assert system_service.get_system_status()["alerts"] == {"recentErrorCount": 2}

    def test_format_uptime(self):
        assert format_uptime(0) == "0d 0h 0m 0s"
        assert format_uptime(3661.9) == "0d 1h 1m 1s"


class TestRestartService:
    """Test restarts through the supervisor."""

    def test_restart_one(self, system_service, supervisor, log_repository):
        result = system_service.restart_service("backend")

        assert supervisor.calls == [("stop", "backend"), ("start", "backend")]
        assert result == {"stdout": "backend started", "pid": 4242}

        [entry] = log_repository.list()
        assert entry.message == "Service backend restarted"
        assert entry.source == "admin-panel"

    def test_restart_all(self, system_service, supervisor):
        result = system_service.restart_service("all")

        assert supervisor.calls == [
            ("stop", "frontend"), ("stop", "backend"),
            ("start", "frontend"), ("start", "backend"),
        ]
        assert result["stdout"] == "All services restarted"
        assert set(result["services"]) == {"frontend", "backend"}

    def test_invalid_service(self, system_service, supervisor, log_repository):
        with pytest.raises(PlatformValidationError, match="Invalid service"):
            system_service.restart_service("database")

        assert supervisor.calls == []
        assert log_repository.count() == 0

    def test_failed_start_writes_no_audit(self, system_service, supervisor, log_repository):
        supervisor.fail_start.add("frontend")

        with pytest.raises(ServiceControlError, match="Failed to start frontend"):
            system_service.restart_service("frontend")

        assert log_repository.count() == 0
