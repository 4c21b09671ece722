"""Process supervisor for the sibling frontend/backend services."""

import logging
import os
import shlex
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

from deploy_platform.core.errors import PlatformValidationError, ServiceControlError


logger = logging.getLogger(__name__)


SERVICES = ("frontend", "backend")
RESTART_TARGETS = SERVICES + ("all",)

RUNNING = "running"
STOPPED = "stopped"
UNKNOWN = "unknown"


@dataclass
class ManagedService:
    """A sibling process addressed by logical name."""

    name: str
    command: str
    match: str  # pattern passed to pgrep/pkill -f
    cwd: str = "."
    log_file: str = ""


class ProcessSupervisor(ABC):
    """Start, stop and probe sibling services by logical name."""

    @abstractmethod
    def status(self, service: str) -> str:
        """One of ``running``, ``stopped`` or ``unknown``."""
        pass

    @abstractmethod
    def start(self, service: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    def stop(self, service: str) -> None:
        pass

    def targets(self, service: str) -> List[str]:
        if service not in RESTART_TARGETS:
            raise PlatformValidationError("Invalid service")
        return list(SERVICES) if service == "all" else [service]

    def restart(self, service: str) -> Dict[str, Any]:
        """
        Stop then relaunch.

        No retry: the first failing stop or start raises ServiceControlError.
        """
        names = self.targets(service)

        for name in names:
            self.stop(name)

        started = {name: self.start(name) for name in names}

        if service == "all":
            return {"stdout": "All services restarted", "services": started}
        return started[service]


class ShellProcessSupervisor(ProcessSupervisor):
    """Controls services with pgrep/pkill and detached launches."""

    def __init__(self, services: Iterable[ManagedService]):
        self._services = {service.name: service for service in services}

    @classmethod
    def from_settings(cls, settings) -> "ShellProcessSupervisor":
        root = settings.platform_root
        return cls([
            ManagedService(
                name="frontend",
                command=settings.frontend_command,
                match=settings.frontend_match,
                cwd=os.path.join(root, settings.frontend_dir),
                log_file="frontend.log",
            ),
            ManagedService(
                name="backend",
                command=settings.backend_command,
                match=settings.backend_match,
                cwd=os.path.join(root, settings.backend_dir),
                log_file="backend.log",
            ),
        ])

    def _service(self, name: str) -> ManagedService:
        service = self._services.get(name)
        if service is None:
            raise PlatformValidationError("Invalid service")
        return service

    def status(self, service: str) -> str:
        spec = self._service(service)
        try:
            result = subprocess.run(
                ["pgrep", "-f", spec.match],
                capture_output=True,
                text=True,
                timeout=5,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning(f"Could not probe {service}: {e}")
            return UNKNOWN

        if result.returncode == 0:
            return RUNNING
        if result.returncode == 1:
            return STOPPED
        return UNKNOWN

    def stop(self, service: str) -> None:
        spec = self._service(service)
        try:
            result = subprocess.run(
                ["pkill", "-f", spec.match],
                capture_output=True,
                text=True,
                timeout=10,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise ServiceControlError(f"Failed to stop {service}: {e}") from e

        # 1 = nothing matched
        if result.returncode not in (0, 1):
            raise ServiceControlError(
                f"Failed to stop {service}: {result.stderr.strip() or result.returncode}"
            )
        logger.info(f"Stopped {service} (pattern '{spec.match}')")

    def start(self, service: str) -> Dict[str, Any]:
        spec = self._service(service)
        log_path = os.path.join(spec.cwd, spec.log_file or f"{service}.log")
        try:
            with open(log_path, "ab") as log:
                process = subprocess.Popen(
                    shlex.split(spec.command),
                    cwd=spec.cwd,
                    stdout=log,
                    stderr=subprocess.STDOUT,
                    stdin=subprocess.DEVNULL,
                    start_new_session=True,
                )
        except OSError as e:
            raise ServiceControlError(f"Failed to start {service}: {e}") from e

        logger.info(f"Started {service} (pid {process.pid})")
        return {"stdout": f"{service} started", "pid": process.pid}
