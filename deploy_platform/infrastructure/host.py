"""Host OS metrics for the admin status views."""

import logging
import os
import platform
import shutil
import socket
import time
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)

GB = 1024 * 1024 * 1024


def format_uptime(uptime: float) -> str:
    """Seconds -> ``'Xd Xh Xm Xs'``."""
    uptime = int(uptime)
    days = uptime // (24 * 60 * 60)
    hours = (uptime % (24 * 60 * 60)) // (60 * 60)
    minutes = (uptime % (60 * 60)) // 60
    seconds = uptime % 60
    return f"{days}d {hours}h {minutes}m {seconds}s"


def _gb(value: int) -> str:
    return f"{round(value / GB, 2)} GB"


class HostMetrics:
    """
    Reads CPU, memory, disk and uptime from the local host.

    Linux values come from /proc; elsewhere memory and uptime fall back to
    sysconf and process start time.
    """

    def __init__(self, disk_path: str = "/"):
        self.disk_path = disk_path
        self._started = time.time()

    # -------------------------
    # Raw readings
    # -------------------------

    def cpu(self) -> Dict[str, Any]:
        return {
            "count": os.cpu_count() or 1,
            "model": self._cpu_model(),
            "architecture": platform.machine(),
        }

    def _cpu_model(self) -> str:
        try:
            with open("/proc/cpuinfo", encoding="utf-8") as f:
                for line in f:
                    if line.startswith("model name"):
                        return line.split(":", 1)[1].strip()
        except OSError:
            pass
        return platform.processor() or "unknown"

    def memory_bytes(self) -> Dict[str, int]:
        """Total and free memory in bytes."""
        try:
            info = {}
            with open("/proc/meminfo", encoding="utf-8") as f:
                for line in f:
                    key, value = line.split(":", 1)
                    info[key] = int(value.strip().split()[0]) * 1024
            total = info["MemTotal"]
            free = info.get("MemAvailable", info.get("MemFree", 0))
            return {"total": total, "free": free}
        except (OSError, KeyError, ValueError):
            pass

        try:
            page = os.sysconf("SC_PAGE_SIZE")
            total = page * os.sysconf("SC_PHYS_PAGES")
            free = page * os.sysconf("SC_AVPHYS_PAGES")
            return {"total": total, "free": free}
        except (AttributeError, ValueError, OSError):
            logger.warning("Memory statistics unavailable on this host")
            return {"total": 0, "free": 0}

    def uptime_seconds(self) -> float:
        try:
            with open("/proc/uptime", encoding="utf-8") as f:
                return float(f.read().split()[0])
        except (OSError, ValueError, IndexError):
            return time.time() - self._started

    def disk(self) -> Dict[str, Any]:
        try:
            usage = shutil.disk_usage(self.disk_path)
        except OSError as e:
            return {"error": str(e)}
        percent = round(usage.used / usage.total * 100) if usage.total else 0
        return {
            "filesystem": self.disk_path,
            "size": _gb(usage.total),
            "used": _gb(usage.used),
            "available": _gb(usage.free),
            "usePercentage": f"{percent}%",
            "mountedOn": self.disk_path,
        }

    # -------------------------
    # Views
    # -------------------------

    def memory_usage(self) -> Dict[str, int]:
        """Byte counts plus rounded usage percentage (dashboard view)."""
        memory = self.memory_bytes()
        total, free = memory["total"], memory["free"]
        used = total - free
        return {
            "total": total,
            "free": free,
            "used": used,
            "percentage": round(used / total * 100) if total else 0,
        }

    def snapshot(self) -> Dict[str, Any]:
        """Full host view for the system status page."""
        memory = self.memory_usage()
        uptime = self.uptime_seconds()
        return {
            "cpu": self.cpu(),
            "memory": {
                "total": _gb(memory["total"]),
                "free": _gb(memory["free"]),
                "used": _gb(memory["used"]),
                "usagePercent": memory["percentage"],
            },
            "uptime": {
                "seconds": uptime,
                "formatted": format_uptime(uptime),
            },
            "platform": self.platform_name(),
            "hostname": self.hostname(),
            "disk": self.disk(),
        }

    def platform_name(self) -> str:
        return platform.system().lower()

    def hostname(self) -> str:
        return socket.gethostname()


def host_summary(metrics: HostMetrics, database_status: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Compact host block embedded in the dashboard."""
    return {
        "database": database_status,
        "memory": metrics.memory_usage(),
        "uptime": metrics.uptime_seconds(),
        "platform": metrics.platform_name(),
        "hostname": metrics.hostname(),
    }
