"""Operating system data sources for sysreport."""

import logging
import math
import os
import socket
import time
from collections.abc import Callable
from datetime import datetime

import psutil

from sysreport.config import DATE_FORMAT, ROOT_MOUNT
from sysreport.errors import DataSourceError

logger = logging.getLogger(__name__)

# psutil status -> `ps` STAT letter
_STATUS_LETTERS = {
    psutil.STATUS_RUNNING: "R",
    psutil.STATUS_SLEEPING: "S",
    psutil.STATUS_DISK_SLEEP: "D",
    psutil.STATUS_STOPPED: "T",
    psutil.STATUS_TRACING_STOP: "t",
    psutil.STATUS_ZOMBIE: "Z",
    psutil.STATUS_DEAD: "X",
    psutil.STATUS_WAKING: "W",
    psutil.STATUS_IDLE: "I",
    psutil.STATUS_LOCKED: "L",
    psutil.STATUS_WAITING: "W",
    psutil.STATUS_PARKED: "P",
}


def format_start(create_time: float, now: datetime) -> str:
    """Format a process start time the way `ps` does."""
    started = datetime.fromtimestamp(create_time)
    if started.date() == now.date():
        return started.strftime("%H:%M")
    if started.year == now.year:
        return started.strftime("%b%d")
    return started.strftime("%Y")


def format_cpu_time(seconds: float) -> str:
    """Format accumulated CPU time as M:SS."""
    total = int(seconds)
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


class SystemCollector:
    """
    Reads host, disk, session and process information through psutil.

    Whole-query failures raise DataSourceError. Individual processes that
    vanish or deny access while the listing is built are skipped.
    """

    PROCESS_ATTRS = [
        "pid",
        "name",
        "username",
        "status",
        "memory_percent",
        "memory_info",
        "cpu_times",
        "create_time",
        "terminal",
        "cmdline",
    ]

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        """
        Initialize the SystemCollector.

        Args:
            clock: Returns the current local time. Injectable for tests.
        """
        self._clock = clock

    def hostname(self) -> str:
        """Return the short host name."""
        try:
            name = socket.gethostname()
        except OSError as e:
            raise DataSourceError(f"cannot read host name: {e}") from e
        return name.split(".", 1)[0]

    def timestamp(self) -> str:
        """Return the current local date and time as DD/MM/YYYY HH:MM:SS."""
        return self._clock().strftime(DATE_FORMAT)

    def disk_usage(self, path: str = ROOT_MOUNT) -> tuple[str, str]:
        """
        Return (path, percentage used) for the filesystem mounted at path.

        The percentage is rounded up, as `df` reports it.
        """
        try:
            usage = psutil.disk_usage(path)
        except OSError as e:
            raise DataSourceError(f"cannot read disk usage for {path}: {e}") from e
        total = usage.used + usage.free
        percent = math.ceil(usage.used * 100 / total) if total else 0
        return path, f"{percent}%"

    def logged_in_users(self) -> list[str]:
        """Return one user name per active login session."""
        try:
            sessions = psutil.users()
        except (psutil.Error, OSError) as e:
            raise DataSourceError(f"cannot list logged-in users: {e}") from e
        return [session.name for session in sessions]

    def process_lines(self) -> list[str]:
        """
        Return one `ps aux`-style line per running process.

        The report's own process is left out so a search never matches itself.
        """
        own_pid = os.getpid()
        now = self._clock()
        wall = time.time()
        lines: list[str] = []

        try:
            processes = psutil.process_iter(attrs=self.PROCESS_ATTRS)
            for proc in processes:
                try:
                    if proc.pid == own_pid:
                        continue
                    lines.append(self._format_process(proc.info, now, wall))
                except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                    logger.debug("Skipping process %s", proc.pid)
                    continue
        except (psutil.Error, OSError) as e:
            raise DataSourceError(f"cannot list processes: {e}") from e

        return lines

    def _format_process(self, info: dict, now: datetime, wall: float) -> str:
        """Build a listing line from a psutil info dict."""
        pid = info.get("pid", 0)
        name = info.get("name") or ""
        username = "_".join((info.get("username") or "").split()) or "?"

        cpu_times = info.get("cpu_times")
        cpu_seconds = cpu_times.user + cpu_times.system if cpu_times else 0.0
        create_time = info.get("create_time") or wall
        elapsed = wall - create_time
        cpu_percent = cpu_seconds / elapsed * 100 if elapsed > 0 else 0.0

        mem_info = info.get("memory_info")
        vsz = mem_info.vms // 1024 if mem_info else 0
        rss = mem_info.rss // 1024 if mem_info else 0

        terminal = info.get("terminal")
        tty = terminal.removeprefix("/dev/") if terminal else "?"

        status = _STATUS_LETTERS.get(info.get("status"), "?")

        cmdline = info.get("cmdline") or []
        command = " ".join(cmdline) if cmdline else f"[{name}]"

        return " ".join(
            [
                username,
                str(pid),
                f"{cpu_percent:.1f}",
                f"{info.get('memory_percent') or 0.0:.1f}",
                str(vsz),
                str(rss),
                tty,
                status,
                format_start(create_time, now),
                format_cpu_time(cpu_seconds),
                command,
            ]
        )
