"""Tests for the SystemCollector class."""

import os
from datetime import datetime
from types import SimpleNamespace

import psutil
import pytest

from sysreport import collector as collector_module
from sysreport.collector import SystemCollector, format_cpu_time, format_start
from sysreport.errors import DataSourceError
from sysreport.models import ProcessRecord


class FakeProcess:
    """Minimal stand-in for psutil.Process as yielded by process_iter."""

    def __init__(self, pid, info):
        self.pid = pid
        self.info = {"pid": pid, **info}


class VanishingProcess:
    """A process that disappears while its info is read."""

    pid = 99

    @property
    def info(self):
        raise psutil.NoSuchProcess(self.pid)


class TestFormatting:
    """Tests for the ps-style field formatters."""

    def test_start_today(self):
        """Test a process started today shows HH:MM."""
        now = datetime(2026, 10, 17, 15, 0)
        started = datetime(2026, 10, 17, 9, 5).timestamp()

        assert format_start(started, now) == "09:05"

    def test_start_this_year(self):
        """Test an older process from this year shows MonDD."""
        now = datetime(2026, 10, 17, 15, 0)
        started = datetime(2026, 3, 2, 9, 5).timestamp()

        assert format_start(started, now) == datetime(2026, 3, 2).strftime("%b%d")

    def test_start_previous_year(self):
        """Test a process from an earlier year shows the year."""
        now = datetime(2026, 10, 17, 15, 0)
        started = datetime(2024, 12, 31, 23, 0).timestamp()

        assert format_start(started, now) == "2024"

    def test_cpu_time(self):
        """Test CPU seconds are formatted as M:SS."""
        assert format_cpu_time(0.4) == "0:00"
        assert format_cpu_time(65.9) == "1:05"
        assert format_cpu_time(7384) == "123:04"


class TestSystemCollector:
    """Tests for SystemCollector against the live system."""

    def test_hostname_is_short(self):
        """Test the host name has no domain part."""
        name = SystemCollector().hostname()

        assert name
        assert "." not in name

    def test_timestamp_format(self):
        """Test the timestamp uses DD/MM/YYYY HH:MM:SS."""
        collector = SystemCollector(clock=lambda: datetime(2026, 10, 7, 8, 9, 3))

        assert collector.timestamp() == "07/10/2026 08:09:03"

    def test_disk_usage_root(self):
        """Test root disk usage is a percentage string."""
        path, percent = SystemCollector().disk_usage("/")

        assert path == "/"
        assert percent.endswith("%")
        assert 0 <= int(percent[:-1]) <= 100

    def test_logged_in_users_is_list(self):
        """Test users are returned as a list of names."""
        users = SystemCollector().logged_in_users()

        assert isinstance(users, list)
        assert all(isinstance(user, str) for user in users)

    def test_process_lines_parse(self):
        """Test every live listing line tokenizes into a record."""
        lines = SystemCollector().process_lines()

        assert lines
        records = [ProcessRecord.from_line(line) for line in lines]
        assert all(record.pid.isdigit() for record in records)

    def test_process_lines_exclude_self(self):
        """Test the report's own process is not listed."""
        pids = {ProcessRecord.from_line(line).pid for line in SystemCollector().process_lines()}

        assert str(os.getpid()) not in pids


class TestSystemCollectorFakes:
    """Tests for SystemCollector with psutil replaced."""

    def test_process_line_format(self, monkeypatch):
        """Test a process is rendered like a ps aux line."""
        now = datetime(2026, 10, 17, 12, 0, 0)
        created = datetime(2026, 10, 17, 11, 0, 0).timestamp()
        info = {
            "name": "sleep",
            "username": "alice",
            "status": psutil.STATUS_SLEEPING,
            "memory_percent": 0.25,
            "memory_info": SimpleNamespace(vms=8 * 1024 * 1024, rss=2048 * 1024),
            "cpu_times": SimpleNamespace(user=30.0, system=6.0),
            "create_time": created,
            "terminal": "/dev/pts/3",
            "cmdline": ["sleep", "600"],
        }
        monkeypatch.setattr(psutil, "process_iter", lambda attrs: [FakeProcess(321, info)])
        monkeypatch.setattr(collector_module.time, "time", lambda: created + 3600)

        lines = SystemCollector(clock=lambda: now).process_lines()

        assert lines == ["alice 321 1.0 0.2 8192 2048 pts/3 S 11:00 0:36 sleep 600"]

    def test_missing_attributes_use_defaults(self, monkeypatch):
        """Test AccessDenied attributes (None) fall back to placeholders."""
        info = {
            "name": "kthreadd",
            "username": None,
            "status": None,
            "memory_percent": None,
            "memory_info": None,
            "cpu_times": None,
            "create_time": None,
            "terminal": None,
            "cmdline": [],
        }
        monkeypatch.setattr(psutil, "process_iter", lambda attrs: [FakeProcess(2, info)])

        [line] = SystemCollector().process_lines()
        record = ProcessRecord.from_line(line)

        assert record.user == "?"
        assert record.tty == "?"
        assert record.stat == "?"
        assert record.vsz == "0"
        assert record.command == "[kthreadd]"

    def test_username_spaces_replaced(self, monkeypatch):
        """Test whitespace in user names does not shift the fields."""
        info = {"username": "NT AUTHORITY", "cmdline": ["svc"]}
        monkeypatch.setattr(psutil, "process_iter", lambda attrs: [FakeProcess(5, info)])

        [line] = SystemCollector().process_lines()

        assert ProcessRecord.from_line(line).user == "NT_AUTHORITY"

    def test_username_any_whitespace_replaced(self, monkeypatch):
        """Test tabs and repeated spaces in user names are folded to one underscore."""
        info = {"username": "domain\t user", "cmdline": ["svc", "--once"]}
        monkeypatch.setattr(psutil, "process_iter", lambda attrs: [FakeProcess(6, info)])

        [line] = SystemCollector().process_lines()
        record = ProcessRecord.from_line(line)

        assert record.user == "domain_user"
        assert record.pid == "6"
        assert record.command == "svc --once"

    def test_vanished_processes_are_skipped(self, monkeypatch):
        """Test processes that die mid-scan are left out."""
        alive = FakeProcess(7, {"username": "bob", "cmdline": ["bash"]})
        monkeypatch.setattr(psutil, "process_iter", lambda attrs: [VanishingProcess(), alive])

        lines = SystemCollector().process_lines()

        assert len(lines) == 1
        assert lines[0].startswith("bob 7 ")

    def test_own_process_is_skipped(self, monkeypatch):
        """Test the current pid is filtered out."""
        me = FakeProcess(os.getpid(), {"username": "me", "cmdline": ["python"]})
        monkeypatch.setattr(psutil, "process_iter", lambda attrs: [me])

        assert SystemCollector().process_lines() == []

    def test_listing_failure_is_fatal(self, monkeypatch):
        """Test a failing process scan raises DataSourceError."""

        def broken(attrs):
            raise OSError("boom")

        monkeypatch.setattr(psutil, "process_iter", broken)

        with pytest.raises(DataSourceError):
            SystemCollector().process_lines()

    def test_disk_usage_failure_is_fatal(self, monkeypatch):
        """Test an unreadable mount point raises DataSourceError."""

        def missing(path):
            raise FileNotFoundError(path)

        monkeypatch.setattr(psutil, "disk_usage", missing)

        with pytest.raises(DataSourceError):
            SystemCollector().disk_usage("/nowhere")

    def test_disk_usage_rounds_up(self, monkeypatch):
        """Test the percentage is rounded up like df."""
        monkeypatch.setattr(psutil, "disk_usage", lambda path: SimpleNamespace(used=4104, free=5896, percent=41.0))

        assert SystemCollector().disk_usage() == ("/", "42%")

    def test_disk_usage_empty_filesystem(self, monkeypatch):
        """Test a filesystem with no capacity reports 0%."""
        monkeypatch.setattr(psutil, "disk_usage", lambda path: SimpleNamespace(used=0, free=0, percent=0.0))

        assert SystemCollector().disk_usage() == ("/", "0%")

    def test_users_keep_duplicate_sessions(self, monkeypatch):
        """Test one entry is returned per session."""
        sessions = [SimpleNamespace(name="alice"), SimpleNamespace(name="bob"), SimpleNamespace(name="alice")]
        monkeypatch.setattr(psutil, "users", lambda: sessions)

        assert SystemCollector().logged_in_users() == ["alice", "bob", "alice"]

    def test_users_failure_is_fatal(self, monkeypatch):
        """Test a failing session query raises DataSourceError."""

        def broken():
            raise OSError("utmp unreadable")

        monkeypatch.setattr(psutil, "users", broken)

        with pytest.raises(DataSourceError):
            SystemCollector().logged_in_users()

    def test_hostname_strips_domain(self, monkeypatch):
        """Test only the first label of the host name is kept."""
        monkeypatch.setattr(collector_module.socket, "gethostname", lambda: "web01.example.com")

        assert SystemCollector().hostname() == "web01"
