"""sysreport - System status report driver."""

import logging
import signal
import sys
from collections.abc import Callable

from sysreport.collector import SystemCollector
from sysreport.config import (
    BANNER_WIDTH,
    BOX_WIDTH,
    EXIT_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_OK,
    LOG_FORMAT,
    ROOT_MOUNT,
    default_columns,
)
from sysreport.errors import DataSourceError
from sysreport.models import ColumnSpec
from sysreport.search import ProcessSearch

logger = logging.getLogger(__name__)

BOX_BORDER = "+" + "-" * BOX_WIDTH + "+"


class SystemReport:
    """Prints the report sections, then runs the interactive process search."""

    def __init__(
        self,
        collector: SystemCollector,
        columns: ColumnSpec,
        read_input: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ) -> None:
        """Initialize SystemReport."""
        self._collector = collector
        self._columns = columns
        self._read_input = read_input
        self._write = write

    def header_lines(self) -> list[str]:
        """Banner with the host short name."""
        rule = "=" * BANNER_WIDTH
        return [rule, f"              SYSTEM REPORT: {self._collector.hostname()}", rule]

    def datetime_lines(self) -> list[str]:
        """Current local date and time."""
        return [f"Date and time: {self._collector.timestamp()}", ""]

    def disk_lines(self, mount_point: str = ROOT_MOUNT) -> list[str]:
        """Boxed disk usage of a mount point."""
        path, percent = self._collector.disk_usage(mount_point)
        return [BOX_BORDER, f"| Disk usage on {path}: {percent}", BOX_BORDER, ""]

    def users_lines(self) -> list[str]:
        """Boxed list of logged-in users, one line per session."""
        users = self._collector.logged_in_users()
        return [
            BOX_BORDER,
            "| Currently logged-in users:",
            BOX_BORDER,
            *(f"| {user}" for user in users),
            BOX_BORDER,
            "",
        ]

    def run(self) -> None:
        """Print every section and run the search until it matches."""
        for section in (self.header_lines, self.datetime_lines, self.disk_lines, self.users_lines):
            for line in section():
                self._write(line)

        search = ProcessSearch(
            self._collector.process_lines,
            self._columns,
            read_input=self._read_input,
            write=self._write,
        )
        search.run()
        self._write("End of report.")


def main() -> int:
    """Entry point for sysreport. Returns the process exit code."""
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT, stream=sys.stderr)
    # SIGTERM is handled like Ctrl+C
    signal.signal(signal.SIGTERM, signal.default_int_handler)

    report = SystemReport(SystemCollector(), default_columns())
    try:
        report.run()
    except (KeyboardInterrupt, EOFError):
        print("\nReport interrupted by user.")
        return EXIT_INTERRUPTED
    except DataSourceError as e:
        logger.error("Report aborted: %s", e)
        return EXIT_FAILURE
    return EXIT_OK
