"""Interactive process search."""

import logging
from collections.abc import Callable
from enum import Enum

from sysreport.errors import MalformedRecordError
from sysreport.models import ColumnSpec, ProcessRecord
from sysreport.table import render_table

logger = logging.getLogger(__name__)

PROMPT = "Enter the process to search for: "


class SearchState(Enum):
    """States of the search loop."""

    PROMPTING = "prompting"
    SEARCHING = "searching"
    EMPTY = "empty"
    NOT_FOUND = "not_found"
    FOUND = "found"


def match_lines(lines: list[str], term: str) -> list[str]:
    """Keep the lines containing term, ignoring case."""
    needle = term.casefold()
    return [line for line in lines if needle in line.casefold()]


def parse_records(lines: list[str]) -> list[ProcessRecord]:
    """Tokenize listing lines, skipping malformed ones with a warning."""
    records = []
    for line in lines:
        try:
            records.append(ProcessRecord.from_line(line))
        except MalformedRecordError as e:
            logger.warning("Skipping malformed process line: %s", e)
    return records


class ProcessSearch:
    """
    Prompt for a process name until at least one process matches.

    Each call to step() performs one state transition, so the loop can be
    driven one state at a time. run() steps until FOUND. Input and output are
    injectable; the defaults block on the terminal.
    """

    def __init__(
        self,
        list_processes: Callable[[], list[str]],
        columns: ColumnSpec,
        read_input: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ) -> None:
        """
        Initialize the ProcessSearch.

        Args:
            list_processes: Returns the current process listing lines.
            columns: Table layout for the results.
            read_input: Reads one line of user input, given a prompt.
            write: Emits one line of output.
        """
        self._list_processes = list_processes
        self._columns = columns
        self._read_input = read_input
        self._write = write
        self._state = SearchState.PROMPTING
        self._term = ""
        self._results: list[ProcessRecord] = []

    @property
    def state(self) -> SearchState:
        """Get the current state."""
        return self._state

    @property
    def term(self) -> str:
        """Get the last search term entered."""
        return self._term

    @property
    def results(self) -> list[ProcessRecord]:
        """Get the matched records once the search is FOUND."""
        return list(self._results)

    def step(self) -> SearchState:
        """Perform one transition and return the new state."""
        handler = {
            SearchState.PROMPTING: self._prompt,
            SearchState.EMPTY: self._report_empty,
            SearchState.SEARCHING: self._search,
            SearchState.NOT_FOUND: self._report_not_found,
            SearchState.FOUND: lambda: SearchState.FOUND,
        }[self._state]
        self._state = handler()
        return self._state

    def run(self) -> list[ProcessRecord]:
        """Step until a search matches, then return the matched records."""
        while self._state is not SearchState.FOUND:
            self.step()
        return self.results

    def _prompt(self) -> SearchState:
        self._term = self._read_input(PROMPT).strip()
        self._write("")
        return SearchState.SEARCHING if self._term else SearchState.EMPTY

    def _report_empty(self) -> SearchState:
        self._write("You must enter a process name. Try again.")
        self._write("")
        return SearchState.PROMPTING

    def _search(self) -> SearchState:
        records = parse_records(match_lines(self._list_processes(), self._term))
        if not records:
            return SearchState.NOT_FOUND

        self._results = records
        self._write(f"Found the following processes matching '{self._term}':")
        for line in render_table(records, self._columns):
            self._write(line)
        return SearchState.FOUND

    def _report_not_found(self) -> SearchState:
        self._write(f"No processes found matching '{self._term}'. Try again.")
        return SearchState.PROMPTING
