"""Data models for sysreport."""

from collections.abc import Iterator
from dataclasses import dataclass

from sysreport.errors import MalformedRecordError

FIXED_FIELD_COUNT = 10


@dataclass(slots=True, frozen=True)
class Column:
    """A named fixed-width table column."""

    name: str
    width: int
    truncate: bool = True  # False for the free-text column, which wraps


@dataclass(slots=True, frozen=True)
class ColumnSpec:
    """
    Immutable ordered table layout.

    Every column but the last truncates; the last one word-wraps.
    """

    columns: tuple[Column, ...]

    def __post_init__(self) -> None:
        """Validate the layout invariants."""
        if not self.columns:
            raise ValueError("a column spec needs at least one column")
        for column in self.columns:
            if column.width <= 0:
                raise ValueError(f"column {column.name!r} has non-positive width {column.width}")
        if self.columns[-1].truncate:
            raise ValueError("the last column must wrap, not truncate")
        if not all(column.truncate for column in self.columns[:-1]):
            raise ValueError("only the last column may wrap")

    def __len__(self) -> int:
        return len(self.columns)

    def __iter__(self) -> Iterator[Column]:
        return iter(self.columns)

    @property
    def fixed(self) -> tuple[Column, ...]:
        """Columns holding the truncated fixed fields."""
        return self.columns[:-1]

    @property
    def wrapped(self) -> Column:
        """The trailing free-text column."""
        return self.columns[-1]


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """One row of the process listing. All fields are display strings."""

    user: str
    pid: str
    cpu: str
    mem: str
    vsz: str
    rss: str
    tty: str
    stat: str
    start: str
    time: str
    command: str  # may contain spaces; may be empty

    @classmethod
    def from_line(cls, line: str) -> "ProcessRecord":
        """
        Tokenize one `ps aux`-style listing line.

        The line is split on runs of whitespace. The first ten tokens are the
        fixed fields and the remainder, rejoined with single spaces, is the
        command. Repeated spaces inside the command are therefore collapsed.

        Raises:
            MalformedRecordError: if the line has fewer than ten tokens.
        """
        tokens = line.split()
        if len(tokens) < FIXED_FIELD_COUNT:
            raise MalformedRecordError(line, len(tokens))
        return cls(*tokens[:FIXED_FIELD_COUNT], command=" ".join(tokens[FIXED_FIELD_COUNT:]))

    def fixed_fields(self) -> tuple[str, ...]:
        """Return the ten fixed fields in column order."""
        return (
            self.user,
            self.pid,
            self.cpu,
            self.mem,
            self.vsz,
            self.rss,
            self.tty,
            self.stat,
            self.start,
            self.time,
        )
