"""Fixed-width ASCII table rendering with a word-wrapped last column."""

import textwrap
from collections.abc import Iterable

from sysreport.models import ColumnSpec, ProcessRecord

BORDER = "|"
CORNER = "+"
FILL = "-"


def wrap_text(text: str, width: int) -> list[str]:
    """
    Greedily word-wrap text into lines of at most `width` characters.

    Text that already fits is returned unchanged. Otherwise whitespace runs
    are collapsed before wrapping. A single word longer than `width` is
    kept whole on its own line, so that line may exceed `width`. Empty input
    gives a single empty line.
    """
    if width <= 0:
        raise ValueError(f"width must be positive, got {width}")
    if text.strip() and len(text) <= width:
        return [text]
    normalized = " ".join(text.split())
    lines = textwrap.wrap(
        normalized,
        width=width,
        break_long_words=False,
        break_on_hyphens=False,
    )
    return lines or [""]


def _cell(value: str, width: int) -> str:
    return value[:width].ljust(width)


def _join(cells: Iterable[str]) -> str:
    return BORDER + BORDER.join(cells) + BORDER


def render_divider(columns: ColumnSpec) -> str:
    """Render a horizontal border such as `+-----+---+`."""
    return CORNER + CORNER.join(FILL * column.width for column in columns) + CORNER


def render_header(columns: ColumnSpec) -> str:
    """Render the row of column names."""
    return _join(_cell(column.name, column.width) for column in columns)


def render_row(record: ProcessRecord, columns: ColumnSpec) -> list[str]:
    """
    Render one record as one or more table lines.

    The first line carries every fixed field and the first command segment.
    Continuation lines leave the fixed cells blank and carry the remaining
    segments.
    """
    fields = record.fixed_fields()
    if len(fields) != len(columns.fixed):
        raise ValueError(
            f"column spec has {len(columns.fixed)} fixed columns, record has {len(fields)} fields"
        )

    wrapped = columns.wrapped
    segments = wrap_text(record.command, wrapped.width)
    blanks = [" " * column.width for column in columns.fixed]

    lines = []
    for index, segment in enumerate(segments):
        if index == 0:
            cells = [_cell(value, column.width) for value, column in zip(fields, columns.fixed)]
        else:
            cells = list(blanks)
        cells.append(_cell(segment, wrapped.width))
        lines.append(_join(cells))
    return lines


def render_table(records: Iterable[ProcessRecord], columns: ColumnSpec) -> list[str]:
    """
    Render records as a bordered table, in input order.

    The result ends with a blank line. With no records the divider under the
    header also closes the table.
    """
    divider = render_divider(columns)
    lines = [divider, render_header(columns)]
    body: list[str] = []
    for record in records:
        body.extend(render_row(record, columns))
    if body:
        lines.append(divider)
        lines.extend(body)
    lines.append(divider)
    lines.append("")
    return lines
