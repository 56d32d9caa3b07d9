"""Fixed settings for sysreport."""

from sysreport.models import Column, ColumnSpec

# (name, width) pairs for the process table, in `ps aux` column order.
COLUMN_DEFINITIONS: tuple[tuple[str, int], ...] = (
    ("USER", 10),
    ("PID", 8),
    ("%CPU", 5),
    ("%MEM", 5),
    ("VSZ", 8),
    ("RSS", 8),
    ("TTY", 8),
    ("STAT", 5),
    ("START", 10),
    ("TIME", 10),
    ("COMMAND", 60),
)

ROOT_MOUNT = "/"
DATE_FORMAT = "%d/%m/%Y %H:%M:%S"

# Inner width of the boxed report sections.
BOX_WIDTH = 51
BANNER_WIDTH = 53

EXIT_OK = 0
EXIT_INTERRUPTED = 1
EXIT_FAILURE = 1

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def default_columns() -> ColumnSpec:
    """Build the process table layout; only the last column wraps."""
    last = len(COLUMN_DEFINITIONS) - 1
    return ColumnSpec(
        tuple(
            Column(name, width, truncate=index != last)
            for index, (name, width) in enumerate(COLUMN_DEFINITIONS)
        )
    )
