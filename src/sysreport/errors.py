"""Exceptions raised by sysreport."""


class SysreportError(Exception):
    """Base class for all sysreport errors."""


class DataSourceError(SysreportError):
    """An operating system query failed. Fatal for the whole report."""


class MalformedRecordError(SysreportError, ValueError):
    """A process listing line does not carry the ten fixed fields."""

    def __init__(self, line: str, field_count: int) -> None:
        super().__init__(f"expected at least 10 fields, got {field_count}: {line!r}")
        self.line = line
        self.field_count = field_count
