"""Exception types raised while preparing and rendering invoice lines."""

from typing import Any, Optional


class InvoiceError(Exception):
    """Base class for errors raised on purpose by this package."""

    def __init__(self, message: str, field: Optional[str] = None, line: Optional[int] = None):
        self.message = message
        self.field = field
        self.line = line
        super().__init__(self._describe())

    def _describe(self) -> str:
        parts = []
        if self.line is not None:
            parts.append(f"line {self.line}")
        if self.field:
            parts.append(f"field '{self.field}'")
        if parts:
            return f"{', '.join(parts)}: {self.message}"
        return self.message


class ParseError(InvoiceError, ValueError):
    """A monetary or percentage field is not a valid decimal string."""

    def __init__(self, field: str, value: Any, line: Optional[int] = None):
        self.value = value
        super().__init__(f"invalid decimal value {value!r}", field=field, line=line)


class ValidationError(InvoiceError, ValueError):
    """A record or nested spec is internally inconsistent."""
