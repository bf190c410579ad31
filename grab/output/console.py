"""Console output abstraction.

The installer and the CLI commands report progress through ConsoleProtocol
and never touch a terminal library directly:

- RichConsole: progress on stdout, errors and warnings on stderr
- MockConsole: records every line for assertions
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    """Named styles; values are keys of the Rich theme."""

    DEFAULT = "grab.default"
    SUCCESS = "grab.ok"
    ERROR = "grab.error"
    WARNING = "grab.warning"
    INFO = "grab.info"
    DIM = "grab.dim"
    BOLD = "grab.bold"

    def __str__(self) -> str:
        return self.name.lower()


_THEME = {
    Style.DEFAULT.value: "none",
    Style.SUCCESS.value: "green",
    Style.ERROR.value: "bold red",
    Style.WARNING.value: "yellow",
    Style.INFO.value: "cyan",
    Style.DIM.value: "dim",
    Style.BOLD.value: "bold",
}

# Prefix and style for each message kind
_LABELS = {
    "success": ("OK", Style.SUCCESS),
    "error": ("error:", Style.ERROR),
    "warning": ("warning:", Style.WARNING),
    "info": ("info:", Style.INFO),
}


class ConsoleProtocol(Protocol):
    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def table(self, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        """Print rows under column headings."""
        ...


class RichConsole:
    """Console backed by two Rich consoles (stdout and stderr)."""

    def __init__(self, console: Console | None = None, *, stderr: Console | None = None) -> None:
        from rich.console import Console
        from rich.theme import Theme

        theme = Theme(_THEME)
        self._out = console or Console()
        self._err = stderr or Console(stderr=True)
        for target in (self._out, self._err):
            target.push_theme(theme)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._out.print(message, style=style.value, markup=False, highlight=False)

    def _labelled(self, kind: str, message: str, *, stderr: bool = False) -> None:
        label, style = _LABELS[kind]
        target = self._err if stderr else self._out
        target.print(f"[{style.value}]{label}[/] {_escape(message)}", highlight=False)

    def success(self, message: str) -> None:
        self._labelled("success", message)

    def error(self, message: str) -> None:
        self._labelled("error", message, stderr=True)

    def warning(self, message: str) -> None:
        self._labelled("warning", message, stderr=True)

    def info(self, message: str) -> None:
        self._labelled("info", message)

    def table(self, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        from rich.table import Table

        table = Table(box=None, header_style=Style.BOLD.value, pad_edge=False)
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*row)
        self._out.print(table)


def _escape(message: str) -> str:
    from rich.markup import escape

    return escape(message)


@dataclass(frozen=True, slots=True)
class OutputRecord:
    message: str
    style: Style


def _no_records() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console that captures output for testing."""

    outputs: list[OutputRecord] = field(default_factory=_no_records)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def _labelled(self, kind: str, message: str) -> None:
        label, style = _LABELS[kind]
        self.outputs.append(OutputRecord(f"{label} {message}", style))

    def success(self, message: str) -> None:
        self._labelled("success", message)

    def error(self, message: str) -> None:
        self._labelled("error", message)

    def warning(self, message: str) -> None:
        self._labelled("warning", message)

    def info(self, message: str) -> None:
        self._labelled("info", message)

    def table(self, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        self.print("  ".join(columns), Style.BOLD)
        for row in rows:
            self.print("  ".join(row))

    # Assertion helpers

    @property
    def messages(self) -> list[str]:
        return [record.message for record in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(record.style is Style.ERROR for record in self.outputs)

    def has_warning(self) -> bool:
        return any(record.style is Style.WARNING for record in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        return [record for record in self.outputs if substring in record.message]
