"""Ok/Err values for fallible operations.

Resolution, download, extraction and manifest loading all return
``Ok(value)`` or ``Err(error)``; errors are frozen dataclasses that the CLI
layer turns into messages and exit codes. Only the CLI raises (``typer.Exit``).

    match resolve_url(binary, host):
        case Ok(url):
            ...
        case Err(TemplateParseError() as error):
            ...
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import NoReturn, TypeGuard

__all__ = ["Ok", "Err", "Result", "is_ok", "is_err"]


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T

    def unwrap(self) -> T:
        return self.value

    def map_err[F](self, f: Callable[[object], F]) -> Ok[T]:
        return self


@dataclass(frozen=True, slots=True)
class Err[E]:
    error: E

    def unwrap(self) -> NoReturn:
        """Raise ValueError; an Err carries no value."""
        raise ValueError(f"called unwrap on Err: {self.error}")

    def map_err[F](self, f: Callable[[E], F]) -> Err[F]:
        """Convert the error, e.g. a lower-level failure into a per-binary one."""
        return Err(f(self.error))


type Result[T, E] = Ok[T] | Err[E]


def is_ok[T, E](result: Result[T, E]) -> TypeGuard[Ok[T]]:
    return isinstance(result, Ok)


def is_err[T, E](result: Result[T, E]) -> TypeGuard[Err[E]]:
    return isinstance(result, Err)
