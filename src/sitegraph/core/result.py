"""
Result Type Implementation.

A small Ok/Err pair used where a failure is an expected outcome rather than
an exceptional one: reading a single document during indexing, or running a
whole indexing pass from the CLI. Callers branch on ``is_ok()`` instead of
wrapping every file read in try/except.
"""

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful computation carrying its value."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """A failed computation carrying its error."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_err(self) -> E:
        return self.error

    def unwrap_or(self, default):
        return default


Result = Union[Ok[T], Err[E]]


def map_ok(result: Result[T, E], func: Callable[[T], U]) -> Result[U, E]:
    """Apply ``func`` to the value of an Ok, passing an Err through untouched."""
    if isinstance(result, Ok):
        return Ok(func(result.value))
    return result  # type: ignore
