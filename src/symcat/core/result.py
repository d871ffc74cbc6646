"""
Result envelope for consistent success/failure handling.

Catalog operations that are expected to fail in bulk (finalizing a standard,
loading a cross-reference table, finalizing a whole library) return
``Ok[T]`` or ``Err[T]`` instead of raising, so callers can collect every
failure and report them together.

Manifesto:
    - **Explicit over Implicit:** No hidden exceptions that callers might miss
    - **Batch-friendly:** Run many operations through try_result(), then
      split the outcomes with partition_results()

Architecture:
    ::

        ┌──────────────────────────────────────────────────────┐
        │                     Result[T]                         │
        ├─────────────────┬─────────────────┬──────────────────┤
        │     Ok[T]       │     Err[T]      │     Utilities    │
        ├─────────────────┼─────────────────┼──────────────────┤
        │ • value: T      │ • error: Exc    │ • try_result()   │
        │ • unwrap()      │ • unwrap() ↑    │ • partition_     │
        │                 │                 │   results()      │
        └─────────────────┴─────────────────┴──────────────────┘

Examples:
    >>> from symcat.core.result import Ok, Err
    >>> Ok(10).unwrap()
    10
    >>> Err(ValueError("bad")).is_err()
    True

Tags:
    result-pattern, error-handling, symbol-catalog

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from .errors import CatalogError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """Failed result containing an error."""

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the error. Use only when you're sure it's Ok."""
        raise self.error

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[T]


def try_result(f: Callable[[], T]) -> Result[T]:
    """
    Execute a function and wrap its outcome in a Result.

    Only ``CatalogError`` is captured; anything else is a programming error
    and propagates.

    Examples:
        >>> from symcat.catalog.codes import parse
        >>> try_result(lambda: parse("104.1")).is_ok()
        True
        >>> try_result(lambda: parse("10a")).is_err()
        True
    """
    try:
        return Ok(f())
    except CatalogError as e:
        return Err(e)


def partition_results(
    results: list[Result[T]],
) -> tuple[list[T], list[Exception]]:
    """
    Partition results into successes and failures.

    Examples:
        >>> partition_results([Ok(1), Err(ValueError("a")), Ok(2)])[0]
        [1, 2]
    """
    values = []
    errors = []
    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                errors.append(error)
    return values, errors
