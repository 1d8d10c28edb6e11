"""Compute-once cell for pure, deterministic derived values."""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")


class ComputeOnce(Generic[T]):
    """Holds the result of ``compute`` after its first successful call.

    A failed computation leaves the cell empty, so the error is raised again
    on the next ``get()``. Once populated the value is returned as-is and
    ``compute`` is never invoked again.
    """

    __slots__ = ("_compute", "_computations", "_filled", "_value")

    def __init__(self, compute: Callable[[], T]) -> None:
        self._compute = compute
        self._value: T | None = None
        self._filled = False
        self._computations = 0

    @property
    def is_filled(self) -> bool:
        return self._filled

    @property
    def computations(self) -> int:
        """Number of successful computations (0 or 1)."""
        return self._computations

    def get(self) -> T:
        if not self._filled:
            value = self._compute()
            self._value = value
            self._filled = True
            self._computations += 1
        return self._value  # type: ignore[return-value]

    def peek(self) -> T | None:
        """Return the value if computed, without computing it."""
        return self._value if self._filled else None
