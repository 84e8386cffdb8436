# runtime/cell.py
# This file is part of Vigil - An LTL Runtime Verification

"""Extraction cells: lazy, pure views of the current observed state.

A Cell binds a query function to a Registry. Reading `.current` applies the
query to the registry's current state. The result is cached for the current
registration only, which is indistinguishable from recomputing on every read
as long as the query is pure.
"""

from __future__ import annotations
from typing import Callable, Generic, Optional, Tuple, TypeVar

from .exceptions import NoCurrentStateError
from .registry import Registry

S = TypeVar("S")
T = TypeVar("T")


class Cell(Generic[T]):
    """Query over the current state of a registry.

    Attributes:
        registry: Registry whose current state is observed
        query: Pure function from a state to the extracted value
        name: Label used in diagnostics
    """

    def __init__(
        self,
        registry: Registry,
        query: Callable[[S], T],
        name: Optional[str] = None,
    ) -> None:
        self.registry = registry
        self.query = query
        self.name = name or getattr(query, "__name__", "cell")
        self._cached_at: Optional[Tuple[int, int]] = None
        self._cached_value: Optional[T] = None

    @property
    def current(self) -> T:
        """Value of the query for the current state.

        Raises:
            NoCurrentStateError: If the registry has no current state
        """
        if not self.registry.has_state:
            raise NoCurrentStateError(f"cell {self.name!r} read with no current state")

        key = (self.registry.generation, self.registry.time.tick)
        if self._cached_at != key:
            self._cached_value = self.query(self.registry.state)
            self._cached_at = key
        return self._cached_value

    def __repr__(self) -> str:
        return f"Cell({self.name})"


def extract(registry: Registry, query: Callable[[S], T], name: Optional[str] = None) -> Cell[T]:
    """Bind `query` to `registry`; the sole channel for predicates to observe state."""
    return Cell(registry, query, name)
