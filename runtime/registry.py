# runtime/registry.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Logical clock and current-state registry for a single trace

"""Logical clock and current-state registry.

A Registry owns the one "current" observed state of a trace together with the
Time it was registered at. Every registration advances the logical tick by one
and stamps the state with a millisecond timestamp used by bounded temporal
operators. Extraction cells read the current state through the registry, so
all cells bound to one registry always observe the most recent registration.

Registries are never shared between traces: each independent check constructs
its own instance and calls reset() before replaying a fresh trace.

Example:
    >>> registry = Registry()
    >>> t0 = registry.register({"count": 1})
    >>> registry.time == t0
    True
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, Optional, Tuple, TypeVar

from utils.logger import get_logger
from .exceptions import NoCurrentStateError

S = TypeVar("S")


@dataclass(frozen=True, slots=True, order=True)
class Time:
    """Logical time of a registered state.

    Attributes:
        tick: Strictly increasing registration counter, 0 for the first state
        millis: Timestamp in milliseconds used for bound arithmetic
    """

    tick: int
    millis: float

    def __str__(self) -> str:
        return f"t{self.tick}@{format_millis(self.millis)}ms"


def format_millis(millis: float) -> str:
    """Render a millisecond value without a trailing .0 for whole numbers."""
    return str(int(millis)) if float(millis).is_integer() else str(millis)


@dataclass(frozen=True, slots=True)
class _Current(Generic[S]):
    state: S
    time: Time


class Registry(Generic[S]):
    """Single-writer holder of the current state of one trace.

    Args:
        tick_millis: Milliseconds between two registrations when the caller
            does not supply explicit timestamps
    """

    def __init__(self, tick_millis: float = 1.0) -> None:
        if tick_millis < 0:
            raise ValueError(f"tick_millis must be non-negative, got {tick_millis}")
        self.tick_millis = tick_millis
        self._next_tick = 0
        self._current: Optional[_Current[S]] = None
        # Bumped on every reset so cells can tell a replayed tick from the old one
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def has_state(self) -> bool:
        return self._current is not None

    def register(self, state: S, millis: Optional[float] = None) -> Time:
        """Make `state` current and assign it a fresh Time.

        Args:
            state: The newly observed state
            millis: Explicit timestamp; defaults to the previous timestamp plus
                tick_millis (0.0 for the first state)

        Returns:
            The Time of the registration, identical to what `time` reads back

        Raises:
            ValueError: If `millis` is earlier than the current timestamp
        """
        logger = get_logger()

        if millis is None:
            millis = 0.0 if self._current is None else self._current.time.millis + self.tick_millis
        elif self._current is not None and millis < self._current.time.millis:
            raise ValueError(
                f"timestamp {millis}ms is earlier than current {self._current.time}"
            )

        time = Time(self._next_tick, float(millis))
        self._current = _Current(state, time)
        self._next_tick += 1

        logger.state_registered(str(time), repr(state))
        return time

    def current(self) -> Tuple[S, Time]:
        """Return the current (state, time) pair.

        Raises:
            NoCurrentStateError: If no state has been registered
        """
        if self._current is None:
            raise NoCurrentStateError("registry has no current state")
        return self._current.state, self._current.time

    @property
    def state(self) -> S:
        if self._current is None:
            raise NoCurrentStateError("registry has no current state")
        return self._current.state

    @property
    def time(self) -> Time:
        if self._current is None:
            raise NoCurrentStateError("registry has no current time")
        return self._current.time

    def reset(self) -> None:
        """Return to the empty lifecycle so a fresh trace can be replayed."""
        get_logger().debug("Registry reset")
        self._next_tick = 0
        self._current = None
        self._generation += 1

    def extract(self, query, name: Optional[str] = None):
        """Create a Cell reading `query` against this registry's current state."""
        from .cell import Cell

        return Cell(self, query, name)

    def __repr__(self) -> str:
        current = str(self._current.time) if self._current else "empty"
        return f"Registry({current})"
