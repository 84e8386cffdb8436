# model/snapshot.py

"""
Snapshot
========

Immutable record of one observed state in a proposition trace: an identifier,
the set of propositions that hold in the state, and an optional timestamp in
milliseconds. Snapshots are the concrete state type used by trace files and
the command-line runner; the evaluator itself is generic over any state.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Optional

from ltl.formula import Formula, Predicate
from runtime.cell import Cell, extract
from runtime.registry import Registry, format_millis


@dataclass(frozen=True, slots=True)
class Snapshot:
    sid: str
    props: FrozenSet[str] = field(default_factory=frozenset)
    millis: Optional[float] = None

    def has(self, name: str) -> bool:
        """Return True if proposition `name` holds in this snapshot."""
        return name in self.props

    def __str__(self) -> str:
        props_str = ",".join(sorted(self.props))
        at = "" if self.millis is None else f"@{format_millis(self.millis)}ms"
        return f"{self.sid}{at} [{props_str}]"


def proposition(props: Cell[FrozenSet[str]], name: str) -> Predicate:
    """Predicate that holds when `name` is among the current propositions."""

    def holds() -> bool:
        return name in props.current

    return Predicate(holds, name)


def proposition_resolver(registry: Registry) -> Callable[[str], Formula]:
    """
    Build a resolver mapping identifiers to proposition predicates over
    Snapshot states registered in `registry`. All predicates share one cell.
    """
    props = extract(registry, lambda snapshot: snapshot.props, "props")
    return lambda name: proposition(props, name)
