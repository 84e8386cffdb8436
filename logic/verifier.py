# logic/verifier.py

"""
Verifier: a set of named properties checked together, one state at a time.

All properties share a single registry; every call to `process` registers
one state and advances each undecided property by one step. A property whose
verdict is conclusive is never evaluated again.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from ltl.evaluator import Evaluator
from ltl.formula import Formula
from ltl.verdict import Verdict, VerdictKind
from runtime.registry import Registry, Time
from utils.logger import get_logger
from .check import CheckResult, EmptyTraceError

logger = get_logger(__name__)


class PropertyState(Enum):
    INITIAL = "initial"
    RESIDUAL = "residual"
    DEFINITELY_TRUE = "definitely true"
    DEFINITELY_FALSE = "definitely false"

    @staticmethod
    def of(verdict: Verdict) -> PropertyState:
        if verdict.kind is VerdictKind.TRUE:
            return PropertyState.DEFINITELY_TRUE
        if verdict.kind is VerdictKind.FALSE:
            return PropertyState.DEFINITELY_FALSE
        return PropertyState.RESIDUAL


@dataclass(slots=True)
class _Tracked:
    formula: Formula
    state: PropertyState = PropertyState.INITIAL
    verdict: Optional[Verdict] = None
    states: int = 0

    @property
    def decided(self) -> bool:
        return self.state in (PropertyState.DEFINITELY_TRUE, PropertyState.DEFINITELY_FALSE)


@dataclass(slots=True)
class Verifier:
    """
    Incremental checker for named properties over one trace.

    Attributes:
        properties: Property name to formula; formulas must read cells bound
            to `registry`.
        registry: Registry the states are registered in.
    """
    properties: Dict[str, Formula]
    registry: Registry
    evaluator: Evaluator = field(default_factory=Evaluator)
    _tracked: Dict[str, _Tracked] = field(default_factory=dict, init=False)
    _last_time: Optional[Time] = field(default=None, init=False)

    def __post_init__(self):
        if not self.properties:
            raise ValueError("Verifier needs at least one property")
        self.reset()

    def reset(self) -> None:
        """Forget all progress and reset the registry for a fresh trace."""
        self.registry.reset()
        self._tracked = {name: _Tracked(f) for name, f in self.properties.items()}
        self._last_time = None

    def process(self, state, millis: Optional[float] = None) -> Dict[str, Verdict]:
        """
        Register `state` and advance every undecided property.

        Returns the latest verdict of every property, including those decided
        at earlier states.
        """
        time = self.registry.register(state, millis)
        self._last_time = time

        for name, tracked in self._tracked.items():
            if tracked.decided:
                continue

            if tracked.state is PropertyState.INITIAL:
                verdict = self.evaluator.evaluate(tracked.formula, time)
            else:
                verdict = self.evaluator.step(tracked.verdict.residual, time)

            previous = tracked.state
            tracked.verdict = verdict
            tracked.state = PropertyState.of(verdict)
            tracked.states += 1

            if tracked.state is not previous:
                logger.verdict_changed(name, str(time), tracked.state.value)

        return self.verdicts()

    def verdicts(self) -> Dict[str, Verdict]:
        return {name: t.verdict for name, t in self._tracked.items() if t.verdict is not None}

    def state_of(self, name: str) -> PropertyState:
        return self._tracked[name].state

    @property
    def all_decided(self) -> bool:
        return all(t.decided for t in self._tracked.values())

    @property
    def failed(self) -> List[str]:
        return [n for n, t in self._tracked.items() if t.state is PropertyState.DEFINITELY_FALSE]

    def finish(self) -> Dict[str, CheckResult]:
        """
        Final result per property; undecided properties are inconclusive.

        Raises:
            EmptyTraceError: If no state was processed since the last reset.
        """
        if self._last_time is None:
            raise EmptyTraceError("cannot finish a verification without any state")

        return {
            name: CheckResult.from_verdict(t.verdict, self._last_time, t.states)
            for name, t in self._tracked.items()
        }
