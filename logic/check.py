# logic/check.py

"""
run_check: evaluate one formula over a complete, in-memory trace.

Resets the registry the formula's cells are bound to, evaluates against the
first state, steps through the rest, and stops early once the verdict is
conclusive. A residual left at the end of the trace is reported as
inconclusive, never as a failure.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Sequence

from ltl.evaluator import Evaluator
from ltl.formula import Formula
from ltl.stop import stop_default
from ltl.verdict import Verdict, VerdictKind
from ltl.violation import Violation
from runtime.registry import Registry
from utils.logger import get_logger

logger = get_logger(__name__)


class EmptyTraceError(ValueError):
    """Raised when a check is run against a trace with no states."""


class CheckOutcome(Enum):
    """Three-state result of checking a property against a whole trace."""
    PASSED = auto()  # property has been satisfied
    FAILED = auto()  # property has been violated
    INCONCLUSIVE = auto()  # trace ended with the property still open


@dataclass(frozen=True, slots=True)
class CheckResult:
    """
    Outcome of a check.

    Attributes:
        outcome: PASSED, FAILED or INCONCLUSIVE.
        violation: Violation tree when FAILED.
        pending_kind: Type tag of the open residual when INCONCLUSIVE.
        stop_default: Advisory end-of-trace reading when INCONCLUSIVE.
        states: Number of states consumed.
    """
    outcome: CheckOutcome
    violation: Optional[Violation] = None
    pending_kind: Optional[str] = None
    stop_default: Optional[Verdict] = None
    states: int = 0

    @property
    def passed(self) -> bool:
        return self.outcome is CheckOutcome.PASSED

    @property
    def failed(self) -> bool:
        return self.outcome is CheckOutcome.FAILED

    @property
    def inconclusive(self) -> bool:
        return self.outcome is CheckOutcome.INCONCLUSIVE

    @staticmethod
    def from_verdict(verdict: Verdict, time, states: int) -> CheckResult:
        """Classify the last verdict of a trace."""
        if verdict.kind is VerdictKind.TRUE:
            return CheckResult(CheckOutcome.PASSED, states=states)
        if verdict.kind is VerdictKind.FALSE:
            return CheckResult(CheckOutcome.FAILED, violation=verdict.violation, states=states)
        return CheckResult(
            CheckOutcome.INCONCLUSIVE,
            pending_kind=verdict.residual.type,
            stop_default=stop_default(verdict.residual, time),
            states=states,
        )


def run_check(
    formula: Formula,
    trace: Sequence,
    registry: Registry,
    timestamps: Optional[Sequence[float]] = None,
    evaluator: Optional[Evaluator] = None,
) -> CheckResult:
    """
    Check `formula` against `trace`, one registration per state.

    `registry` must be the registry the formula's cells were extracted from.
    `timestamps`, if given, supplies the millisecond timestamp of each state;
    otherwise the registry's tick interval applies.

    An inconclusive result reports the tag of the open residual in
    `pending_kind`. Open `always` and `eventually` obligations carry their
    own tags rather than `derived`, so callers can tell an unfinished
    invariant from an unfinished goal; `derived` only marks a pending `next`.

    Raises EmptyTraceError for an empty trace and ValueError when the
    timestamps do not match the trace length.
    """
    if len(trace) == 0:
        raise EmptyTraceError("cannot evaluate against an empty trace")
    if timestamps is not None and len(timestamps) != len(trace):
        raise ValueError(
            f"got {len(timestamps)} timestamps for a trace of {len(trace)} states"
        )

    evaluator = evaluator or Evaluator()
    registry.reset()

    def millis_at(i: int) -> Optional[float]:
        return None if timestamps is None else timestamps[i]

    time = registry.register(trace[0], millis_at(0))
    verdict = evaluator.evaluate(formula, time)
    consumed = 1

    for i in range(1, len(trace)):
        if verdict.kind is not VerdictKind.RESIDUAL:
            break
        time = registry.register(trace[i], millis_at(i))
        verdict = evaluator.step(verdict.residual, time)
        consumed += 1

    logger.debug(f"Check of {formula} finished after {consumed} state(s): {verdict}")
    return CheckResult.from_verdict(verdict, time, consumed)
