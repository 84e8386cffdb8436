# ltl/stop.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Default verdicts for residuals left open when a trace ends

"""Stop defaults: how an open residual would settle if the trace ended now.

A finite trace can never prove an unbounded `always` nor refute an unbounded
`eventually`, so the interface contract reports residuals at end of trace as
inconclusive. The stop default is an advisory reading on top of that: an open
`always` has seen no counterexample and leans TRUE, an open `eventually` has
not seen its goal and leans FALSE, and a deferred `next` has no opinion.
Boolean residuals combine their operands' defaults with three-valued rules.
"""

from __future__ import annotations
from typing import Optional

from runtime.registry import Time
from .residual import (
    AlwaysResidual,
    AndResidual,
    DerivedResidual,
    EventuallyResidual,
    ImpliesResidual,
    NotResidual,
    OrResidual,
    Residual,
)
from .verdict import Verdict, VerdictKind
from .violation import (
    AlwaysViolation,
    AndViolation,
    EventuallyReason,
    EventuallyViolation,
    ImpliesViolation,
    NotViolation,
    OrViolation,
)


def stop_default(residual: Residual, time: Time) -> Optional[Verdict]:
    """Return the TRUE/FALSE verdict `residual` settles on at end of trace.

    Args:
        residual: An open residual
        time: Time of the last registered state

    Returns:
        A conclusive Verdict, or None when the residual has no default
    """
    if isinstance(residual, DerivedResidual):
        return None

    if isinstance(residual, NotResidual):
        inner = stop_default(residual.residual, time)
        if inner is None:
            return None
        if inner.is_true:
            return Verdict.false(NotViolation(str(residual.residual), time))
        return Verdict.true()

    if isinstance(residual, AndResidual):
        left = stop_default(residual.left, time)
        right = stop_default(residual.right, time)
        if left is not None and left.is_false:
            return Verdict.false(AndViolation("left", left.violation))
        if right is not None and right.is_false:
            return Verdict.false(AndViolation("right", right.violation))
        if left is not None and right is not None:
            return Verdict.true()
        return None

    if isinstance(residual, OrResidual):
        left = stop_default(residual.left, time)
        right = stop_default(residual.right, time)
        if (left is not None and left.is_true) or (right is not None and right.is_true):
            return Verdict.true()
        if left is not None and right is not None:
            return Verdict.false(OrViolation(left.violation, right.violation))
        return None

    if isinstance(residual, ImpliesResidual):
        left = stop_default(residual.left, time)
        if residual.right is None:
            right = Verdict.false(residual.consequent_violation)
        else:
            right = stop_default(residual.right, time)
        if (left is not None and left.is_false) or (right is not None and right.is_true):
            return Verdict.true()
        if left is not None and right is not None:
            return Verdict.false(ImpliesViolation(residual.antecedent, right.violation))
        return None

    if isinstance(residual, AlwaysResidual):
        undecided = False
        for pending in residual.pending:
            default = stop_default(pending, time)
            if default is None:
                undecided = True
            elif default.kind is VerdictKind.FALSE:
                return Verdict.false(
                    AlwaysViolation(
                        residual.subformula, residual.start, time, default.violation
                    )
                )
        return None if undecided else Verdict.true()

    if isinstance(residual, EventuallyResidual):
        undecided = False
        for pending in residual.pending:
            default = stop_default(pending, time)
            if default is None:
                undecided = True
            elif default.kind is VerdictKind.TRUE:
                return Verdict.true()
        if undecided:
            return None
        return Verdict.false(
            EventuallyViolation(
                residual.subformula,
                residual.start,
                time,
                EventuallyReason.TEST_ENDED,
                residual.deadline_millis,
            )
        )

    raise TypeError(f"Unknown residual type: {type(residual).__name__}")
