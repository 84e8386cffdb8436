# ltl/evaluator.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Three-valued incremental evaluation of LTL formulas

"""Incremental three-valued evaluator for LTL formulas.

`evaluate(formula, time)` judges a formula against the state registered at
`time`; `step(residual, time)` resumes an undecided result with the next
registered state. Both share one recursive rule set, so a residual stepped at
time t behaves exactly like the formula it stands for evaluated at t.

Every node yields one of three verdicts:
    TRUE      satisfied, nothing left to check
    FALSE     violated, with a violation tree naming the failing leaf
    RESIDUAL  undecided, with the minimal obligation left for the next state

Combination rules for two operands evaluated at the same time:
    - a decided operand dominates a pending one (short-circuit)
    - with both operands false in `and`, the left operand is blamed
    - a satisfied conjunct (or falsified disjunct) drops out of the residual

Temporal bounds are compared against Time.millis. A bounded `always` or
`eventually` first evaluated at s has deadline s.millis + bound; fresh
instances of the subformula are checked at every state up to the deadline.
"""

from __future__ import annotations
from typing import List, Optional, Tuple

from runtime.registry import Time
from utils.logger import get_logger
from .formula import (
    Always,
    And,
    Eventually,
    Formula,
    Implies,
    Literal,
    Next,
    Not,
    Or,
    Predicate,
)
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
    PureViolation,
)

logger = get_logger(__name__)


class Evaluator:
    """Visitor implementing `evaluate` over formulas and `step` over residuals.

    Stateless between calls; a single instance may serve any number of
    independent traces as long as calls are not interleaved within one trace.
    """

    def evaluate(self, formula: Formula, time: Time) -> Verdict:
        """Judge `formula` against the state registered at `time`.

        Raises:
            TypeError: If `formula` is not a Formula
        """
        if not isinstance(formula, Formula):
            raise TypeError(f"Unknown formula type: {type(formula).__name__}")
        return formula.accept(self, time)

    def step(self, residual: Residual, time: Time) -> Verdict:
        """Resume `residual` with the state registered at `time`.

        Raises:
            TypeError: If `residual` is not a Residual
        """
        if not isinstance(residual, Residual):
            raise TypeError(f"Unknown residual type: {type(residual).__name__}")
        return residual.accept(self, time)

    # Formula visitor

    def visit_literal(self, n: Literal, time: Time) -> Verdict:
        if n.value:
            return Verdict.true()
        return Verdict.false(PureViolation(n.description, time))

    def visit_predicate(self, n: Predicate, time: Time) -> Verdict:
        result = n.thunk()
        if isinstance(result, Formula):
            return self.evaluate(result, time)
        verdict = self.visit_literal(Literal(bool(result), n.description), time)
        logger.node_decided(n.description, str(time), str(verdict))
        return verdict

    def visit_not(self, n: Not, time: Time) -> Verdict:
        return _negate(self.evaluate(n.subformula, time), str(n.subformula), time)

    def visit_and(self, n: And, time: Time) -> Verdict:
        return _conjoin(self.evaluate(n.left, time), self.evaluate(n.right, time))

    def visit_or(self, n: Or, time: Time) -> Verdict:
        return _disjoin(self.evaluate(n.left, time), self.evaluate(n.right, time))

    def visit_implies(self, n: Implies, time: Time) -> Verdict:
        return _imply(
            str(n.left), self.evaluate(n.left, time), self.evaluate(n.right, time)
        )

    def visit_next(self, n: Next, time: Time) -> Verdict:
        return Verdict.pending(DerivedResidual(n.subformula))

    def visit_always(self, n: Always, time: Time) -> Verdict:
        deadline = None if n.bound_millis is None else time.millis + n.bound_millis
        return self._always(n.subformula, time, deadline, (), time)

    def visit_eventually(self, n: Eventually, time: Time) -> Verdict:
        deadline = None if n.bound_millis is None else time.millis + n.bound_millis
        return self._eventually(n.subformula, time, deadline, (), time)

    # Residual visitor

    def step_derived(self, r: DerivedResidual, time: Time) -> Verdict:
        return self.evaluate(r.formula, time)

    def step_not(self, r: NotResidual, time: Time) -> Verdict:
        return _negate(self.step(r.residual, time), str(r.residual), time)

    def step_and(self, r: AndResidual, time: Time) -> Verdict:
        return _conjoin(self.step(r.left, time), self.step(r.right, time))

    def step_or(self, r: OrResidual, time: Time) -> Verdict:
        return _disjoin(self.step(r.left, time), self.step(r.right, time))

    def step_implies(self, r: ImpliesResidual, time: Time) -> Verdict:
        left = self.step(r.left, time)
        if r.right is None:
            right = Verdict.false(r.consequent_violation)
        else:
            right = self.step(r.right, time)
        return _imply(r.antecedent, left, right)

    def step_always(self, r: AlwaysResidual, time: Time) -> Verdict:
        return self._always(r.subformula, r.start, r.deadline_millis, r.pending, time)

    def step_eventually(self, r: EventuallyResidual, time: Time) -> Verdict:
        return self._eventually(r.subformula, r.start, r.deadline_millis, r.pending, time)

    # Temporal operators

    def _always(
        self,
        subformula: Formula,
        start: Time,
        deadline: Optional[float],
        pending: Tuple[Residual, ...],
        time: Time,
    ) -> Verdict:
        # Equal instances are merged, keeping the oldest
        remaining: List[Residual] = []
        verdicts = [self.step(p, time) for p in pending]
        if deadline is None or time.millis <= deadline:
            verdicts.append(self.evaluate(subformula, time))

        for verdict in verdicts:
            if verdict.kind is VerdictKind.FALSE:
                logger.node_decided(f"always({subformula})", str(time), "FALSE")
                return Verdict.false(
                    AlwaysViolation(subformula, start, time, verdict.violation)
                )
            if verdict.kind is VerdictKind.RESIDUAL and verdict.residual not in remaining:
                remaining.append(verdict.residual)

        if deadline is not None and time.millis >= deadline and not remaining:
            logger.node_decided(f"always({subformula})", str(time), "TRUE (window elapsed)")
            return Verdict.true()
        return Verdict.pending(AlwaysResidual(subformula, start, deadline, tuple(remaining)))

    def _eventually(
        self,
        subformula: Formula,
        start: Time,
        deadline: Optional[float],
        pending: Tuple[Residual, ...],
        time: Time,
    ) -> Verdict:
        remaining: List[Residual] = []
        verdicts = [self.step(p, time) for p in pending]
        if deadline is None or time.millis <= deadline:
            verdicts.append(self.evaluate(subformula, time))

        for verdict in verdicts:
            if verdict.kind is VerdictKind.TRUE:
                logger.node_decided(f"eventually({subformula})", str(time), "TRUE")
                return Verdict.true()
            if verdict.kind is VerdictKind.RESIDUAL and verdict.residual not in remaining:
                remaining.append(verdict.residual)

        if deadline is not None and time.millis >= deadline and not remaining:
            logger.node_decided(f"eventually({subformula})", str(time), "FALSE (timed out)")
            return Verdict.false(
                EventuallyViolation(
                    subformula, start, time, EventuallyReason.TIMED_OUT, deadline
                )
            )
        return Verdict.pending(
            EventuallyResidual(subformula, start, deadline, tuple(remaining))
        )


def _negate(verdict: Verdict, description: str, time: Time) -> Verdict:
    if verdict.kind is VerdictKind.TRUE:
        return Verdict.false(NotViolation(description, time))
    if verdict.kind is VerdictKind.FALSE:
        return Verdict.true()
    return Verdict.pending(NotResidual(verdict.residual))


def _conjoin(left: Verdict, right: Verdict) -> Verdict:
    if left.kind is VerdictKind.FALSE:
        return Verdict.false(AndViolation("left", left.violation))
    if right.kind is VerdictKind.FALSE:
        return Verdict.false(AndViolation("right", right.violation))
    if left.kind is VerdictKind.TRUE:
        return right
    if right.kind is VerdictKind.TRUE:
        return left
    return Verdict.pending(AndResidual(left.residual, right.residual))


def _disjoin(left: Verdict, right: Verdict) -> Verdict:
    if left.kind is VerdictKind.TRUE or right.kind is VerdictKind.TRUE:
        return Verdict.true()
    if left.kind is VerdictKind.FALSE and right.kind is VerdictKind.FALSE:
        return Verdict.false(OrViolation(left.violation, right.violation))
    if left.kind is VerdictKind.FALSE:
        return right
    if right.kind is VerdictKind.FALSE:
        return left
    return Verdict.pending(OrResidual(left.residual, right.residual))


def _imply(antecedent: str, left: Verdict, right: Verdict) -> Verdict:
    # Same table as (!left | right), with implies-tagged violations and residuals
    if left.kind is VerdictKind.FALSE or right.kind is VerdictKind.TRUE:
        return Verdict.true()
    if left.kind is VerdictKind.TRUE:
        if right.kind is VerdictKind.FALSE:
            return Verdict.false(ImpliesViolation(antecedent, right.violation))
        return right
    if right.kind is VerdictKind.FALSE:
        return Verdict.pending(
            ImpliesResidual(antecedent, left.residual, None, right.violation)
        )
    return Verdict.pending(ImpliesResidual(antecedent, left.residual, right.residual))


_default_evaluator = Evaluator()


def evaluate(formula: Formula, time: Time) -> Verdict:
    """Evaluate a top-level formula at `time` (module-level convenience)."""
    return _default_evaluator.evaluate(formula, time)


def step(residual: Residual, time: Time) -> Verdict:
    """Resume a residual at `time` (module-level convenience)."""
    return _default_evaluator.step(residual, time)
