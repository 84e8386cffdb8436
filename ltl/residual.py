# ltl/residual.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Residual obligations left undecided after a prefix of the trace

"""Residuals: what remains to be checked after an undecided step.

Residuals are produced only by the evaluator and resumed with `step` at the
next registered state. Each residual class is tagged with the combinator that
produced it so callers can classify an inconclusive result:

    derived     a whole formula deferred to the next state (from `next`)
    not         negation of a pending residual
    and / or    both operands still pending
    implies     antecedent pending, consequent pending or already false
    always      invariant still open (window not elapsed, or unbounded)
    eventually  goal not yet observed before the deadline
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Optional, Protocol, Tuple

if TYPE_CHECKING:
    from runtime.registry import Time
    from .formula import Formula
    from .violation import Violation


class ResidualVisitor(Protocol):
    """Interface for visitors over the closed set of residual variants."""

    def step_derived(self, r: DerivedResidual, time): ...

    def step_not(self, r: NotResidual, time): ...

    def step_and(self, r: AndResidual, time): ...

    def step_or(self, r: OrResidual, time): ...

    def step_implies(self, r: ImpliesResidual, time): ...

    def step_always(self, r: AlwaysResidual, time): ...

    def step_eventually(self, r: EventuallyResidual, time): ...


@dataclass(frozen=True, slots=True)
class Residual:
    """Base class for residual obligations."""

    type: ClassVar[str] = "residual"

    def accept(self, v: ResidualVisitor, time):
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class DerivedResidual(Residual):
    """A formula to evaluate from scratch at the next state."""

    type: ClassVar[str] = "derived"

    formula: Formula

    def accept(self, v: ResidualVisitor, time):
        return v.step_derived(self, time)

    def __str__(self) -> str:
        return f"next({self.formula})"


@dataclass(frozen=True, slots=True)
class NotResidual(Residual):
    type: ClassVar[str] = "not"

    residual: Residual

    def accept(self, v: ResidualVisitor, time):
        return v.step_not(self, time)

    def __str__(self) -> str:
        return f"!{self.residual}"


@dataclass(frozen=True, slots=True)
class AndResidual(Residual):
    type: ClassVar[str] = "and"

    left: Residual
    right: Residual

    def accept(self, v: ResidualVisitor, time):
        return v.step_and(self, time)

    def __str__(self) -> str:
        return f"({self.left} & {self.right})"


@dataclass(frozen=True, slots=True)
class OrResidual(Residual):
    type: ClassVar[str] = "or"

    left: Residual
    right: Residual

    def accept(self, v: ResidualVisitor, time):
        return v.step_or(self, time)

    def __str__(self) -> str:
        return f"({self.left} | {self.right})"


@dataclass(frozen=True, slots=True)
class ImpliesResidual(Residual):
    """Pending implication whose antecedent is still undecided.

    Attributes:
        antecedent: Description of the original antecedent, for diagnostics
        left: Pending residual of the antecedent
        right: Pending residual of the consequent, or None when the consequent
            already failed with `consequent_violation`
        consequent_violation: Violation recorded when the consequent failed first
    """

    type: ClassVar[str] = "implies"

    antecedent: str
    left: Residual
    right: Optional[Residual] = None
    consequent_violation: Optional[Violation] = None

    def accept(self, v: ResidualVisitor, time):
        return v.step_implies(self, time)

    def __str__(self) -> str:
        right = self.right if self.right is not None else "false"
        return f"({self.left} -> {right})"


@dataclass(frozen=True, slots=True)
class AlwaysResidual(Residual):
    """Open `always` obligation.

    Attributes:
        subformula: The invariant, re-checked at every state inside the window
        start: Time the `always` was first evaluated, not part of equality
        deadline_millis: End of the window, None when unbounded
        pending: Undecided instances of the subformula from earlier states
    """

    type: ClassVar[str] = "always"

    subformula: Formula
    start: Time = field(compare=False)
    deadline_millis: Optional[float] = None
    pending: Tuple[Residual, ...] = ()

    def accept(self, v: ResidualVisitor, time):
        return v.step_always(self, time)

    def remaining_millis(self, time: Time) -> Optional[float]:
        """Bound left at `time`, None when unbounded."""
        if self.deadline_millis is None:
            return None
        return self.deadline_millis - time.millis

    def __str__(self) -> str:
        return f"always({self.subformula})"


@dataclass(frozen=True, slots=True)
class EventuallyResidual(Residual):
    """Open `eventually` obligation.

    Attributes:
        subformula: The goal, looked for at every state before the deadline
        start: Time the `eventually` was first evaluated, not part of equality
        deadline_millis: Deadline, None when unbounded
        pending: Undecided instances of the subformula from earlier states
    """

    type: ClassVar[str] = "eventually"

    subformula: Formula
    start: Time = field(compare=False)
    deadline_millis: Optional[float] = None
    pending: Tuple[Residual, ...] = ()

    def accept(self, v: ResidualVisitor, time):
        return v.step_eventually(self, time)

    def remaining_millis(self, time: Time) -> Optional[float]:
        """Bound left at `time`, None when unbounded."""
        if self.deadline_millis is None:
            return None
        return self.deadline_millis - time.millis

    def __str__(self) -> str:
        return f"eventually({self.subformula})"
