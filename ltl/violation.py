# ltl/violation.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Violation trees explaining a false verdict

"""Violation trees explaining why a formula was judged false.

A violation is a recursive record: leaves name the failing predicate and the
time it failed, combinator nodes name the connective or temporal operator and
hold the child violation(s) that caused it. Walking from the root down the
first decisive child (leaf()) always ends at the leaf to blame.

Types:
    PureViolation: A predicate or literal evaluated to false ("pure")
    NotViolation: The negated subformula held ("not")
    AndViolation: One conjunct failed ("and")
    OrViolation: Both disjuncts failed ("or")
    ImpliesViolation: Antecedent held, consequent failed ("implies")
    AlwaysViolation: An instance of the invariant failed ("always")
    EventuallyViolation: The deadline passed without the goal ("eventually")
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Optional

if TYPE_CHECKING:
    from runtime.registry import Time
    from .formula import Formula


@dataclass(frozen=True, slots=True)
class Violation:
    """Base class for violation tree nodes."""

    type: ClassVar[str] = "violation"

    @property
    def time(self) -> Time:
        raise NotImplementedError

    def leaf(self) -> Violation:
        """Follow the first decisive child down to the leaf to blame."""
        return self


@dataclass(frozen=True, slots=True)
class PureViolation(Violation):
    """A predicate or literal was false.

    Attributes:
        description: Description of the failing predicate
        at: Time the predicate was false
    """

    type: ClassVar[str] = "pure"

    description: str
    at: Time

    @property
    def time(self) -> Time:
        return self.at


@dataclass(frozen=True, slots=True)
class NotViolation(Violation):
    """A negated subformula held.

    Attributes:
        description: Description of the subformula that held
        at: Time it was found to hold
    """

    type: ClassVar[str] = "not"

    description: str
    at: Time

    @property
    def time(self) -> Time:
        return self.at


@dataclass(frozen=True, slots=True)
class AndViolation(Violation):
    """A conjunct failed; `which` is 'left' or 'right' (left wins ties)."""

    type: ClassVar[str] = "and"

    which: str
    violation: Violation

    @property
    def time(self) -> Time:
        return self.violation.time

    def leaf(self) -> Violation:
        return self.violation.leaf()


@dataclass(frozen=True, slots=True)
class OrViolation(Violation):
    """Both disjuncts failed."""

    type: ClassVar[str] = "or"

    left: Violation
    right: Violation

    @property
    def time(self) -> Time:
        return max(self.left.time, self.right.time)

    def leaf(self) -> Violation:
        return self.left.leaf()


@dataclass(frozen=True, slots=True)
class ImpliesViolation(Violation):
    """The antecedent held but the consequent failed.

    Attributes:
        antecedent: Description of the antecedent that held
        violation: Violation of the consequent
    """

    type: ClassVar[str] = "implies"

    antecedent: str
    violation: Violation

    @property
    def time(self) -> Time:
        return self.violation.time

    def leaf(self) -> Violation:
        return self.violation.leaf()


@dataclass(frozen=True, slots=True)
class AlwaysViolation(Violation):
    """An instance of an `always` subformula failed.

    Attributes:
        subformula: The invariant
        start: Time the `always` was first evaluated
        at: Time the failing instance was decided
        violation: Violation of the failing instance
    """

    type: ClassVar[str] = "always"

    subformula: Formula
    start: Time
    at: Time
    violation: Violation

    @property
    def time(self) -> Time:
        return self.at

    def leaf(self) -> Violation:
        return self.violation.leaf()


class EventuallyReason(Enum):
    TIMED_OUT = "timed_out"
    TEST_ENDED = "test_ended"


@dataclass(frozen=True, slots=True)
class EventuallyViolation(Violation):
    """An `eventually` subformula was never observed.

    Attributes:
        subformula: The goal that never held
        start: Time the `eventually` was first evaluated
        at: Time the deadline passed, or the last state when the trace ended
        reason: Deadline missed, or trace ended (only from stop defaults)
        deadline_millis: Absolute deadline, None when unbounded
    """

    type: ClassVar[str] = "eventually"

    subformula: Formula
    start: Time
    at: Time
    reason: EventuallyReason
    deadline_millis: Optional[float] = None

    @property
    def time(self) -> Time:
        return self.at
