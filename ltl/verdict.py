# ltl/verdict.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Three-valued step verdicts for incremental evaluation

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from .residual import Residual
from .violation import Violation


class VerdictKind(Enum):
    """Outcome of evaluating a formula at one time step.

    Values:
        TRUE: Formula is satisfied; no further input needed
        FALSE: Formula is violated; a violation tree explains why
        RESIDUAL: Undecided; the residual must be stepped with the next state
    """

    TRUE = auto()
    FALSE = auto()
    RESIDUAL = auto()

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Verdict:
    """Result of `evaluate` or `step`.

    Exactly one of `violation` (for FALSE) and `residual` (for RESIDUAL) is
    set; TRUE carries neither. Use the constructors rather than building
    instances directly.
    """

    kind: VerdictKind
    violation: Optional[Violation] = None
    residual: Optional[Residual] = None

    @staticmethod
    def true() -> Verdict:
        return _TRUE

    @staticmethod
    def false(violation: Violation) -> Verdict:
        return Verdict(VerdictKind.FALSE, violation=violation)

    @staticmethod
    def pending(residual: Residual) -> Verdict:
        return Verdict(VerdictKind.RESIDUAL, residual=residual)

    @property
    def type(self) -> str:
        return self.kind.name.lower()

    @property
    def is_true(self) -> bool:
        return self.kind is VerdictKind.TRUE

    @property
    def is_false(self) -> bool:
        return self.kind is VerdictKind.FALSE

    @property
    def is_residual(self) -> bool:
        return self.kind is VerdictKind.RESIDUAL

    def is_conclusive(self) -> bool:
        """True once the verdict needs no further states (TRUE or FALSE)."""
        return self.kind is not VerdictKind.RESIDUAL

    def __str__(self) -> str:
        if self.kind is VerdictKind.RESIDUAL:
            return f"RESIDUAL({self.residual.type})"
        return str(self.kind)


_TRUE = Verdict(VerdictKind.TRUE)
