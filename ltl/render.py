# ltl/render.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Human-readable rendering of violation trees

from __future__ import annotations

from runtime.registry import format_millis
from .violation import (
    AlwaysViolation,
    AndViolation,
    EventuallyReason,
    EventuallyViolation,
    ImpliesViolation,
    NotViolation,
    OrViolation,
    PureViolation,
    Violation,
)


def render_violation(violation: Violation) -> str:
    """Render a violation tree as an explanation for humans.

    Example:
        >>> print(render_violation(v))  # doctest: +SKIP
        as of 0ms, it should always be the case that

        count <= 5

        but at 2ms

        !(count <= 5)
    """
    if isinstance(violation, PureViolation):
        return f"!({violation.description})"

    if isinstance(violation, NotViolation):
        return f"!(!({violation.description}))"

    if isinstance(violation, AndViolation):
        return render_violation(violation.violation)

    if isinstance(violation, OrViolation):
        return f"{render_violation(violation.left)} or {render_violation(violation.right)}"

    if isinstance(violation, ImpliesViolation):
        return f"{render_violation(violation.violation)} since {violation.antecedent}"

    if isinstance(violation, AlwaysViolation):
        return (
            f"as of {_ms(violation.start.millis)}, it should always be the case that\n\n"
            f"{violation.subformula}\n\n"
            f"but at {_ms(violation.at.millis)}\n\n"
            f"{render_violation(violation.violation)}"
        )

    if isinstance(violation, EventuallyViolation):
        if violation.reason is EventuallyReason.TIMED_OUT:
            prefix = f"timed out at {_ms(violation.at.millis)}: "
        else:
            prefix = "failed at test end: "
        return f"{prefix}{violation.subformula}"

    raise TypeError(f"Unknown violation type: {type(violation).__name__}")


def _ms(millis: float) -> str:
    return f"{format_millis(millis)}ms"
