# ltl/__init__.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Formula algebra and incremental evaluator public API

"""LTL formulas and their incremental three-valued evaluation.

Formulas are immutable trees built from predicates over extraction cells and
the combinators not/and/or/implies/next/always/eventually. The evaluator
consumes one registered state at a time and answers TRUE, FALSE with a
violation tree, or RESIDUAL with the obligation left for the next state.

Primary Components:
    Formula and its variants: Literal, Predicate, Not, And, Or, Implies,
        Next, Always, Eventually
    pure, now, not_, next_, always, eventually: construction functions
    evaluate, step, Evaluator: the incremental evaluator
    Verdict, VerdictKind: step results
    Residual and its variants: open obligations between steps
    Violation and its variants: explanations of FALSE verdicts
    stop_default: advisory end-of-trace reading of a residual
    render_violation: human-readable violation text

Example:
    >>> from runtime import Registry, extract
    >>> from ltl import always, evaluate
    >>> registry = Registry()
    >>> count = extract(registry, lambda state: state["count"])
    >>> prop = always(lambda: count.current <= 5, "count <= 5")
    >>> evaluate(prop, registry.register({"count": 1})).type
    'residual'
"""

from .evaluator import Evaluator, evaluate, step
from .exceptions import FormulaConstructionError
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
    TimeUnit,
    always,
    eventually,
    next_,
    not_,
    now,
    pure,
)
from .render import render_violation
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
from .stop import stop_default
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
    Violation,
)

__all__ = [
    "Always",
    "AlwaysResidual",
    "AlwaysViolation",
    "And",
    "AndResidual",
    "AndViolation",
    "DerivedResidual",
    "Evaluator",
    "Eventually",
    "EventuallyReason",
    "EventuallyResidual",
    "EventuallyViolation",
    "Formula",
    "FormulaConstructionError",
    "Implies",
    "ImpliesResidual",
    "ImpliesViolation",
    "Literal",
    "Next",
    "Not",
    "NotResidual",
    "NotViolation",
    "Or",
    "OrResidual",
    "OrViolation",
    "Predicate",
    "PureViolation",
    "Residual",
    "TimeUnit",
    "Verdict",
    "VerdictKind",
    "Violation",
    "always",
    "evaluate",
    "eventually",
    "next_",
    "not_",
    "now",
    "pure",
    "render_violation",
    "step",
    "stop_default",
]
