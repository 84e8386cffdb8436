# ltl/exceptions.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Construction errors for LTL formulas


class FormulaConstructionError(ValueError):
    """Raised when a formula is malformed at construction time.

    Covers a second `within` on the same temporal node, negative or non-numeric
    bounds, unknown time units, and values that cannot be lifted into a formula.
    Evaluation never raises this; it only happens while building formulas.
    """

    pass
