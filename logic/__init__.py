# logic/__init__.py

"""Trace-level checking on top of the incremental evaluator.

This package provides:
  • run_check: check one formula against a complete trace
  • CheckResult / CheckOutcome: PASSED, FAILED or INCONCLUSIVE outcomes
  • Verifier: several named properties checked together, state by state
  • PropertyAndTraceVerifier: CLI-style runner for a property file + CSV trace
"""

from .check import CheckOutcome, CheckResult, EmptyTraceError, run_check
from .runner import PropertyAndTraceVerifier
from .verifier import PropertyState, Verifier

__all__ = [
    "CheckOutcome",
    "CheckResult",
    "EmptyTraceError",
    "PropertyAndTraceVerifier",
    "PropertyState",
    "Verifier",
    "run_check",
]
