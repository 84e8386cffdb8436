# logic/runner.py

"""
PropertyAndTraceVerifier: glue code that ties together a property file and
a CSV-formatted trace, driving a Verifier over each snapshot and producing
a final CheckResult per property.
"""

from pathlib import Path
from typing import Dict

from ltl.render import render_violation
from model.snapshot import proposition_resolver
from parser import parse_specification
from runtime.registry import Registry
from utils.logger import get_logger
from utils.trace_reader import TraceFormatError, read_trace
from utils.violation_visualizer import visualize_violation

from .check import CheckOutcome, CheckResult
from .verifier import Verifier

logger = get_logger(__name__)


def read_property_file(path: Path) -> str:
    """
    Read a property file into a string.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is empty or cannot be read.
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        raise FileNotFoundError(f"Property file not found: {path}")
    except OSError as e:
        raise ValueError(f"Error reading property file: {e}")

    if not content.strip():
        raise ValueError("Property file is empty")
    return content


def format_result(result: CheckResult) -> str:
    """One-line summary of a CheckResult for reports."""
    if result.outcome is not CheckOutcome.INCONCLUSIVE:
        return result.outcome.name

    lean = "undecidable" if result.stop_default is None else result.stop_default.type
    return f"{result.outcome.name} (pending {result.pending_kind}, would end {lean})"


class PropertyAndTraceVerifier:
    """
    Given a property file and a CSV trace, runs a Verifier over every
    snapshot to produce one CheckResult per property. Supports per-snapshot
    verbose logging, optional early stopping and violation visualisation.
    """

    def __init__(self, property_path_str: str, trace_path_str: str, tick_millis: float = 1.0):
        self.property_path = Path(property_path_str)
        self.trace_path = Path(trace_path_str)

        self.registry = Registry(tick_millis)
        text = read_property_file(self.property_path)
        self.properties = parse_specification(text, proposition_resolver(self.registry))
        self._verifier = Verifier(self.properties, self.registry)

    def run(self, *, stop_on_verdict: bool = False, verbose: bool = False,
            visualize: bool = False) -> Dict[str, CheckResult]:
        """
        Process each snapshot of the trace. If verbose, log per-snapshot
        verdicts. If stop_on_verdict is True, halt once every property is
        decided. Returns the final result of every property.

        Raises:
            TraceFormatError: If the trace is malformed, empty or goes back in time.
        """
        self._verifier.reset()
        for name, formula in self.properties.items():
            logger.check_start(name, str(formula))

        count = 0
        for snapshot in read_trace(str(self.trace_path)):
            try:
                verdicts = self._verifier.process(snapshot, snapshot.millis)
            except ValueError as e:
                raise TraceFormatError(f"Snapshot {snapshot.sid}: {e}") from e
            count += 1

            if verbose:
                summary = ", ".join(f"{n}={v.type}" for n, v in verdicts.items())
                logger.step_result(f"{snapshot.sid}@{self.registry.time}", summary)

            if stop_on_verdict and self._verifier.all_decided:
                logger.debug(f"All properties decided after {count} snapshot(s)")
                break

        if count == 0:
            raise TraceFormatError(f"Trace contains no snapshots: {self.trace_path}")

        results = self._verifier.finish()
        for name, result in results.items():
            if result.violation is not None:
                logger.violation_found(name, render_violation(result.violation))
                if visualize:
                    visualize_violation(result.violation, f"{name}_violation")
            logger.final_verdict(name, format_result(result))

        logger.info("=== Evaluation Complete ===")
        return results
