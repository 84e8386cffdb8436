# utils/trace_reader.py
# This file is part of Vigil - An LTL Runtime Verification
#
# CSV trace file reader for proposition snapshot sequences

import csv
from pathlib import Path
from typing import FrozenSet, Iterator, Optional

from model.snapshot import Snapshot
from utils.logger import get_logger


class TraceFormatError(Exception):
    """Exception raised when trace files contain invalid format or data."""

    pass


def read_trace(filepath: str) -> Iterator[Snapshot]:
    """Read snapshots from a CSV trace file.

    Each row describes one observed state: an identifier, an optional
    timestamp in milliseconds and the propositions holding in that state.
    Lines starting with '#' are skipped wherever they appear; row numbers
    in error messages are line numbers in the file.

    Expected CSV format:
        sid,time,props
        s1,0,req
        s2,250,req|ack

    The identifier column may also be called `id`; the `time` column may be
    omitted, in which case the registry's tick interval applies.

    Args:
        filepath: Path to the CSV trace file

    Yields:
        Snapshot: Parsed snapshots in file order

    Raises:
        TraceFormatError: If file format is invalid or rows cannot be parsed
    """
    logger = get_logger()
    path = Path(filepath)

    if not path.exists():
        raise TraceFormatError(f"Trace file not found: {filepath}")

    logger.debug(f"Reading trace file: {filepath}")

    try:
        with open(path, "r", newline="", encoding="utf-8") as file:
            lines = [(n, line) for n, line in enumerate(file, start=1)
                     if not line.lstrip().startswith("#")]
    except OSError as e:
        raise TraceFormatError(f"Cannot open trace file: {filepath}: {e}")

    reader = csv.DictReader(line for _, line in lines)
    fields = set(reader.fieldnames or [])

    if "sid" in fields:
        id_field = "sid"
    elif "id" in fields:
        id_field = "id"
    else:
        raise TraceFormatError("Trace header must contain 'sid' or 'id'")

    if "props" not in fields:
        raise TraceFormatError("Missing required headers: {'props'}")

    has_time = "time" in fields
    previous: Optional[float] = None

    for row in reader:
        row_num = lines[reader.line_num - 1][0]
        try:
            snapshot = _parse_snapshot_row(row, id_field, has_time)
        except (TypeError, ValueError, AttributeError) as e:
            raise TraceFormatError(f"Error parsing row {row_num}: {e}") from e

        if snapshot.millis is not None:
            if previous is not None and snapshot.millis < previous:
                raise TraceFormatError(
                    f"Row {row_num}: time {snapshot.millis} is earlier than {previous}"
                )
            previous = snapshot.millis

        logger.debug(f"Parsed snapshot {snapshot} from row {row_num}")
        yield snapshot


def validate_trace_file(filepath: str) -> int:
    """Validate trace file format by parsing every row.

    Args:
        filepath: Path to the trace file to validate

    Returns:
        Number of snapshots in the file

    Raises:
        TraceFormatError: If validation fails
    """
    logger = get_logger()
    logger.debug(f"Validating trace file: {filepath}")

    try:
        count = sum(1 for _ in read_trace(filepath))
    except TraceFormatError as e:
        logger.validation_result(False, f"Trace validation failed: {e}")
        raise

    logger.validation_result(True, f"Trace validation successful: {count} snapshots")
    return count


def _parse_snapshot_row(row: dict, id_field: str, has_time: bool) -> Snapshot:
    sid = (row.get(id_field) or "").strip()
    if not sid:
        raise ValueError(f"Empty {id_field} field")

    millis = _parse_time(row.get("time") or "") if has_time else None
    return Snapshot(sid=sid, props=_parse_props(row.get("props") or ""), millis=millis)


def _parse_time(time_str: str) -> Optional[float]:
    """Parse a millisecond timestamp; an empty cell means no timestamp."""
    time_str = time_str.strip()
    if not time_str:
        return None

    millis = float(time_str)
    if millis < 0:
        raise ValueError(f"Negative time: {time_str}")
    return millis


def _parse_props(props_str: str) -> FrozenSet[str]:
    """Parse pipe-separated proposition list.

    Args:
        props_str: String like 'p|q|r'

    Returns:
        FrozenSet of proposition names
    """
    if not props_str.strip():
        return frozenset()

    return frozenset(p.strip() for p in props_str.split("|") if p.strip())
