# utils/violation_visualizer.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Graphviz rendering of violation trees

import os
from typing import TYPE_CHECKING, List, Optional, Tuple

from runtime.registry import format_millis
from utils.logger import get_logger

# Conditional import of graphviz
try:
    from graphviz import Digraph

    GRAPHVIZ_AVAILABLE = True
except ImportError:
    GRAPHVIZ_AVAILABLE = False

if TYPE_CHECKING:
    from ltl.violation import Violation

logger = get_logger(__name__)

VISUALIZATION_OUTPUT_FOLDER = "violation_visualizations"

_COLORS = {
    "pure": "lightcoral",
    "not": "lightcoral",
    "and": "lightgoldenrodyellow",
    "or": "lightgoldenrodyellow",
    "implies": "lightskyblue",
    "always": "lightpink",
    "eventually": "lightpink",
}


def _label(violation: 'Violation') -> str:
    """Node label: the violation type, the detail it carries and its time."""
    at = f"{format_millis(violation.time.millis)}ms"
    kind = violation.type

    if kind in ("pure", "not"):
        return f"{kind}\n{violation.description}\nat {at}"
    if kind == "and":
        return f"and ({violation.which} failed)\nat {at}"
    if kind == "implies":
        return f"implies\nsince {violation.antecedent}\nat {at}"
    if kind == "always":
        return f"always\n{violation.subformula}\nfrom {format_millis(violation.start.millis)}ms, failed at {at}"
    if kind == "eventually":
        return f"eventually\n{violation.subformula}\n{violation.reason.value} at {at}"
    return f"{kind}\nat {at}"


def _children(violation: 'Violation') -> List[Tuple[str, 'Violation']]:
    kind = violation.type
    if kind == "or":
        return [("left", violation.left), ("right", violation.right)]
    if kind in ("and", "implies", "always"):
        return [("", violation.violation)]
    return []


def build_violation_graph(violation: 'Violation', title: str = "violation", fmt: str = "png"):
    """Build a Digraph with one node per violation tree node.

    The path from the root to `violation.leaf()` is drawn in bold.

    Raises:
        RuntimeError: If the graphviz library is not installed
    """
    if not GRAPHVIZ_AVAILABLE:
        raise RuntimeError("Graphviz library not installed")

    dot = Digraph(comment=title, format=fmt)
    dot.attr(rankdir="TB", nodesep="0.5", ranksep="0.4")
    dot.attr(label=title, labelloc="t", fontsize="12")

    blamed = {id(violation)}
    node = violation
    while _children(node):
        node = _children(node)[0][1]
        blamed.add(id(node))

    counter = 0
    stack: List[Tuple[Optional[str], str, 'Violation']] = [(None, "", violation)]
    while stack:
        parent_id, edge_label, current = stack.pop()
        node_id = f"V{counter}"
        counter += 1

        on_path = id(current) in blamed
        dot.node(node_id, _label(current), shape="box", style="filled",
                 fillcolor=_COLORS.get(current.type, "white"),
                 penwidth="2" if on_path else "1")
        if parent_id is not None:
            dot.edge(parent_id, node_id, label=edge_label, style="bold" if on_path else "solid")

        for child_label, child in reversed(_children(current)):
            stack.append((node_id, child_label, child))

    return dot


def visualize_violation(violation: 'Violation', base_filename: str, fmt: str = "png",
                        output_folder: str = VISUALIZATION_OUTPUT_FOLDER) -> Optional[str]:
    """Render a violation tree to an image in `output_folder`.

    Args:
        violation: Root of the violation tree
        base_filename: File name without extension
        fmt: Output format understood by graphviz ("png", "svg", ...)
        output_folder: Directory to write into; created when missing

    Returns:
        Path of the rendered file, or None when rendering was skipped or failed
    """
    if not GRAPHVIZ_AVAILABLE:
        logger.warning("Graphviz library not installed. Skipping violation visualization. "
                       "To enable, install graphviz: pip install graphviz")
        return None

    try:
        os.makedirs(output_folder, exist_ok=True)
        output_path = os.path.join(output_folder, base_filename)
    except OSError as e:
        logger.error(f"Could not create directory {output_folder}: {e}. "
                     f"Saving to current directory instead.")
        output_path = base_filename

    dot = build_violation_graph(violation, title=base_filename, fmt=fmt)

    try:
        rendered = dot.render(output_path, view=False, cleanup=True)
    except Exception as e:
        logger.warning(f"Failed to render violation visualization to {output_path}.{fmt}: {e}. "
                       "Ensure Graphviz executables (dot) are in your system's PATH.")
        return None

    logger.info(f"Violation visualization saved to {rendered}")
    return rendered
