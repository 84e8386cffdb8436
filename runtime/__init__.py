# runtime/__init__.py
# This file is part of Vigil - An LTL Runtime Verification
#
# State registration and extraction for incremental LTL evaluation

"""State registration and extraction for incremental LTL evaluation.

This package is the only channel through which formulas observe the outside
world. A Registry holds the current state of one trace and stamps each
registration with a logical Time; Cells are pure queries over that current
state, read from inside predicate thunks.

Primary Components:
    Time: Logical tick plus millisecond timestamp of a registration
    Registry: Clock and current-state holder for one trace
    Cell: Lazy query over the registry's current state
    extract: Construct a Cell bound to a registry
    NoCurrentStateError: Raised when state is read before registration

Example:
    >>> from runtime import Registry, extract
    >>> registry = Registry()
    >>> count = extract(registry, lambda state: len(state["items"]))
    >>> _ = registry.register({"items": [1, 2]})
    >>> count.current
    2
"""

from .cell import Cell, extract
from .exceptions import NoCurrentStateError
from .registry import Registry, Time

__all__ = ["Cell", "extract", "NoCurrentStateError", "Registry", "Time"]
