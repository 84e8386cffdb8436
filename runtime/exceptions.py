# runtime/exceptions.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Usage errors raised by the state registry and extraction cells

"""Exceptions for state registration and extraction.

Reading the current state is only meaningful between a registration and the
next reset. Any attempt to observe the world outside that window is a usage
error and fails immediately at the call site.
"""


class NoCurrentStateError(RuntimeError):
    """Raised when the current state or time is read before any registration.

    Raised by Registry.current(), Registry.state, Registry.time and by every
    Cell.current read while the owning registry is empty.
    """

    pass
