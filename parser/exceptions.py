# parser/exceptions.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Exceptions for formula and property-file parsing


class ParseError(RuntimeError):
    """Raised when a formula or a property file cannot be parsed.

    Covers lexical and syntax errors, invalid `within` bounds, and malformed
    or duplicate entries in a property file.
    """

    pass
