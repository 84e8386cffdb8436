# utils/__init__.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Utility module exports
#
# trace_reader and violation_visualizer import model and runtime; import them
# from their modules, not from this package.

from .logger import LogLevel, configure_logging, get_logger, set_log_level

__all__ = [
    "LogLevel",
    "configure_logging",
    "get_logger",
    "set_log_level",
]
