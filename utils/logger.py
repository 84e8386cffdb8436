# utils/logger.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Logging utility for LTL monitoring with configurable levels

import logging
import sys
from enum import Enum
from typing import Optional


class LogLevel(Enum):
    """Log levels for LTL monitoring."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


class VigilLogger:
    """Centralized logger for LTL monitoring with structured output."""

    def __init__(self, name: str = "vigil", level: LogLevel = LogLevel.INFO):
        """Initialize the monitoring logger.

        Args:
            name: Logger name (typically module name)
            level: Default logging level
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level.value)

        # Remove existing handlers to avoid duplicates
        self.logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level.value)
        console_handler.setFormatter(VigilFormatter())

        self.logger.addHandler(console_handler)

        # Prevent propagation to root logger
        self.logger.propagate = False

    def set_level(self, level: LogLevel):
        """Change the logging level."""
        self.logger.setLevel(level.value)
        for handler in self.logger.handlers:
            handler.setLevel(level.value)

    # Core logging methods
    def debug(self, message: str, **kwargs):
        """Log debug message (detailed internal state)."""
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs):
        """Log info message (general progress)."""
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message (unexpected but recoverable)."""
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs):
        """Log error message (serious problems)."""
        self.logger.error(message, **kwargs)

    # Specialized methods for LTL monitoring events
    def check_start(self, property_name: str, formula: str):
        """Log the start of a property check."""
        self.info("=== Starting Evaluation ===")
        self.info(f"Property {property_name}: {formula}")

    def state_registered(self, time: str, state: str):
        """Log a state registration."""
        self.debug(f"    📥 state registered at {time}: {state}")

    def node_decided(self, node: str, time: str, verdict: str):
        """Log the verdict of a single formula node."""
        self.debug(f"        {node} @ {time} → {verdict}")

    def verdict_changed(self, property_name: str, time: str, verdict: str):
        """Log a property leaving the undecided state."""
        self.debug(f"    🔔 {property_name} decided at {time}: {verdict}")

    def step_result(self, time: str, verdicts_str: str):
        """Log the per-state result of a verifier step."""
        self.info(f"{time} → {verdicts_str}")

    def violation_found(self, property_name: str, rendered: str):
        """Log a rendered violation."""
        self.info(f"💥 {property_name} violated:\n{rendered}")

    def final_verdict(self, property_name: str, verdict: str):
        """Log final monitoring verdict."""
        self.info(f">>> FINAL VERDICT {property_name}: {verdict} <<<")

    def validation_result(self, success: bool, message: str = ""):
        """Log validation results."""
        if success:
            self.debug(f"✅ {message}" if message else "✅ Validation successful")
        else:
            self.error(f"❌ {message}" if message else "❌ Validation failed")


class VigilFormatter(logging.Formatter):
    """Custom formatter for monitoring output."""

    def format(self, record):
        # For INFO level and above, show message only (clean output)
        if record.levelno >= logging.INFO:
            return record.getMessage()

        if record.levelno == logging.DEBUG:
            return f"[DEBUG] {record.getMessage()}"

        return f"[{record.levelname}] {record.getMessage()}"


# Global logger instance
_global_logger: Optional[VigilLogger] = None


def get_logger(name: str = "vigil") -> VigilLogger:
    """Get or create the global monitoring logger instance.

    Args:
        name: Logger name (default: "vigil")

    Returns:
        VigilLogger instance
    """
    global _global_logger
    if _global_logger is None:
        _global_logger = VigilLogger(name)
    return _global_logger


def set_log_level(level: LogLevel):
    """Set the global log level.

    Args:
        level: New log level
    """
    logger = get_logger()
    logger.set_level(level)


def configure_logging(verbose: bool = False, debug: bool = False):
    """Configure logging based on command line flags.

    Args:
        verbose: Enable verbose (INFO) output
        debug: Enable debug output (overrides verbose)
    """
    if debug:
        set_log_level(LogLevel.DEBUG)
    elif verbose:
        set_log_level(LogLevel.INFO)
    else:
        set_log_level(LogLevel.WARNING)
