"""Utility modules for structured logging and lenient value coercion."""

from bizpulse.utils.logging import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
