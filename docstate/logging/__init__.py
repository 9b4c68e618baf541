"""
Logging configuration and utilities for docstate.
"""
from .config import configure_logging, configure_logging_from, get_logger

__all__ = ["configure_logging", "configure_logging_from", "get_logger"]
