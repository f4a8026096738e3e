"""
Logging configuration and utilities for the date range marking layer.
"""
from .config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
