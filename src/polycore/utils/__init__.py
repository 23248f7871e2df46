"""Utility functions for polycore.

This module provides utility functions including:

- Logging setup and configuration
"""

from polycore.utils.logging import configure_logging

__all__ = [
    "configure_logging",
]
