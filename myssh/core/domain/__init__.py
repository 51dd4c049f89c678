"""
Domain models for remote operation results.
"""

from .results import CommandResult

__all__ = [
    "CommandResult",
]
