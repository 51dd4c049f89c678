"""
Core interfaces defining contracts for client implementations.
"""

from .clients import ISSHClient, SessionState, ProgressCallback

__all__ = [
    "ISSHClient",
    "SessionState",
    "ProgressCallback",
]
