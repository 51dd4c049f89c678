"""
Result models returned by remote operations.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a remote command: exit code plus captured output."""
    code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """True when the command exited with status 0."""
        return self.code == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "stdout": self.stdout,
            "stderr": self.stderr,
        }
