# brain_service/session_context.py
"""
Conversation records kept per session.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal

Role = Literal["user", "assistant"]

ANONYMOUS_SESSION = "anonymous"


@dataclass(frozen=True)
class Exchange:
    """
    One entry in a session's history: who said what.
    """
    role: Role
    text: str

    @classmethod
    def user(cls, text: str) -> "Exchange":
        return cls(role="user", text=text)

    @classmethod
    def assistant(cls, text: str) -> "Exchange":
        return cls(role="assistant", text=text)

    def to_message(self) -> Dict[str, str]:
        """Shape used by the Messages API."""
        return {"role": self.role, "content": self.text}
