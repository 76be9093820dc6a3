"""MTG Battle - Action Results

Every call on the action API answers with an ActionResult instead of
raising. A failed result always means nothing in the game state changed.
"""
from dataclasses import dataclass
from typing import Optional

ILLEGAL_ACTION = "IllegalAction"
TERMINAL_STATE = "TerminalState"


@dataclass(frozen=True)
class ActionResult:
    """
    Outcome of one action.

    Attributes:
        success: Whether the action happened
        reason: Why it was rejected (empty on success)
        message: Human-readable description of what happened
        error: Error category ("IllegalAction") on rejection
    """
    success: bool
    reason: str = ""
    message: str = ""
    error: Optional[str] = None

    @classmethod
    def ok(cls, message: str = "") -> "ActionResult":
        return cls(success=True, message=message)

    @classmethod
    def illegal(cls, reason: str) -> "ActionResult":
        return cls(success=False, reason=reason, message=reason, error=ILLEGAL_ACTION)

    @property
    def is_terminal(self) -> bool:
        return self.reason == TERMINAL_STATE

    def __bool__(self) -> bool:
        return self.success
