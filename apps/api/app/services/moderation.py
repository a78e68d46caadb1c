from __future__ import annotations

from app.core.errors import StateError
from app.models.entities import ModerationStatusEnum

_ALLOWED = {
    ModerationStatusEnum.pending: {ModerationStatusEnum.approved, ModerationStatusEnum.rejected},
    ModerationStatusEnum.approved: set(),
    ModerationStatusEnum.rejected: set(),
}


def transition(current: ModerationStatusEnum, target: ModerationStatusEnum, *, subject: str) -> bool:
    """
    Validate a moderation move. Returns False when ``target`` equals the
    current state (no-op), True when the caller should apply it.
    """
    if current == target:
        return False
    if target not in _ALLOWED[current]:
        raise StateError(f"{subject} is {current.value}; cannot move to {target.value}")
    return True
