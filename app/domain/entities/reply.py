from dataclasses import dataclass

from app.domain.entities.booking_state import DialogueState
from app.domain.entities.intent import Intent


@dataclass(frozen=True)
class TurnReply:
    reply: str
    state: DialogueState | None
    intent: Intent
    action: str
