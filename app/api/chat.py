import logging

from fastapi import APIRouter, Depends, HTTPException

from app.api.schemas import ChatRequestSchema, ChatResponseSchema
from app.application.dto.dialogue_state import parse_dialogue_state, serialize_dialogue_state
from app.application.use_cases.handle_turn import HandleTurnUseCase
from app.core.config import settings
from app.wiring.dependencies import get_handle_turn_use_case, get_timezone

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/api/chat", response_model=ChatResponseSchema)
def chat(
    req: ChatRequestSchema,
    uc: HandleTurnUseCase = Depends(get_handle_turn_use_case),
):
    utterance = req.resolved_utterance()
    if not utterance:
        raise HTTPException(status_code=400, detail="utterance is required")

    prior_state = parse_dialogue_state(req.prior_state, max_party_size=settings.MAX_PARTY_SIZE)
    turn = uc.execute(utterance, prior_state, history=req.history())

    logger.info("Chat turn", extra={"intent": turn.intent.value, "action": turn.action})
    return ChatResponseSchema(
        reply=turn.reply,
        new_state=serialize_dialogue_state(turn.state, get_timezone()),
        intent=turn.intent.value,
    )
