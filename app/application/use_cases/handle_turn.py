from __future__ import annotations

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from app.application.use_cases.answer_question import AnswerQuestionUseCase
from app.application.use_cases.booking import BookingResult, BookingUseCase
from app.application.use_cases.classify_intent import ClassifyIntentUseCase
from app.application.use_cases.reply_composer import ReplyComposer
from app.application.utils.state_helpers import is_expired
from app.domain.entities.booking_state import DialogueState
from app.domain.entities.intent import Intent
from app.domain.entities.reply import TurnReply


class HandleTurnUseCase:
    """Single entry point for one chat or voice turn; always returns a TurnReply."""

    def __init__(
        self,
        classify_intent: ClassifyIntentUseCase,
        booking_use_case: BookingUseCase,
        answer_question: AnswerQuestionUseCase,
        composer: ReplyComposer,
        timezone: ZoneInfo,
        state_ttl_minutes: int = 30,
    ) -> None:
        self._classify_intent = classify_intent
        self._booking_use_case = booking_use_case
        self._answer_question = answer_question
        self._composer = composer
        self._timezone = timezone
        self._state_ttl_seconds = state_ttl_minutes * 60
        self._logger = logging.getLogger(__name__)

    def execute(
        self,
        utterance: str,
        prior_state: DialogueState | None,
        history: list[dict[str, str]] | None = None,
        now: datetime | None = None,
    ) -> TurnReply:
        now = now or datetime.now(self._timezone)
        intent = Intent.INFORMATION
        try:
            if prior_state is not None and is_expired(prior_state, self._state_ttl_seconds, now.timestamp()):
                self._logger.info("Discarding stale booking state", extra={"step": prior_state.step.value, "reason": "expired"})
                prior_state = None

            intent = self._classify_intent.execute(utterance)

            if intent == Intent.CANCEL:
                self._logger.info("Booking cancelled", extra={"intent": intent.value, "in_progress": prior_state is not None})
                return TurnReply(
                    reply=self._composer.cancelled(in_progress=prior_state is not None),
                    state=None,
                    intent=intent,
                    action="cancelled",
                )

            if prior_state is not None:
                result = self._booking_use_case.process_booking_intent(utterance, prior_state, now)
                return self._from_booking(result, intent)

            if intent == Intent.BOOKING:
                return self._from_booking(self._booking_use_case.start(now), intent)

            answer = self._answer_question.execute(utterance, history)
            return TurnReply(
                reply=answer.text,
                state=None,
                intent=intent,
                action="answered" if answer.answered else "no_answer",
            )
        except Exception as e:
            self._logger.exception("Turn handling failed", extra={"intent": intent.value, "error": str(e)})
            return TurnReply(reply=self._composer.apology(), state=prior_state, intent=intent, action="error")

    def _from_booking(self, result: BookingResult, intent: Intent) -> TurnReply:
        state = result.updated_state
        self._logger.info(
            "Booking turn processed",
            extra={
                "intent": intent.value,
                "action": result.action,
                "step": state.step.value if state else None,
            },
        )
        return TurnReply(reply=result.message, state=state, intent=intent, action=result.action)
