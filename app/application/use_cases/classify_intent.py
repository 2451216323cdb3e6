from __future__ import annotations

import logging

from app.application.utils.message_rules import BOOKING_KEYWORDS, CANCEL_KEYWORDS, contains_keyword
from app.domain.entities.intent import Intent

# Evaluated top to bottom; cancel outranks booking ("cancel my booking" is a cancel)
INTENT_RULES: tuple[tuple[Intent, tuple[str, ...]], ...] = (
    (Intent.CANCEL, CANCEL_KEYWORDS),
    (Intent.BOOKING, BOOKING_KEYWORDS),
)


class ClassifyIntentUseCase:
    def __init__(self, rules: tuple[tuple[Intent, tuple[str, ...]], ...] = INTENT_RULES) -> None:
        self._rules = rules
        self._logger = logging.getLogger(__name__)

    def execute(self, text: str) -> Intent:
        for intent, keywords in self._rules:
            if contains_keyword(text, keywords):
                self._logger.debug("Intent matched", extra={"intent": intent.value})
                return intent
        return Intent.INFORMATION
