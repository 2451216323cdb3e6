from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from app.application.use_cases.answer_question import AnswerQuestionUseCase
from app.application.use_cases.booking import BookingUseCase
from app.application.use_cases.classify_intent import ClassifyIntentUseCase
from app.application.use_cases.handle_turn import HandleTurnUseCase
from app.application.use_cases.reply_composer import ReplyComposer
from app.infrastructure.calendar.mock_calendar import MockCalendar
from app.infrastructure.knowledge.static_kb import StaticKnowledgeBase
from app.infrastructure.llm.mock_llm import MockLLM
from app.infrastructure.sheets.mock_sheets import MockSheets
from tests.support import NOW, TZ, build_booking


@pytest.fixture
def tz() -> ZoneInfo:
    return TZ


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def calendar() -> MockCalendar:
    return MockCalendar()


@pytest.fixture
def sheets() -> MockSheets:
    return MockSheets()


@pytest.fixture
def composer() -> ReplyComposer:
    return ReplyComposer(restaurant_name="Ristorante Bella Vista", max_party_size=8)


@pytest.fixture
def booking(calendar: MockCalendar, sheets: MockSheets) -> BookingUseCase:
    return build_booking(calendar, sheets)


@pytest.fixture
def llm() -> MockLLM:
    return MockLLM()


@pytest.fixture
def answer_question(llm: MockLLM) -> AnswerQuestionUseCase:
    return AnswerQuestionUseCase(retriever=StaticKnowledgeBase(), llm=llm)


@pytest.fixture
def handle_turn(booking: BookingUseCase, answer_question: AnswerQuestionUseCase, composer: ReplyComposer) -> HandleTurnUseCase:
    return HandleTurnUseCase(
        classify_intent=ClassifyIntentUseCase(),
        booking_use_case=booking,
        answer_question=answer_question,
        composer=composer,
        timezone=TZ,
    )


@pytest.fixture
def booking_factory(calendar: MockCalendar, sheets: MockSheets):
    def factory(**options) -> BookingUseCase:
        return build_booking(calendar, sheets, **options)

    return factory
