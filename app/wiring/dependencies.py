from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.application.ports.calendar import CalendarPort
from app.application.ports.knowledge_base import RetrievalPort
from app.application.ports.llm import LLMPort
from app.application.ports.spreadsheet import SpreadsheetPort
from app.application.use_cases.answer_question import AnswerQuestionUseCase
from app.application.use_cases.booking import BookingUseCase
from app.application.use_cases.classify_intent import ClassifyIntentUseCase
from app.application.use_cases.finalize_booking import FinalizeBookingUseCase
from app.application.use_cases.handle_turn import HandleTurnUseCase
from app.application.use_cases.handle_voice_event import HandleVoiceEventUseCase
from app.application.use_cases.reply_composer import ReplyComposer
from app.infrastructure.calendar.google_calendar_client import GoogleCalendar
from app.infrastructure.calendar.mock_calendar import MockCalendar
from app.infrastructure.knowledge.pinecone_retriever import PineconeRetriever
from app.infrastructure.knowledge.static_kb import StaticKnowledgeBase
from app.infrastructure.llm.mock_llm import MockLLM
from app.infrastructure.llm.openai_llm import OpenAILLM
from app.infrastructure.sheets.google_sheets_client import GoogleSheets
from app.infrastructure.sheets.mock_sheets import MockSheets

logger = logging.getLogger(__name__)


def _is_local() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


@lru_cache
def get_llm() -> LLMPort:
    if settings.OPENAI_API_KEY and settings.OPENAI_API_KEY.strip():
        return OpenAILLM()
    logger.info("Using MockLLM (OPENAI_API_KEY missing)")
    return MockLLM()


@lru_cache
def get_retriever() -> RetrievalPort:
    if settings.PINECONE_API_KEY and settings.PINECONE_INDEX_HOST and settings.OPENAI_API_KEY:
        return PineconeRetriever()
    logger.info("Using StaticKnowledgeBase (Pinecone or embedding credentials missing)")
    return StaticKnowledgeBase()


@lru_cache
def get_calendar() -> CalendarPort:
    if not settings.GOOGLE_ACCESS_TOKEN or _is_local():
        logger.info("Using MockCalendar", extra={"reason": "dev_or_missing_token"})
        return MockCalendar()
    return GoogleCalendar()


@lru_cache
def get_spreadsheet() -> SpreadsheetPort:
    if not (settings.GOOGLE_ACCESS_TOKEN and settings.GOOGLE_SHEETS_SPREADSHEET_ID) or _is_local():
        logger.info("Using MockSheets", extra={"reason": "dev_or_missing_spreadsheet"})
        return MockSheets()
    return GoogleSheets()


def get_reply_composer() -> ReplyComposer:
    return ReplyComposer(
        restaurant_name=settings.RESTAURANT_NAME,
        max_party_size=settings.MAX_PARTY_SIZE,
        restaurant_phone=settings.RESTAURANT_PHONE,
    )


def get_booking_use_case() -> BookingUseCase:
    tz = get_timezone()
    finalizer = FinalizeBookingUseCase(
        calendar=get_calendar(),
        spreadsheet=get_spreadsheet(),
        timezone=tz,
        duration_minutes=settings.RESERVATION_DURATION_MINUTES,
    )
    return BookingUseCase(
        finalizer=finalizer,
        composer=get_reply_composer(),
        timezone=tz,
        max_party_size=settings.MAX_PARTY_SIZE,
        combine_date_time=settings.BOOKING_COMBINE_DATE_TIME,
        collect_phone=settings.BOOKING_COLLECT_PHONE,
    )


def get_answer_question_use_case() -> AnswerQuestionUseCase:
    return AnswerQuestionUseCase(
        retriever=get_retriever(),
        llm=get_llm(),
        top_k=settings.RETRIEVAL_TOP_K,
        score_threshold=settings.RETRIEVAL_SCORE_THRESHOLD,
    )


def get_handle_turn_use_case() -> HandleTurnUseCase:
    return HandleTurnUseCase(
        classify_intent=ClassifyIntentUseCase(),
        booking_use_case=get_booking_use_case(),
        answer_question=get_answer_question_use_case(),
        composer=get_reply_composer(),
        timezone=get_timezone(),
        state_ttl_minutes=settings.BOOKING_STATE_TTL_MINUTES,
    )


def get_handle_voice_event_use_case() -> HandleVoiceEventUseCase:
    return HandleVoiceEventUseCase(
        handle_turn=get_handle_turn_use_case(),
        answer_question=get_answer_question_use_case(),
        composer=get_reply_composer(),
        timezone=get_timezone(),
        max_party_size=settings.MAX_PARTY_SIZE,
    )
