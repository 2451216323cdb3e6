from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    RESTAURANT_NAME: str = "Ristorante Bella Vista"
    RESTAURANT_PHONE: str | None = None
    BUSINESS_TIMEZONE: str = "America/New_York"

    RESERVATION_DURATION_MINUTES: int = 120
    MAX_PARTY_SIZE: int = 8
    BOOKING_COMBINE_DATE_TIME: bool = False
    BOOKING_COLLECT_PHONE: bool = False
    BOOKING_STATE_TTL_MINUTES: int = 30

    OPENAI_API_KEY: str | None = None
    OPENAI_BASE_URL: str | None = None
    OPENAI_MODEL_REPLY: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE_REPLY: float = 0.2
    OPENAI_EMBEDDING_MODEL: str = "text-embedding-3-small"

    PINECONE_API_KEY: str | None = None
    PINECONE_INDEX_HOST: str | None = None
    RETRIEVAL_TOP_K: int = 3
    RETRIEVAL_SCORE_THRESHOLD: float = 0.3

    GOOGLE_ACCESS_TOKEN: str | None = None
    GOOGLE_CALENDAR_ID: str = "primary"
    GOOGLE_CALENDAR_BASE_URL: str = "https://www.googleapis.com/calendar/v3"
    GOOGLE_SHEETS_SPREADSHEET_ID: str | None = None
    GOOGLE_SHEETS_RANGE: str = "Reservations!A:J"
    GOOGLE_SHEETS_BASE_URL: str = "https://sheets.googleapis.com/v4"


settings = Settings()
