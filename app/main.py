import logging

from fastapi import FastAPI

from app.api.chat import router as chat_router
from app.api.vapi_webhook import router as vapi_router
from app.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("intent", "step", "action", "reservation_id", "namespace", "reason", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title=f"{settings.RESTAURANT_NAME} Assistant", version="1.0.0")

app.include_router(chat_router, tags=["chat"])
app.include_router(vapi_router, tags=["voice"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
