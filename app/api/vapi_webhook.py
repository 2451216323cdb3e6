from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.application.dto.vapi_event import VapiEventDTO
from app.wiring.dependencies import get_handle_voice_event_use_case


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/api/vapi/webhook")
async def vapi_webhook(request: Request) -> JSONResponse:
    try:
        try:
            use_case = get_handle_voice_event_use_case()
        except Exception as e:
            logger.exception("Failed to initialize use case", extra={"error": str(e)})
            return JSONResponse({"error": "Webhook processing failed"}, status_code=500)

        body = await request.body()
        try:
            payload = json.loads(body.decode("utf-8")) if body else {}
            event = VapiEventDTO.model_validate(payload)
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Failed to parse webhook body", extra={"error": str(e)})
            return JSONResponse({"error": "Invalid webhook body"}, status_code=400)

        if event.message is None:
            logger.info("Webhook without message", extra={"reason": "missing_message"})
            return JSONResponse({"error": "No message in webhook"}, status_code=400)

        return JSONResponse(use_case.execute(event.message))
    except Exception as e:
        logger.exception("Fatal error in webhook handler", extra={"error": str(e)})
        return JSONResponse({"error": "Webhook processing failed"}, status_code=500)
