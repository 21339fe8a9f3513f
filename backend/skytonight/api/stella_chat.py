"""Stella chat endpoint: grounded conversation about tonight's sky."""

import json
import logging

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from skytonight.api.deps import get_stella_service
from skytonight.core.errors import StellaChatError
from skytonight.models import ErrorResponse, StellaChatSuccess
from skytonight.services.stella_service import StellaChatService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["stella"])


@router.post(
    "/stella-chat",
    response_model=StellaChatSuccess,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def stella_chat(request: Request, service: StellaChatService = Depends(get_stella_service)):
    """
    Reply to the user as Stella, grounded in the supplied sky objects.

    The body is read as raw JSON and validated field by field so that
    malformed input is reported as BAD_REQUEST rather than a framework error.

    Errors:
        400 BAD_REQUEST, 502 MODEL_ERROR, 500 INTERNAL_ERROR
    """
    try:
        try:
            body = json.loads(await request.body())
        except (ValueError, UnicodeDecodeError):
            raise StellaChatError(StellaChatError.BAD_REQUEST, "Invalid JSON in request body")

        chat_request = service.parse_request(body)
        return await run_in_threadpool(service.reply, chat_request)
    except StellaChatError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in Stella chat: {e}", exc_info=True)
        raise StellaChatError(StellaChatError.INTERNAL_ERROR, str(e) or "An unexpected error occurred") from e
