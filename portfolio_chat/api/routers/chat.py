"""Chat API endpoint.

Routes:
- POST /chat - Answer a visitor question, streamed with Server-Sent Events (SSE)

SSE Format:
    data: {"chunk": "..."}
    ...
    data: {"done": true}

Gated answers (no confident match) are returned as plain JSON:
    {"error": false, "message": "...", "confidence": 0.42}

Dependencies: portfolio_chat.application.chat_service
System role: Chat HTTP API with streaming support
"""

import json
import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse

from portfolio_chat.api.deps import get_app_context, get_client_id
from portfolio_chat.application.context import AppContext
from portfolio_chat.core.exceptions import InvalidInputError, RateLimitedError
from portfolio_chat.core.safety.messages import FallbackType, get_fallback_response
from portfolio_chat.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}


def _error(status_code: int, message: str, headers: dict[str, str] | None = None, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": True, "message": message, **extra},
        headers=headers,
    )


@router.post("/chat")
async def chat(
    request: Request,
    context: AppContext = Depends(get_app_context),
):
    """Answer a question about the portfolio.

    Args:
        request: Raw request; the body is JSON {message, history?}
        context: Injected application context

    Returns:
        StreamingResponse of answer chunks, or JSONResponse for gated
        answers and errors (400 invalid input, 429 rate limited, 500 failure)
    """
    client_id = get_client_id(request)
    logger.info(f"{__name__}:chat - START client={client_id}")

    try:
        payload = await request.json()
    except ValueError:
        return _error(400, get_fallback_response(FallbackType.INVALID_INPUT))

    try:
        outcome = await context.chat_service.handle(payload, client_id)
    except InvalidInputError as e:
        logger.info(f"{__name__}:chat - Invalid input: {e}")
        return _error(400, get_fallback_response(FallbackType.INVALID_INPUT))
    except RateLimitedError as e:
        return _error(429, e.message, headers=e.headers, retryAfter=e.retry_after)
    except Exception as e:
        log_exception_with_context(logger, f"{__name__}:chat - Request failed", e, client_id=client_id)
        return _error(500, get_fallback_response(FallbackType.ERROR))

    if not outcome.is_stream:
        return JSONResponse(
            content={"error": False, "message": outcome.message, "confidence": outcome.confidence},
            headers=outcome.headers,
        )

    stream = outcome.stream

    async def event_generator() -> AsyncGenerator[str, None]:
        """Generate SSE data lines from answer events."""
        try:
            async for event in stream:
                if await request.is_disconnected():
                    logger.info(f"{__name__}:chat - Client disconnected, stopping stream")
                    break
                yield f"data: {json.dumps(event.to_dict())}\n\n"
            else:
                logger.info(f"{__name__}:chat - Stream completed for client={client_id}")
        except Exception as e:
            logger.error(f"{__name__}:chat - Stream failed: {type(e).__name__}: {e}")
            yield f"data: {json.dumps({'error': True, 'message': get_fallback_response(FallbackType.ERROR)})}\n\n"
        finally:
            await stream.aclose()

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={**SSE_HEADERS, **outcome.headers},
    )
