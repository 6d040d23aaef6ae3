"""Chat API routes."""

import json
import logging
from typing import Any, AsyncIterator, Dict

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse
from starlette.background import BackgroundTask

from docuchat.api.dependencies import History, Pipeline
from docuchat.core.errors import HistoryStoreError
from docuchat.core.orchestrator.pipeline import PipelineOutcome
from docuchat.models.schemas.chat import ChatHistoryResponse, ChatRequest

logger = logging.getLogger(__name__)

router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def sse_event(payload: Dict[str, Any]) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


async def event_generator(outcome: PipelineOutcome) -> AsyncIterator[str]:
    """Frame response chunks as server-sent events.

    A failure after streaming started cannot change the status code, so it
    is reported as an ``error`` event before the stream is closed normally.
    """
    message_id = outcome.message_id
    yield sse_event({"type": "start", "messageId": message_id})
    yield sse_event({"type": "text-start", "id": message_id})

    try:
        async for chunk in outcome.iter_text():
            yield sse_event({"type": "text-delta", "id": message_id, "delta": chunk})
    except Exception as e:
        logger.error(f"Stream for chat {outcome.chat_id} failed: {e}")
        yield sse_event({"type": "error", "errorText": str(e)})

    yield sse_event({"type": "text-end", "id": message_id})
    yield sse_event({"type": "finish"})
    yield "data: [DONE]\n\n"


@router.post("/chat")
async def chat(request: ChatRequest, pipeline: Pipeline):
    """Translate a document or answer a message, streamed as SSE.

    When the model refuses on every attempt the first refusal is returned
    as plain text instead of a stream.
    """
    try:
        outcome = await pipeline.run(request)
    except Exception as e:
        logger.exception(f"Chat {request.id} failed: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": str(e)},
        )

    # Persist after the body has been sent
    background = BackgroundTask(outcome.finalize)

    if not outcome.is_streaming:
        return PlainTextResponse(outcome.text, background=background)

    return StreamingResponse(
        event_generator(outcome),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
        background=background,
    )


@router.get("/chat/{chat_id}", response_model=ChatHistoryResponse)
async def get_chat(chat_id: str, store: History) -> ChatHistoryResponse:
    """Get the stored messages of a conversation."""
    try:
        messages = await store.load(chat_id)
    except HistoryStoreError as e:
        logger.error(f"Failed to load chat {chat_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to load chat")
    return ChatHistoryResponse(messages=messages)
