from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from research_chat.agents.orchestrator import ResearchOrchestrator
from research_chat.api.deps import get_orchestrator, require_user
from research_chat.models.records import AuthenticatedUser
from research_chat.models.schemas import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    SummaryAndLinkResponse,
)
from research_chat.services import logger as log_service

router = APIRouter(prefix="/api/chat", tags=["chat"])

INTERNAL_ERROR_BODY = {"error": "Internal Server Error"}


@router.post(
    "",
    response_model=ChatResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat(
    request: ChatRequest,
    user: AuthenticatedUser = Depends(require_user),
    orchestrator: ResearchOrchestrator = Depends(get_orchestrator),
):
    """Research a message, persist it under the session and return the summaries."""
    try:
        outcome = await orchestrator.run(request.message, request.session_id)
    except Exception as e:
        log_service.logger.exception("Error in research chat API")
        log_service.log_event(
            event_type="chat_error",
            message="Research request failed",
            error_type=type(e).__name__,
            error=str(e),
            session_id=request.session_id,
            user_id=user.id,
        )
        return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)

    return ChatResponse(
        message=outcome.message,
        summaries_and_links=[
            SummaryAndLinkResponse(summary=item.summary, link=item.link)
            for item in outcome.summaries_and_links
        ],
    )
