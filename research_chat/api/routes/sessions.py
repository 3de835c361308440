from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from research_chat.api.deps import get_store, require_user
from research_chat.api.routes.chat import INTERNAL_ERROR_BODY
from research_chat.models.interfaces import Store
from research_chat.models.records import AuthenticatedUser
from research_chat.models.schemas import (
    ErrorResponse,
    QueryHistoryResponse,
    SessionHistoryResponse,
    SummaryAndLinkResponse,
)
from research_chat.services import logger as log_service

router = APIRouter(prefix="/api/sessions", tags=["sessions"])

NOT_FOUND_BODY = {"error": "Not Found"}


@router.get(
    "/{session_id}",
    response_model=SessionHistoryResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_session_history(
    session_id: str,
    user: AuthenticatedUser = Depends(require_user),
    store: Store = Depends(get_store),
):
    """Return a research session with every query, its result summaries and responses.

    Reads run under the caller's access token, so sessions hidden by row
    level security come back as not found.
    """
    try:
        session = await store.get_session(session_id)
        queries = await store.get_queries(session_id) if session is not None else []
    except Exception as e:
        log_service.logger.exception("Error in session history API")
        log_service.log_event(
            event_type="session_history_error",
            message="Session history request failed",
            error_type=type(e).__name__,
            error=str(e),
            session_id=session_id,
            user_id=user.id,
        )
        return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)

    if session is None:
        return JSONResponse(status_code=404, content=NOT_FOUND_BODY)

    return SessionHistoryResponse(
        session_id=session.session_id,
        session_name=session.session_name,
        queries=[
            QueryHistoryResponse(
                id=str(q.id),
                query=q.query,
                created_at=q.created_at,
                summaries_and_links=[
                    SummaryAndLinkResponse(summary=r.summary, link=r.link) for r in q.results
                ],
                responses=q.responses,
            )
            for q in queries
        ],
    )
