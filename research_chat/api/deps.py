from __future__ import annotations

from functools import lru_cache, partial

from fastapi import Depends, Request

from research_chat.agents.orchestrator import ResearchOrchestrator
from research_chat.config import settings
from research_chat.errors import AuthServiceError, UnauthorizedError
from research_chat.llm_client import LLMSummarizer
from research_chat.models.interfaces import Authenticator, SearchProvider, Store, Summarizer
from research_chat.models.records import AuthenticatedUser
from research_chat.services import logger as log_service
from research_chat.services.auth import SupabaseAuthenticator
from research_chat.services.supabase import SupabaseStore, user_client
from research_chat.tools.exa_search import ExaSearchClient


@lru_cache(maxsize=1)
def get_authenticator() -> Authenticator:
    """Provide a singleton Supabase authenticator for request handlers."""
    return SupabaseAuthenticator()


@lru_cache(maxsize=1)
def get_search_client() -> SearchProvider:
    return ExaSearchClient(
        settings.exa_api_key,
        base_url=settings.exa_base_url,
        timeout=settings.exa_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_summarizer() -> Summarizer:
    return LLMSummarizer(model=settings.summary_model)


async def require_user(
    request: Request,
    authenticator: Authenticator = Depends(get_authenticator),
) -> AuthenticatedUser:
    try:
        user = await authenticator.get_current_user(request)
    except Exception as e:
        log_service.logger.exception("Session verification failed")
        raise AuthServiceError(str(e)) from e
    if user is None:
        raise UnauthorizedError()
    return user


def get_store(user: AuthenticatedUser = Depends(require_user)) -> Store:
    """Per-request store whose queries run under the caller's access token."""
    if not user.access_token:
        raise UnauthorizedError()
    return SupabaseStore(partial(user_client, user.access_token))


def get_orchestrator(store: Store = Depends(get_store)) -> ResearchOrchestrator:
    """Wire the shared search client and summarizer with the caller's store."""
    return ResearchOrchestrator(
        search_client=get_search_client(),
        summarizer=get_summarizer(),
        store=store,
        default_session_name=settings.default_session_name,
    )
