from __future__ import annotations

import asyncio
from typing import Any, Callable

from fastapi import Request
from supabase import AuthApiError, Client

from research_chat.models.records import AuthenticatedUser
from research_chat.services import logger as log_service
from research_chat.services.supabase import client


def bearer_token(request: Request) -> str | None:
    """Extract the access token from an ``Authorization: Bearer`` header."""
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class SupabaseAuthenticator:
    """Resolves the calling user through Supabase Auth."""

    def __init__(self, client_factory: Callable[[], Client] = client):
        self._client_factory = client_factory

    async def get_current_user(self, request: Request) -> AuthenticatedUser | None:
        token = bearer_token(request)
        if token is None:
            return None

        try:
            response: Any = await asyncio.to_thread(self._client_factory().auth.get_user, token)
        except AuthApiError as e:
            log_service.log_event(
                event_type="auth_rejected",
                message="Access token rejected",
                error=str(e),
            )
            return None

        user = getattr(response, "user", None) if response is not None else None
        if user is None:
            return None
        return AuthenticatedUser(
            id=str(user.id),
            email=getattr(user, "email", None),
            access_token=token,
        )
