from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


# --- Requests ---


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    session_id: str = Field(alias="sessionId")


# --- Responses ---


class SummaryAndLinkResponse(BaseModel):
    summary: str
    link: str


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    summaries_and_links: list[SummaryAndLinkResponse] = Field(alias="summariesAndLinks")


class ErrorResponse(BaseModel):
    error: str


class QueryHistoryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    query: str
    created_at: str | None = None
    summaries_and_links: list[SummaryAndLinkResponse] = Field(alias="summariesAndLinks")
    responses: list[str]


class SessionHistoryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    session_name: str | None = Field(default=None, alias="sessionName")
    queries: list[QueryHistoryResponse]
