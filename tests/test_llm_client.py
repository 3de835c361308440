"""Tests for the chat-completions summarizer."""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from research_chat.errors import MalformedUpstreamResponse
from research_chat.llm_client import LLMSummarizer, get_client


def _fake_openai(response=None, error=None):
    openai_client = MagicMock()
    openai_client.chat.completions.create = AsyncMock(return_value=response, side_effect=error)
    return openai_client


def _completion(content):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=11, completion_tokens=7),
    )


class TestGetClient:
    def test_get_client_uses_configured_base_url(self):
        with (
            patch("research_chat.llm_client.settings") as mock_settings,
            patch("openai.AsyncOpenAI") as mock_openai,
        ):
            mock_settings.openai_api_key = "sk-test"
            mock_settings.openai_base_url = "https://openrouter.ai/api/v1"

            get_client()

        mock_openai.assert_called_once_with(
            api_key="sk-test",
            base_url="https://openrouter.ai/api/v1",
        )

    def test_get_client_requires_api_key(self):
        with patch("research_chat.llm_client.settings") as mock_settings:
            mock_settings.openai_api_key = ""
            with pytest.raises(RuntimeError, match="OPENAI_API_KEY"):
                get_client()


class TestLLMSummarizer:
    @pytest.mark.asyncio
    async def test_complete_sends_system_and_user_messages(self):
        openai_client = _fake_openai(_completion("A short summary."))
        summarizer = LLMSummarizer(lambda: openai_client, model="gpt-3.5-turbo")

        text = await summarizer.complete("be brief", "summarize this")

        assert text == "A short summary."
        kwargs = openai_client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "gpt-3.5-turbo"
        assert kwargs["messages"] == [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "summarize this"},
        ]

    @pytest.mark.asyncio
    async def test_complete_maps_missing_content_to_empty_string(self):
        summarizer = LLMSummarizer(lambda: _fake_openai(_completion(None)), model="m")

        assert await summarizer.complete("s", "u") == ""

    @pytest.mark.asyncio
    async def test_complete_rejects_response_without_choices(self):
        response = SimpleNamespace(choices=[], usage=None)
        summarizer = LLMSummarizer(lambda: _fake_openai(response), model="m")

        with pytest.raises(MalformedUpstreamResponse):
            await summarizer.complete("s", "u")

    @pytest.mark.asyncio
    async def test_complete_logs_and_reraises_provider_errors(self):
        summarizer = LLMSummarizer(lambda: _fake_openai(error=TimeoutError("slow")), model="m")

        with patch("research_chat.llm_client.log_service.log_llm_call") as log_call:
            with pytest.raises(TimeoutError):
                await summarizer.complete("s", "u")

        assert log_call.call_args.kwargs["status"] == "error"
        assert log_call.call_args.kwargs["error"] == "slow"

    @pytest.mark.asyncio
    async def test_client_factory_called_once(self):
        openai_client = _fake_openai(_completion("ok"))
        factory = MagicMock(return_value=openai_client)
        summarizer = LLMSummarizer(factory, model="m")

        await summarizer.complete("s", "u")
        await summarizer.complete("s", "u")

        factory.assert_called_once()
