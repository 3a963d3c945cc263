from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from statement_pipeline.llm.exceptions import LLMNetworkError, LLMResponseError
from statement_pipeline.llm.openai_client_adapter import OpenAIClientAdapter


def _make_mock_response(content: str | None) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def _call(adapter: OpenAIClientAdapter) -> str:
    return adapter.create_chat_completion(
        model="m",
        temperature=0.1,
        system_prompt="system",
        user_prompt="user",
        json_schema={"type": "object"},
        schema_name="validation",
    )


def _adapter_with(mock_client: MagicMock) -> OpenAIClientAdapter:
    with patch(
        "statement_pipeline.llm.openai_client_adapter.openai.OpenAI",
        return_value=mock_client,
    ):
        return OpenAIClientAdapter(api_key="k", timeout_seconds=30, base_url=None)


class TestOpenAIClientAdapter:
    def test_returns_content(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response('{"ok": true}')
        assert _call(_adapter_with(mock_client)) == '{"ok": true}'

    def test_sends_strict_json_schema_named_after_prompt(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response("{}")
        _call(_adapter_with(mock_client))
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"]["json_schema"]["name"] == "validation"
        assert kwargs["response_format"]["json_schema"]["strict"] is True
        assert kwargs["messages"][0] == {"role": "system", "content": "system"}

    def test_raises_response_error_for_empty_content(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response(None)
        with pytest.raises(LLMResponseError, match="empty response"):
            _call(_adapter_with(mock_client))

    def test_raises_response_error_for_no_choices(self) -> None:
        mock_client = MagicMock()
        response = MagicMock()
        response.choices = []
        mock_client.chat.completions.create.return_value = response
        with pytest.raises(LLMResponseError, match="no choices"):
            _call(_adapter_with(mock_client))

    def test_raises_network_error_on_connection_failure(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=MagicMock()
        )
        with pytest.raises(LLMNetworkError, match="network error"):
            _call(_adapter_with(mock_client))

    def test_raises_network_error_on_timeout(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = httpx.TimeoutException("timeout")
        with pytest.raises(LLMNetworkError, match="network error"):
            _call(_adapter_with(mock_client))

    def test_raises_network_error_on_api_error(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.APIError(
            message="server error",
            request=MagicMock(),
            body=None,
        )
        with pytest.raises(LLMNetworkError, match="API error"):
            _call(_adapter_with(mock_client))
