import httpx
import openai

from statement_pipeline.llm.client_base import BaseLLMClient
from statement_pipeline.llm.exceptions import LLMNetworkError, LLMResponseError


class OpenAIClientAdapter(BaseLLMClient):
    """Chat client built on the OpenAI-compatible chat completions API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
        schema_name: str,
    ) -> str:
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": schema_name,
                        "strict": True,
                        "schema": json_schema,
                    },
                },
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise LLMNetworkError(f"LLM provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise LLMNetworkError(f"LLM provider API error: {exc}") from exc

        if not response.choices:
            raise LLMResponseError("LLM returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise LLMResponseError("LLM returned empty response")
        return content
