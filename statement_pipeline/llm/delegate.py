"""Prompt-in, validated-JSON-out wrapper around a chat client."""

import json

from statement_pipeline.llm.client_base import BaseLLMClient
from statement_pipeline.llm.exceptions import LLMResponseError
from statement_pipeline.llm.prompt_loader import load_json_schema, load_prompt_template
from statement_pipeline.logging.logger import Log

SYSTEM_PROMPT = (
    "You are a precise financial document assistant for a personal finance app. "
    "Answer with a single JSON object that matches the requested schema."
)


class LLMDelegate:
    """Renders bundled prompts, calls the model, and parses its JSON answer."""

    def __init__(
        self,
        *,
        client: BaseLLMClient,
        model: str,
        temperature: float = 0.0,
        system_prompt: str = SYSTEM_PROMPT,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._system_prompt = system_prompt
        self._templates: dict[str, str] = {}
        self._schemas: dict[str, str] = {}

    def render(self, name: str, **variables: object) -> str:
        """Fill the named prompt template; the schema is always available as {json_schema}."""
        if name not in self._templates:
            self._templates[name] = load_prompt_template(name)
        return self._templates[name].format(json_schema=self._schema(name), **variables)

    def complete_json(self, name: str, prompt: str) -> dict[str, object]:
        """Send *prompt* and return the response parsed as a JSON object.

        Raises:
            LLMNetworkError: provider unreachable or failing.
            LLMResponseError: response is not a JSON object.
        """
        Log.debug(f"{name} prompt:\n{prompt}")
        raw = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            json_schema=json.loads(self._schema(name)),
            schema_name=name,
        )
        Log.debug(f"{name} raw response:\n{raw}")
        return parse_json_object(raw)

    def _schema(self, name: str) -> str:
        if name not in self._schemas:
            self._schemas[name] = load_json_schema(name)
        return self._schemas[name]


def parse_json_object(raw: str) -> dict[str, object]:
    """Parse model output, tolerating Markdown code fences and leading chatter."""
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines).strip()

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start == -1 or end <= start:
            raise LLMResponseError(f"Invalid JSON response: {exc}") from exc
        try:
            parsed = json.loads(cleaned[start : end + 1])
        except json.JSONDecodeError as inner:
            raise LLMResponseError(f"Invalid JSON response: {inner}") from inner

    if not isinstance(parsed, dict):
        raise LLMResponseError("JSON response must be an object")
    return parsed
