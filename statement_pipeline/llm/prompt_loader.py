from pathlib import Path

from statement_pipeline.llm.exceptions import LLMError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(name: str, path: Path | None = None) -> str:
    """Load a prompt template shipped with the package.

    Args:
        name: Template name, e.g. "page_extraction" for page_extraction_prompt.txt.
        path: Explicit file to read instead of the bundled template.

    Returns:
        The raw template string with str.format placeholders.

    Raises:
        LLMError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / f"{name}_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LLMError(f"Failed to load prompt template: {exc}") from exc


def load_json_schema(name: str, path: Path | None = None) -> str:
    """Load the JSON schema that constrains a prompt's response.

    Raises:
        LLMError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / f"{name}_schema.json"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LLMError(f"Failed to load JSON schema: {exc}") from exc
