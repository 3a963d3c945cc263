"""Parses the finalization delegate's category updates."""

from typing import Any

from statement_pipeline.categorization.exceptions import FinalizationPayloadError


def build_category_updates(data: dict[str, Any], transaction_count: int) -> dict[int, str]:
    """Return ``{transaction index: new category}`` from the delegate's answer.

    Raises:
        FinalizationPayloadError: on a missing list, bad entry, out-of-range
            or repeated index.
    """
    raw = data.get("finalized_transactions")
    if not isinstance(raw, list):
        raise FinalizationPayloadError("'finalized_transactions' must be a list")

    updates: dict[int, str] = {}
    for position, item in enumerate(raw):
        if not isinstance(item, dict):
            raise FinalizationPayloadError(f"Entry at position {position} must be an object")
        index = item.get("index")
        if isinstance(index, bool) or not isinstance(index, int):
            raise FinalizationPayloadError(f"Entry at position {position}: 'index' must be an integer")
        if not 0 <= index < transaction_count:
            raise FinalizationPayloadError(
                f"Entry at position {position}: index {index} out of range (0-{transaction_count - 1})"
            )
        if index in updates:
            raise FinalizationPayloadError(f"Duplicate transaction index: {index}")
        category = item.get("category")
        if not isinstance(category, str) or not category.strip():
            raise FinalizationPayloadError(
                f"Entry at position {position}: 'category' must be a non-empty string"
            )
        updates[index] = category.strip()
    return updates
