from dataclasses import dataclass

UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True)
class Category:
    """A user-defined transaction category."""

    name: str
    type: str | None = None  # "income", "expense" or None for either
