from collections.abc import Sequence
from dataclasses import replace

from statement_pipeline.categorization.models import UNCATEGORIZED
from statement_pipeline.categorization.payload import build_category_updates
from statement_pipeline.extraction.models import Transaction
from statement_pipeline.llm.delegate import LLMDelegate
from statement_pipeline.llm.outcome import attempt
from statement_pipeline.logging.logger import Log


class CategoryFinalizer:
    """Cross-page category reconciliation. Best effort: never blocks a run."""

    def __init__(self, *, delegate: LLMDelegate) -> None:
        self._delegate = delegate

    def finalize(
        self,
        transactions: Sequence[Transaction],
        user_categories: Sequence[str] = (),
    ) -> list[Transaction]:
        """Return *transactions* with reconciled categories.

        On any failure the input list is returned unchanged.
        """
        if not transactions:
            return []

        Log.info(f"Finalizing categories for {len(transactions)} transactions")
        outcome = attempt(self._finalize, list(transactions), list(user_categories))
        if not outcome.ok:
            Log.warning(
                f"Category finalization failed, using original transactions: {outcome.error}"
            )
            return list(transactions)

        finalized = outcome.unwrap()
        changed = sum(1 for old, new in zip(transactions, finalized) if old.category != new.category)
        Log.info(f"Categories finalized: {changed} transactions recategorized")
        return finalized

    def _finalize(
        self,
        transactions: list[Transaction],
        user_categories: list[str],
    ) -> list[Transaction]:
        prompt = self._delegate.render(
            "finalization",
            categories=", ".join(user_categories) if user_categories else "(none provided)",
            transactions=self._describe(transactions),
        )
        data = self._delegate.complete_json("finalization", prompt)
        updates = build_category_updates(data, len(transactions))

        allowed = {name.lower(): name for name in user_categories}
        finalized = list(transactions)
        for index, category in updates.items():
            if allowed:
                category = allowed.get(category.lower(), UNCATEGORIZED)
            finalized[index] = replace(finalized[index], category=category)
        return finalized

    @staticmethod
    def _describe(transactions: list[Transaction]) -> str:
        return "\n".join(
            f"{i} | {t.date} | {t.description} | {t.amount:.2f} | {t.category or UNCATEGORIZED}"
            for i, t in enumerate(transactions)
        )
