"""Offline chat client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseLLMClient and register the provider in LLMClientFactory.
"""

import json
from typing import ClassVar

from statement_pipeline.llm.client_base import BaseLLMClient
from statement_pipeline.llm.exceptions import LLMResponseError


class ExampleClientAdapter(BaseLLMClient):
    """Returns a fixed, schema-valid response for each prompt type.

    No network calls. Validation always matches, pages yield no
    transactions, and finalization leaves categories untouched.
    """

    RESPONSES: ClassVar[dict[str, dict[str, object]]] = {
        "validation": {
            "is_valid": True,
            "bank_matches": True,
            "month_matches": True,
            "year_matches": True,
            "error_message": None,
            "detected_bank": None,
            "detected_month": None,
            "detected_year": None,
            "confidence": 100,
        },
        "page_extraction": {
            "transactions": [],
            "ending_balance": None,
            "processing_notes": "example provider: no extraction performed",
            "has_incomplete_transactions": False,
            "balance_data": None,
        },
        "finalization": {
            "finalized_transactions": [],
        },
    }

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
        _ = model, temperature, system_prompt, user_prompt, json_schema
        response = self.RESPONSES.get(schema_name)
        if response is None:
            raise LLMResponseError(f"No example response for '{schema_name}'")
        return json.dumps(response)
