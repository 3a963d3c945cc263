from collections.abc import Iterable

from statement_pipeline.extraction.models import PageResult
from statement_pipeline.sanitization.models import SecurityBreakdown


def aggregate_security(page_results: Iterable[PageResult]) -> SecurityBreakdown:
    """Sum the per-page masking counts. Pages without a breakdown add nothing."""
    total = SecurityBreakdown()
    for result in page_results:
        if result.security_breakdown is not None:
            total = total + result.security_breakdown
    return total
