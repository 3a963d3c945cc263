from statement_pipeline.pipeline.models import PipelinePhase, ProgressSnapshot

DEFAULT_SECONDS_PER_PAGE = 3.0


class ProgressTracker:
    """Derives percent complete and a fixed-rate ETA from page counts."""

    def __init__(self, average_seconds_per_page: float = DEFAULT_SECONDS_PER_PAGE) -> None:
        if average_seconds_per_page < 0:
            raise ValueError("average_seconds_per_page must not be negative")
        self._average_seconds_per_page = average_seconds_per_page

    def snapshot(
        self,
        phase: PipelinePhase,
        current_page: int,
        total_pages: int,
        operation: str,
        completed_pages: int = 0,
        successful_pages: int = 0,
        failed_pages: int = 0,
    ) -> ProgressSnapshot:
        percent = completed_pages / total_pages * 100 if total_pages > 0 else 0.0
        remaining = max(total_pages - completed_pages, 0)
        return ProgressSnapshot(
            phase=phase,
            current_page=current_page,
            total_pages=total_pages,
            completed_pages=completed_pages,
            successful_pages=successful_pages,
            failed_pages=failed_pages,
            percent_complete=percent,
            estimated_seconds_remaining=remaining * self._average_seconds_per_page,
            current_operation=operation,
        )
