import pytest

from statement_pipeline.llm.outcome import Outcome, attempt


class TestOutcome:
    def test_attempt_captures_value(self) -> None:
        outcome = attempt(lambda x: x * 2, 21)
        assert outcome.ok
        assert outcome.unwrap() == 42

    def test_attempt_captures_exception(self) -> None:
        def boom() -> None:
            raise RuntimeError("boom")

        outcome = attempt(boom)
        assert not outcome.ok
        assert isinstance(outcome.error, RuntimeError)

    def test_unwrap_reraises_error(self) -> None:
        with pytest.raises(KeyError):
            Outcome.failure(KeyError("missing")).unwrap()

    def test_success_allows_none_value(self) -> None:
        assert Outcome.success(None).ok
