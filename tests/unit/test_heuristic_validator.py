import pytest

from statement_pipeline.validation.heuristic import HeuristicValidator, month_number
from statement_pipeline.validation.models import STRATEGY_FALLBACK, ValidationRequest


def _request(text: str, bank: str = "HDFC Bank", month: str = "March", year: str = "2024") -> ValidationRequest:
    return ValidationRequest(bank_name=bank, month=month, year=year, page_text=text)


class TestMonthNumber:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [("March", 3), ("mar", 3), ("Sept", 9), ("DECEMBER", 12), ("Ma", None), ("Foo", None)],
    )
    def test_maps_first_three_letters(self, name: str, expected: int | None) -> None:
        assert month_number(name) == expected


class TestHeuristicValidator:
    def test_matching_statement_is_valid(self) -> None:
        result = HeuristicValidator().validate(_request("HDFC Bank Statement for March 2024"))
        assert result.is_valid
        assert result.confidence == 75
        assert result.strategy == STRATEGY_FALLBACK
        assert result.error_message is None
        assert result.detected_bank == "HDFC Bank"

    def test_matching_is_case_insensitive(self) -> None:
        result = HeuristicValidator().validate(
            _request("hdfc bank statement march 2024", bank="HDFC BANK", month="MARCH")
        )
        assert result.is_valid

    def test_bank_matches_on_first_word(self) -> None:
        result = HeuristicValidator().validate(
            _request("HDFC statement March 2024", bank="HDFC Bank Ltd")
        )
        assert result.bank_matches

    def test_stripped_bank_and_short_month_are_enough(self) -> None:
        result = HeuristicValidator().validate(_request("HDFC Mar 2024"))
        assert result.is_valid
        assert result.bank_matches
        assert result.month_matches
        assert result.year_matches
        assert result.confidence == 75

    def test_month_matches_on_numeric_pattern(self) -> None:
        result = HeuristicValidator().validate(
            _request("HDFC statement period 2024-03-01 to 2024-03-31")
        )
        assert result.month_matches
        assert result.is_valid

    def test_partial_match_reports_each_field(self) -> None:
        result = HeuristicValidator().validate(_request("HDFC Bank Statement April 2024"))
        assert not result.is_valid
        assert result.bank_matches
        assert not result.month_matches
        assert result.year_matches
        assert result.confidence == 25
        assert result.detected_month is None
        assert result.error_message == "Validation failed - Bank: OK, Month: FAIL, Year: OK"

    def test_unknown_month_has_no_numeric_pattern(self) -> None:
        result = HeuristicValidator().validate(
            _request("HDFC 2024-01-15", month="Smarch")
        )
        assert not result.month_matches


class TestValidationRequest:
    def test_from_pages_uses_first_three_pages(self) -> None:
        request = ValidationRequest.from_pages("HDFC", "March", 2024, ["a", "b", "c", "d"])
        assert request.page_text == "a\n\nb\n\nc"
        assert request.year == "2024"

    def test_from_pages_with_fewer_pages(self) -> None:
        request = ValidationRequest.from_pages("HDFC", "March", "2024", ["only"])
        assert request.page_text == "only"
