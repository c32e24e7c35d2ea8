"""모델 응답 검증 테스트."""

import pytest

from pr_sherpa.review.validator import validate_response


class TestValidateResponse:
    """validate_response 테스트."""

    def test_valid_response(self) -> None:
        """정상 응답은 후보 목록으로 변환."""
        raw = (
            '{"reviews": [{"lineNumber": "10", "reviewComment": "Use a constant here."},'
            ' {"lineNumber": 12, "reviewComment": "Handle the error."}]}'
        )
        result = validate_response(raw)

        assert result.ok
        assert [(c.line_number, c.review_comment) for c in result.candidates] == [
            ("10", "Use a constant here."),
            (12, "Handle the error."),
        ]

    def test_not_json(self) -> None:
        """JSON이 아니면 예외 없이 빈 결과."""
        result = validate_response("not json")

        assert not result.ok
        assert result.candidates == []
        assert "invalid JSON" in result.error

    @pytest.mark.parametrize("raw", [None, "", "   \n\t "])
    def test_empty_output_is_empty_object(self, raw) -> None:
        """빈 응답은 '{}'로 취급."""
        result = validate_response(raw)

        assert result.ok
        assert result.candidates == []

    def test_empty_reviews(self) -> None:
        result = validate_response('{"reviews": []}')

        assert result.ok
        assert result.candidates == []

    @pytest.mark.parametrize(
        "raw",
        ['{"reviews": "none"}', '{"reviews": {"lineNumber": 1}}', "[1, 2]", '"text"'],
    )
    def test_wrong_structure(self, raw) -> None:
        """reviews가 배열이 아니거나 최상위가 객체가 아니면 실패."""
        result = validate_response(raw)

        assert not result.ok
        assert result.candidates == []

    def test_malformed_items_dropped_individually(self) -> None:
        """잘못된 항목만 버리고 나머지는 유지."""
        raw = """{"reviews": [
            {"lineNumber": 1, "reviewComment": "ok"},
            {"lineNumber": 2},
            {"reviewComment": "no line"},
            {"lineNumber": null, "reviewComment": "null line"},
            {"lineNumber": true, "reviewComment": "bool line"},
            {"lineNumber": 3, "reviewComment": 5},
            {"lineNumber": 4, "reviewComment": "   "},
            "just a string",
            {"lineNumber": "5", "reviewComment": "also ok"}
        ]}"""
        result = validate_response(raw)

        assert result.ok
        assert [c.line_number for c in result.candidates] == [1, "5"]

    def test_surrounding_whitespace_is_trimmed(self) -> None:
        result = validate_response('\n  {"reviews": [{"lineNumber": 1, "reviewComment": "x"}]}  \n')

        assert len(result.candidates) == 1

    def test_never_raises_on_garbage(self) -> None:
        """어떤 입력에도 예외가 밖으로 나오지 않음."""
        for raw in ["{", "}", "null", "123", '{"reviews": null}', "\x00", "[{]"]:
            result = validate_response(raw)
            assert result.candidates == []

    def test_oversized_number_is_invalid_json(self) -> None:
        """정수 자릿수 제한을 넘는 숫자도 예외 없이 실패로 처리."""
        raw = '{"reviews": [{"lineNumber": ' + "1" * 5000 + ', "reviewComment": "x"}]}'

        result = validate_response(raw)

        assert not result.ok
        assert result.candidates == []
        assert "invalid JSON" in result.error

    def test_deeply_nested_is_invalid_json(self) -> None:
        """재귀 한도를 넘는 중첩도 예외 없이 실패로 처리."""
        result = validate_response("[" * 100000 + "]" * 100000)

        assert not result.ok
        assert result.candidates == []

    def test_integral_float_line_number_is_kept(self) -> None:
        """10.0 같은 정수 값 float는 후보로 유지."""
        result = validate_response('{"reviews": [{"lineNumber": 10.0, "reviewComment": "x"}]}')

        assert result.ok
        assert [c.line_number for c in result.candidates] == [10.0]
