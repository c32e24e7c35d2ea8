"""코멘트 앵커링 테스트."""

import logging

import pytest

from pr_sherpa.review.anchorer import (
    anchor_comments,
    coerce_line_number,
    escape_comment_body,
)
from pr_sherpa.review.diff_parser import DiffParser
from pr_sherpa.review.validator import validate_response
from pr_sherpa.shared.models import (
    ChangeType,
    DiffFile,
    DiffHunk,
    DiffLine,
    LineType,
    ReviewCandidate,
)


@pytest.fixture
def hunk_10_12() -> tuple[DiffFile, DiffHunk]:
    """추가 라인 10, 12를 가진 hunk."""
    hunk = DiffHunk(
        old_start=10,
        old_count=1,
        new_start=10,
        new_count=3,
        content="@@ -10,1 +10,3 @@\n+a = 1\n b = 2\n+c = 3",
        lines=[
            DiffLine("+a = 1", LineType.ADDED, new_line_number=10),
            DiffLine(" b = 2", LineType.CONTEXT, old_line_number=10, new_line_number=11),
            DiffLine("+c = 3", LineType.ADDED, new_line_number=12),
        ],
    )
    file = DiffFile(path="src/calc.py", change_type=ChangeType.MODIFIED, hunks=[hunk])
    return file, hunk


class TestAnchorComments:
    """anchor_comments 테스트."""

    def test_example_anchor_and_drop(self, hunk_10_12, caplog) -> None:
        """라인 10은 앵커링되고 라인 99는 로그와 함께 버려짐."""
        file, hunk = hunk_10_12
        result = validate_response(
            '{"reviews":[{"lineNumber":"10","reviewComment":"Use a constant here."},'
            '{"lineNumber":"99","reviewComment":"x"}]}'
        )

        with caplog.at_level(logging.WARNING, logger="pr_sherpa.review.anchorer"):
            comments = anchor_comments(file, hunk, result.candidates)

        assert len(comments) == 1
        assert comments[0].path == "src/calc.py"
        assert comments[0].line == 10
        assert comments[0].body == "Use a constant here."
        assert "99" in caplog.text
        assert "src/calc.py" in caplog.text

    def test_integral_float_line_is_anchored(self, hunk_10_12) -> None:
        """정수 값 float 라인 번호도 앵커링됨."""
        file, hunk = hunk_10_12
        result = validate_response(
            '{"reviews": [{"lineNumber": 10.0, "reviewComment": "x"},'
            ' {"lineNumber": "12.0", "reviewComment": "y"}]}'
        )

        comments = anchor_comments(file, hunk, result.candidates)

        assert [c.line for c in comments] == [10, 12]
        assert all(isinstance(c.line, int) for c in comments)

    def test_context_line_is_anchorable(self, hunk_10_12) -> None:
        file, hunk = hunk_10_12
        comments = anchor_comments(file, hunk, [ReviewCandidate(11, "ctx")])

        assert [c.line for c in comments] == [11]

    def test_preserves_candidate_order(self, hunk_10_12) -> None:
        file, hunk = hunk_10_12
        candidates = [
            ReviewCandidate(12, "second line first"),
            ReviewCandidate("10", "then ten"),
        ]

        comments = anchor_comments(file, hunk, candidates)

        assert [c.line for c in comments] == [12, 10]

    def test_uncoercible_line_is_dropped(self, hunk_10_12) -> None:
        file, hunk = hunk_10_12
        comments = anchor_comments(
            file, hunk, [ReviewCandidate("ten", "x"), ReviewCandidate("10.5", "y")]
        )

        assert comments == []

    def test_file_without_path(self, hunk_10_12) -> None:
        _, hunk = hunk_10_12
        file = DiffFile(path="", change_type=ChangeType.MODIFIED)

        assert anchor_comments(file, hunk, [ReviewCandidate(10, "x")]) == []

    def test_body_is_escaped(self, hunk_10_12) -> None:
        file, hunk = hunk_10_12
        comments = anchor_comments(
            file, hunk, [ReviewCandidate(10, 'Use "x"\nnot \'y\'')]
        )

        assert comments[0].body == 'Use \\"x\\"\\nnot \\\'y\\\''

    def test_comments_always_reference_lines_in_hunk(self, sample_diff_text) -> None:
        """생성된 코멘트의 라인 번호는 항상 hunk 안의 라인 번호."""
        candidates = [ReviewCandidate(n, f"line {n}") for n in range(-2, 30)]

        for file in DiffParser().parse(sample_diff_text).files:
            for hunk in file.hunks:
                numbers = {line.line_number for line in hunk.lines}
                for comment in anchor_comments(file, hunk, candidates):
                    assert comment.line in numbers
                    assert comment.path == file.path


class TestHelpers:
    """보조 함수 테스트."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (10, 10),
            ("10", 10),
            (" 7 ", 7),
            ("-3", -3),
            ("abc", None),
            (None, None),
            (True, None),
            (3.0, 3),
            ("10.0", 10),
            (10.5, None),
            ("10.5", None),
            (float("nan"), None),
            ("1e400", None),
            ([1], None),
        ],
    )
    def test_coerce_line_number(self, value, expected) -> None:
        assert coerce_line_number(value) == expected

    def test_escape_comment_body(self) -> None:
        assert escape_comment_body("a\\b") == "a\\\\b"
        assert escape_comment_body("tab\there\r\n") == "tab\\there\\r\\n"
        assert escape_comment_body("plain `code`") == "plain `code`"
