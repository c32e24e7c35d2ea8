"""include 패턴 필터 테스트."""

import pytest

from pr_sherpa.review.diff_parser import DiffParser
from pr_sherpa.review.path_filter import filter_files, matches


class TestMatches:
    """matches 테스트."""

    @pytest.mark.parametrize(
        "path, patterns, expected",
        [
            ("src/app.py", ["*.py"], True),
            ("src/app.py", ["src/*"], True),
            ("src/app.py", ["**/*.py"], True),
            ("setup.py", ["**/*.py"], True),
            ("docs/notes.md", ["*.py"], False),
            ("docs/notes.md", ["*.py", "docs/*"], True),
            ("README.md", ["*.md"], True),
        ],
    )
    def test_glob_patterns(self, path, patterns, expected) -> None:
        assert matches(path, patterns) is expected

    @pytest.mark.parametrize("patterns", [None, [], ["", "  "]])
    def test_empty_patterns_match_everything(self, patterns) -> None:
        """패턴이 없으면 모든 파일 포함."""
        assert matches("anything/at/all.txt", patterns)

    def test_patterns_are_trimmed(self) -> None:
        assert matches("src/app.py", ["  *.py "])


class TestFilterFiles:
    """filter_files 테스트."""

    def test_deleted_files_are_excluded(self, sample_diff_text) -> None:
        files = DiffParser().parse(sample_diff_text).files

        result = filter_files(files, [])

        assert [f.path for f in result] == ["src/app.py", "docs/notes.md"]

    def test_include_patterns(self, sample_diff_text) -> None:
        files = DiffParser().parse(sample_diff_text).files

        result = filter_files(files, ["*.py"])

        assert [f.path for f in result] == ["src/app.py"]

    def test_deleted_file_never_matches(self, sample_diff_text) -> None:
        """삭제된 파일은 패턴이 일치해도 제외."""
        files = DiffParser().parse(sample_diff_text).files

        result = filter_files(files, ["*"])

        assert all(not f.is_deleted for f in result)
