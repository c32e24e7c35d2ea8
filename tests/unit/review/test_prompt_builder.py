"""프롬프트 생성 테스트."""

import pytest

from pr_sherpa.prompts import get_available_prompts, load_prompt
from pr_sherpa.review.diff_parser import DiffParser
from pr_sherpa.review.prompt_builder import (
    build_prompt,
    format_custom_instructions,
    format_numbered_lines,
)


@pytest.fixture
def app_file(sample_diff_text):
    """src/app.py 파일 diff."""
    return DiffParser().parse(sample_diff_text).files[0]


class TestLoadPrompt:
    """프롬프트 템플릿 로더 테스트."""

    def test_inline_prompt_available(self) -> None:
        assert "review/inline" in get_available_prompts()

    def test_missing_template_raises(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_prompt("review/does-not-exist")

    def test_missing_variable_raises(self) -> None:
        with pytest.raises(KeyError):
            load_prompt("review/inline", path="a.py")


class TestBuildPrompt:
    """build_prompt 테스트."""

    def test_contains_output_contract(self, app_file, pr_details) -> None:
        """JSON 출력 계약이 그대로 포함됨."""
        prompt = build_prompt(app_file, app_file.hunks[0], pr_details)

        assert (
            '{"reviews": [{"lineNumber":  <line_number>, '
            '"reviewComment": "<review comment>"}]}'
        ) in prompt
        assert '"reviews" should be an empty array' in prompt

    def test_contains_policy(self, app_file, pr_details) -> None:
        """칭찬 금지와 코드 주석 제안 금지 정책."""
        prompt = build_prompt(app_file, app_file.hunks[0], pr_details)

        assert "Do not give positive comments or compliments." in prompt
        assert "NEVER suggest adding comments to the code." in prompt

    def test_contains_pr_context(self, app_file, pr_details) -> None:
        """PR 제목/설명은 컨텍스트로만 포함."""
        prompt = build_prompt(app_file, app_file.hunks[0], pr_details)

        assert "Pull request title: Add retry count" in prompt
        assert "Makes the retry count explicit." in prompt
        assert "only for the overall context and only comment the code" in prompt
        assert 'in the file "src/app.py"' in prompt

    def test_contains_raw_hunk_and_numbered_lines(self, app_file, pr_details) -> None:
        """hunk 원문과 번호가 붙은 라인이 모두 포함됨."""
        hunk = app_file.hunks[0]
        prompt = build_prompt(app_file, hunk, pr_details)

        assert f"```diff\n{hunk.content}\n" in prompt
        assert "9 +    retries = 3" in prompt
        assert "12 +    return 0" in prompt

    def test_custom_instructions_follow_policy(self, app_file, pr_details) -> None:
        """사용자 지시문은 정책 블록 뒤에 불릿으로 추가됨."""
        prompt = build_prompt(
            app_file,
            app_file.hunks[0],
            pr_details,
            ["Prefer constants.", "", "Check error handling."],
        )

        policy = prompt.index("NEVER suggest adding comments")
        first = prompt.index("- Prefer constants.")
        second = prompt.index("- Check error handling.")
        assert policy < first < second
        assert "- \n" not in prompt

    def test_is_deterministic(self, app_file, pr_details) -> None:
        """같은 입력이면 같은 프롬프트."""
        hunk = app_file.hunks[0]
        assert build_prompt(app_file, hunk, pr_details, ["x"]) == build_prompt(
            app_file, hunk, pr_details, ["x"]
        )

    def test_braces_in_diff_are_preserved(self, pr_details) -> None:
        """diff 안의 중괄호는 템플릿 치환에 영향을 주지 않음."""
        diff_text = """\
diff --git a/a.js b/a.js
--- a/a.js
+++ b/a.js
@@ -1 +1 @@
-const a = {};
+const a = { b: "{c}" };
"""
        file = DiffParser().parse(diff_text).files[0]
        prompt = build_prompt(file, file.hunks[0], pr_details)

        assert '1 +const a = { b: "{c}" };' in prompt


class TestFormatting:
    """보조 포맷 함수 테스트."""

    def test_format_custom_instructions(self) -> None:
        assert format_custom_instructions(["a", " ", "b\n"]) == "- a\n- b"
        # 줄 안의 공백은 그대로 유지
        assert format_custom_instructions(["  indented  "]) == "-   indented  "
        assert format_custom_instructions(None) == ""

    def test_format_numbered_lines(self, app_file) -> None:
        rendered = format_numbered_lines(app_file.hunks[0]).split("\n")

        assert rendered[0] == "8      setup()"
        assert rendered[1] == "9 -    run(3)"
        assert len(rendered) == 6
