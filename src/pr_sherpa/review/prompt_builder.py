"""Hunk 단위 리뷰 프롬프트 생성."""

from pr_sherpa.prompts import load_prompt
from pr_sherpa.shared.models import DiffFile, DiffHunk, PullRequestDetails

PROMPT_NAME = "review/inline"


def format_custom_instructions(instructions: list[str] | None) -> str:
    """사용자 지정 지시문을 `- ` 불릿 목록으로 변환.

    각 줄은 끝의 줄바꿈만 제거하고 그대로 붙입니다. 빈 줄은 건너뜀.
    """
    return "\n".join(
        "- " + line.rstrip("\r\n")
        for line in instructions or []
        if line and line.strip()
    )


def format_numbered_lines(hunk: DiffHunk) -> str:
    """각 라인 앞에 앵커 라인 번호를 붙인 렌더링."""
    return "\n".join(f"{line.line_number} {line.content}" for line in hunk.lines)


def build_prompt(
    file: DiffFile,
    hunk: DiffHunk,
    details: PullRequestDetails,
    custom_instructions: list[str] | None = None,
) -> str:
    """파일의 hunk 하나에 대한 리뷰 프롬프트를 생성.

    같은 입력에 대해 항상 같은 문자열을 반환합니다.

    Args:
        file: hunk가 속한 파일
        hunk: 리뷰할 hunk
        details: PR 제목/설명 (컨텍스트 용도)
        custom_instructions: 정책 블록 뒤에 덧붙일 지시문 목록

    Returns:
        프롬프트 문자열
    """
    custom = format_custom_instructions(custom_instructions)

    return load_prompt(
        PROMPT_NAME,
        custom_instructions=f"{custom}\n" if custom else "",
        path=file.path,
        title=details.title,
        description=details.description,
        hunk_content=hunk.content,
        numbered_lines=format_numbered_lines(hunk),
    )
