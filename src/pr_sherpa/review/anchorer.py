"""리뷰 후보를 diff 라인에 앵커링."""

import logging
from typing import Any

from pr_sherpa.shared.models import (
    DiffFile,
    DiffHunk,
    DiffLine,
    ReviewCandidate,
    ReviewComment,
)

logger = logging.getLogger(__name__)

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def escape_comment_body(text: str) -> str:
    """코멘트 본문의 역슬래시, 따옴표, 제어 문자를 이스케이프."""
    return "".join(_ESCAPES.get(ch, ch) for ch in text)


def coerce_line_number(value: Any) -> int | None:
    """모델이 준 라인 번호를 정수로 변환. 변환할 수 없으면 None.

    `10`, `"10"`, `10.0`, `"10.0"` 처럼 정수 값이면 받아들이고
    `10.5` 같은 소수나 숫자가 아닌 값은 거부합니다.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            value = float(text)
        except ValueError:
            return None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def find_line(hunk: DiffHunk, line_number: int) -> DiffLine | None:
    """hunk 안에서 앵커 번호가 일치하는 첫 번째 라인."""
    for line in hunk.lines:
        if line.line_number == line_number:
            return line
    return None


def anchor_comments(
    file: DiffFile,
    hunk: DiffHunk,
    candidates: list[ReviewCandidate],
) -> list[ReviewComment]:
    """후보를 hunk의 실제 라인에 매핑하여 ReviewComment 목록 생성.

    hunk에 없는 라인을 가리키는 후보는 버리고 경고 로그를 남깁니다.

    Args:
        file: hunk가 속한 파일
        hunk: 후보가 만들어진 hunk
        candidates: 검증된 리뷰 후보

    Returns:
        후보 순서를 유지한 ReviewComment 목록
    """
    if not file.path:
        logger.warning(f"경로 없는 파일의 후보 {len(candidates)}개 제외")
        return []

    comments = []
    for candidate in candidates:
        line_number = coerce_line_number(candidate.line_number)
        if line_number is None or find_line(hunk, line_number) is None:
            logger.warning(
                f"라인 {candidate.line_number!r}을(를) {file.path} hunk에서 찾을 수 없어 "
                "코멘트를 제외합니다."
            )
            continue

        comments.append(
            ReviewComment(
                path=file.path,
                line=line_number,
                body=escape_comment_body(candidate.review_comment),
            )
        )

    return comments
