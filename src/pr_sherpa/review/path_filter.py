"""리뷰 대상 파일 필터."""

import fnmatch
import logging

from pr_sherpa.shared.models import DiffFile

logger = logging.getLogger(__name__)


def _normalize_patterns(patterns: list[str] | None) -> list[str]:
    return [p.strip() for p in patterns or [] if p and p.strip()]


def matches(path: str, patterns: list[str] | None) -> bool:
    """경로가 include 패턴 중 하나와 일치하는지 확인.

    fnmatch 규칙을 따르며 `**/` 로 시작하는 패턴은 저장소 루트의 파일에도
    일치합니다. 패턴이 비어 있으면 모든 경로를 포함합니다.

    Args:
        path: 검사할 파일 경로
        patterns: glob 패턴 목록

    Returns:
        일치하면 True
    """
    normalized = _normalize_patterns(patterns)
    if not normalized:
        return True

    for pattern in normalized:
        if fnmatch.fnmatch(path, pattern):
            return True
        if pattern.startswith("**/") and fnmatch.fnmatch(path, pattern[3:]):
            return True
    return False


def filter_files(files: list[DiffFile], patterns: list[str] | None) -> list[DiffFile]:
    """삭제된 파일과 패턴에 맞지 않는 파일을 제외.

    Args:
        files: 파싱된 파일 목록
        patterns: include glob 패턴 목록

    Returns:
        리뷰 대상 파일 목록 (원래 순서 유지)
    """
    result = []
    for file in files:
        if file.is_deleted:
            logger.debug(f"삭제된 파일 제외: {file.old_path}")
            continue
        if not matches(file.path, patterns):
            logger.debug(f"include 패턴 불일치로 제외: {file.path}")
            continue
        result.append(file)
    return result
