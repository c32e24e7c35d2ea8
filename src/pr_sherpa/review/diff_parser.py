"""Unified diff 파서 모듈."""

import re

from pr_sherpa.shared.models import (
    DELETED_FILE_PATH,
    ChangeType,
    DiffFile,
    DiffHunk,
    DiffLine,
    DiffStats,
    LineType,
    ParsedDiff,
)


class DiffParser:
    """Unified diff 문자열을 ParsedDiff 객체로 변환하는 파서.

    `git diff` 형식(`diff --git` 헤더)과 헤더 없는 일반 unified diff
    (`---`/`+++`로 시작) 모두 처리합니다.
    """

    # Git diff 헤더 패턴
    _FILE_HEADER_PATTERN = re.compile(r"^diff --git a/(.*) b/(.*)$", re.MULTILINE)
    _OLD_PATH_PATTERN = re.compile(r"^--- (?:a/)?(.*?)\t?$", re.MULTILINE)
    _NEW_PATH_PATTERN = re.compile(r"^\+\+\+ (?:b/)?(.*?)\t?$", re.MULTILINE)
    _NEW_FILE_PATTERN = re.compile(r"^new file mode", re.MULTILINE)
    _DELETED_FILE_PATTERN = re.compile(r"^deleted file mode", re.MULTILINE)
    _RENAME_FROM_PATTERN = re.compile(r"^rename from (.*)$", re.MULTILINE)
    _RENAME_TO_PATTERN = re.compile(r"^rename to (.*)$", re.MULTILINE)
    _SIMILARITY_PATTERN = re.compile(r"^similarity index (\d+)%$", re.MULTILINE)
    _BINARY_PATTERN = re.compile(r"^Binary files .* differ$", re.MULTILINE)

    # Hunk 헤더 패턴: @@ -old_start,old_count +new_start,new_count @@ context
    _HUNK_HEADER_PATTERN = re.compile(
        r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(.*)$", re.MULTILINE
    )

    def parse(self, diff_text: str) -> ParsedDiff:
        """
        Unified diff 텍스트를 파싱하여 ParsedDiff 반환.

        Args:
            diff_text: git diff 또는 GitHub diff API의 출력 문자열

        Returns:
            ParsedDiff 객체 (files, stats, raw 포함)
        """
        if not diff_text or not diff_text.strip():
            return ParsedDiff(
                files=[],
                stats=DiffStats(
                    files_changed=0,
                    total_additions=0,
                    total_deletions=0,
                ),
                raw=diff_text,
            )

        file_diffs = self._split_into_file_diffs(diff_text)
        parsed_files = [self._parse_file_diff(fd) for fd in file_diffs]

        # 통계 집계
        total_additions = sum(f.additions for f in parsed_files)
        total_deletions = sum(f.deletions for f in parsed_files)

        return ParsedDiff(
            files=parsed_files,
            stats=DiffStats(
                files_changed=len(parsed_files),
                total_additions=total_additions,
                total_deletions=total_deletions,
            ),
            raw=diff_text,
        )

    def _split_into_file_diffs(self, diff_text: str) -> list[str]:
        """Diff 텍스트를 파일별로 분리."""
        if self._FILE_HEADER_PATTERN.search(diff_text):
            parts = re.split(r"(?=^diff --git )", diff_text, flags=re.MULTILINE)
            return [part for part in parts if part.strip().startswith("diff --git")]

        # git 헤더가 없으면 `--- ` 직후 `+++ ` 가 오는 위치로 분리
        parts = re.split(r"(?=^--- .*\n\+\+\+ )", diff_text, flags=re.MULTILINE)
        return [part for part in parts if part.startswith("--- ")]

    def _parse_file_diff(self, file_diff_text: str) -> DiffFile:
        """개별 파일 diff를 파싱."""
        old_path, new_path = self._extract_paths(file_diff_text)
        change_type = self._detect_change_type(file_diff_text, old_path, new_path)

        # renamed인 경우 경로 처리
        if change_type == ChangeType.RENAMED:
            rename_from = self._RENAME_FROM_PATTERN.search(file_diff_text)
            rename_to = self._RENAME_TO_PATTERN.search(file_diff_text)
            if rename_from and rename_to:
                old_path = rename_from.group(1)
                new_path = rename_to.group(1)

        # 바이너리 파일 체크
        is_binary = bool(self._BINARY_PATTERN.search(file_diff_text))

        hunks: list[DiffHunk] = []
        if not is_binary:
            hunks = self._parse_hunks(file_diff_text)

        additions = sum(
            1 for h in hunks for line in h.lines if line.line_type == LineType.ADDED
        )
        deletions = sum(
            1 for h in hunks for line in h.lines if line.line_type == LineType.DELETED
        )

        return DiffFile(
            path=new_path,
            change_type=change_type,
            old_path=old_path if old_path != new_path else None,
            additions=additions,
            deletions=deletions,
            hunks=hunks,
        )

    def _extract_paths(self, file_diff_text: str) -> tuple[str, str]:
        """이전/새 경로 추출.

        `---`/`+++` 헤더가 우선이며, 없으면(이름 변경만 있거나 바이너리)
        `diff --git` 헤더를 사용합니다.
        """
        old_path = new_path = ""

        header_match = self._FILE_HEADER_PATTERN.search(file_diff_text)
        if header_match:
            old_path, new_path = header_match.group(1), header_match.group(2)

        old_match = self._OLD_PATH_PATTERN.search(file_diff_text)
        new_match = self._NEW_PATH_PATTERN.search(file_diff_text)
        if old_match and new_match:
            old_path, new_path = old_match.group(1), new_match.group(1)

        if not new_path:
            raise ValueError("Invalid diff format: no file header found")

        if self._DELETED_FILE_PATTERN.search(file_diff_text):
            new_path = DELETED_FILE_PATH

        return old_path, new_path

    def _detect_change_type(
        self, file_diff_text: str, old_path: str, new_path: str
    ) -> ChangeType:
        """파일 변경 타입 감지."""
        if self._NEW_FILE_PATTERN.search(file_diff_text) or old_path == DELETED_FILE_PATH:
            return ChangeType.ADDED
        if new_path == DELETED_FILE_PATH:
            return ChangeType.DELETED
        is_rename = self._SIMILARITY_PATTERN.search(
            file_diff_text
        ) or self._RENAME_FROM_PATTERN.search(file_diff_text)
        if is_rename:
            return ChangeType.RENAMED
        return ChangeType.MODIFIED

    def _parse_hunks(self, file_diff_text: str) -> list[DiffHunk]:
        """Hunk 블록들을 파싱."""
        hunks: list[DiffHunk] = []

        # 모든 hunk 헤더 위치 찾기
        hunk_matches = list(self._HUNK_HEADER_PATTERN.finditer(file_diff_text))

        for i, match in enumerate(hunk_matches):
            old_start = int(match.group(1))
            old_count = int(match.group(2)) if match.group(2) else 1
            new_start = int(match.group(3))
            new_count = int(match.group(4)) if match.group(4) else 1

            # Hunk 내용 추출 (다음 hunk 또는 파일 끝까지)
            if i + 1 < len(hunk_matches):
                end_pos = hunk_matches[i + 1].start()
            else:
                end_pos = len(file_diff_text)

            body = file_diff_text[match.end() : end_pos].lstrip("\n").rstrip("\n")
            lines = self._parse_lines(body, old_start, old_count, new_start, new_count)

            hunks.append(
                DiffHunk(
                    old_start=old_start,
                    old_count=old_count,
                    new_start=new_start,
                    new_count=new_count,
                    content=f"{match.group(0)}\n{body}" if body else match.group(0),
                    lines=lines,
                )
            )

        return hunks

    def _parse_lines(
        self,
        body: str,
        old_start: int,
        old_count: int,
        new_start: int,
        new_count: int,
    ) -> list[DiffLine]:
        """Hunk 본문을 라인 번호가 붙은 DiffLine 목록으로 변환.

        헤더의 라인 수만큼만 읽고, 그 뒤의 내용은 무시합니다.
        """
        lines: list[DiffLine] = []
        old_line, new_line = old_start, new_start
        old_remaining, new_remaining = old_count, new_count

        for raw in body.split("\n"):
            if old_remaining <= 0 and new_remaining <= 0:
                break
            if raw.startswith("\\"):
                # "\ No newline at end of file"
                continue

            if raw.startswith("+"):
                lines.append(
                    DiffLine(content=raw, line_type=LineType.ADDED, new_line_number=new_line)
                )
                new_line += 1
                new_remaining -= 1
            elif raw.startswith("-"):
                lines.append(
                    DiffLine(content=raw, line_type=LineType.DELETED, old_line_number=old_line)
                )
                old_line += 1
                old_remaining -= 1
            else:
                # 후행 공백이 제거된 빈 컨텍스트 라인도 컨텍스트로 취급
                lines.append(
                    DiffLine(
                        content=raw if raw else " ",
                        line_type=LineType.CONTEXT,
                        old_line_number=old_line,
                        new_line_number=new_line,
                    )
                )
                old_line += 1
                new_line += 1
                old_remaining -= 1
                new_remaining -= 1

        return lines
