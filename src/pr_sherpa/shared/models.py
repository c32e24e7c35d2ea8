"""공통 데이터 모델 정의."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# 삭제된 파일의 대상 경로 (unified diff 규약)
DELETED_FILE_PATH = "/dev/null"

# ============================================================
# 공통 Enum
# ============================================================


class ChangeType(Enum):
    """파일 변경 타입."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


class LineType(Enum):
    """Diff 라인 타입."""

    ADDED = "added"
    DELETED = "deleted"
    CONTEXT = "context"


class DeliveryStatus(Enum):
    """배치 전송 결과 상태."""

    SUCCESS = "success"
    RETRYABLE_FAILURE = "retryable_failure"
    EXHAUSTED = "exhausted"


class OutputFormat(Enum):
    """출력 형식."""

    CONSOLE = "console"
    JSON = "json"
    MARKDOWN = "markdown"


# ============================================================
# Diff 관련 모델
# ============================================================


@dataclass
class DiffLine:
    """Diff hunk 안의 한 줄.

    content는 `+`, `-`, 공백 접두사를 포함한 원문 그대로입니다.
    """

    content: str
    line_type: LineType
    old_line_number: int | None = None
    new_line_number: int | None = None

    @property
    def line_number(self) -> int | None:
        """코멘트 앵커로 쓰이는 라인 번호.

        새 파일 라인 번호가 있으면 그것을, 없으면(삭제 라인) 이전 라인 번호를 반환.
        """
        if self.new_line_number is not None:
            return self.new_line_number
        return self.old_line_number


@dataclass
class DiffHunk:
    """Diff hunk (변경 블록)."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    content: str  # 헤더 포함 hunk 원문
    lines: list[DiffLine] = field(default_factory=list)


@dataclass
class DiffFile:
    """파일별 diff 정보."""

    path: str
    change_type: ChangeType
    old_path: str | None = None  # renamed인 경우
    additions: int = 0
    deletions: int = 0
    hunks: list[DiffHunk] = field(default_factory=list)

    @property
    def is_deleted(self) -> bool:
        return self.path == DELETED_FILE_PATH


@dataclass
class DiffStats:
    """Diff 통계."""

    files_changed: int
    total_additions: int
    total_deletions: int


@dataclass
class ParsedDiff:
    """파싱된 diff 전체."""

    files: list[DiffFile]
    stats: DiffStats
    raw: str = ""


# ============================================================
# Pull Request 관련 모델
# ============================================================


@dataclass
class PullRequestDetails:
    """Pull Request 메타데이터."""

    owner: str
    repo: str
    pull_number: int
    title: str = ""
    description: str = ""


# ============================================================
# 리뷰 관련 모델
# ============================================================


@dataclass
class ReviewCandidate:
    """모델 응답에서 추출한 리뷰 후보.

    line_number는 모델이 준 값 그대로(문자열일 수도 있음)이며
    앵커링 단계에서 정수로 변환됩니다.
    """

    line_number: Any
    review_comment: str


@dataclass
class ReviewComment:
    """특정 라인에 앵커링된 리뷰 코멘트."""

    path: str
    line: int
    body: str

    def to_payload(self) -> dict[str, Any]:
        """GitHub 리뷰 API 코멘트 형식으로 변환."""
        return {"body": self.body, "path": self.path, "line": self.line}


@dataclass
class ValidationResult:
    """모델 응답 검증 결과."""

    ok: bool
    candidates: list[ReviewCandidate] = field(default_factory=list)
    error: str | None = None


@dataclass
class ReviewBatch:
    """한 번의 리뷰 요청으로 전송되는 코멘트 묶음."""

    index: int
    comments: list[ReviewComment]

    def __len__(self) -> int:
        return len(self.comments)


@dataclass
class DeliveryAttempt:
    """배치 전송 시도 1회."""

    batch: ReviewBatch
    attempt: int
    status: DeliveryStatus
    error: str | None = None


@dataclass
class DeliveryOutcome:
    """배치 하나의 최종 전송 결과."""

    batch: ReviewBatch
    status: DeliveryStatus
    history: list[DeliveryAttempt] = field(default_factory=list)

    @property
    def attempts(self) -> int:
        return len(self.history)

    @property
    def error(self) -> str | None:
        """마지막 실패 시도의 에러 메시지."""
        for attempt in reversed(self.history):
            if attempt.error:
                return attempt.error
        return None

    @property
    def delivered(self) -> bool:
        return self.status == DeliveryStatus.SUCCESS


@dataclass
class ReviewReport:
    """리뷰 실행 1회의 결과 요약."""

    pull_request: PullRequestDetails
    files_reviewed: int
    hunks_reviewed: int
    comments: list[ReviewComment]
    outcomes: list[DeliveryOutcome] = field(default_factory=list)

    @property
    def delivered_comments(self) -> int:
        return sum(len(o.batch) for o in self.outcomes if o.delivered)

    @property
    def dropped_batches(self) -> int:
        return sum(1 for o in self.outcomes if not o.delivered)
