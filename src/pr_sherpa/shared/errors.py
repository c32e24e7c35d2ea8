"""공통 예외 정의."""


class PRSherpaError(Exception):
    """pr-sherpa 최상위 예외."""

    pass


class ConfigError(PRSherpaError):
    """설정 값 오류."""

    pass


class EventError(PRSherpaError):
    """이벤트 페이로드를 읽을 수 없거나 diff를 얻을 수 없는 경우."""

    pass


class UnsupportedEventError(EventError):
    """지원하지 않는 이벤트 action."""

    pass


class GitHubError(PRSherpaError):
    """GitHub API 호출 실패."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitError(PRSherpaError):
    """Git 관련 에러."""

    pass


class InvalidRepositoryError(GitError):
    """유효하지 않은 Git 저장소 에러."""

    pass
