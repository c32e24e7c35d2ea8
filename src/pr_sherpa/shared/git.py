"""로컬 Git 저장소 클라이언트 (로컬 diff 리뷰용)."""

from pathlib import Path

from git import InvalidGitRepositoryError, NoSuchPathError, Repo
from git.exc import GitCommandError

from pr_sherpa.shared.errors import GitError, InvalidRepositoryError


class GitClient:
    """로컬 변경사항의 diff를 가져오는 Git 클라이언트."""

    def __init__(self, path: str | Path = ".") -> None:
        """Git 저장소를 엽니다.

        Args:
            path: Git 저장소 경로. 기본값은 현재 디렉토리.

        Raises:
            InvalidRepositoryError: 유효하지 않은 Git 저장소인 경우.
        """
        self._path = Path(path).resolve()
        try:
            self._repo = Repo(self._path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise InvalidRepositoryError(
                f"유효하지 않은 Git 저장소입니다: {self._path}"
            ) from e
        # 하위 디렉토리에서 열어도 저장소 루트를 기준으로 함
        self._path = Path(self._repo.working_tree_dir)

    @property
    def path(self) -> Path:
        """저장소 경로를 반환합니다."""
        return self._path

    def get_diff(self, staged: bool = False, commit_range: str | None = None) -> str:
        """unified diff를 가져옵니다.

        Args:
            staged: True이면 staged 변경사항만, False이면 unstaged 변경사항.
            commit_range: 커밋 범위 (예: "HEAD~3..HEAD", "main..feature").
                         지정하면 staged 인자는 무시됩니다.

        Returns:
            diff 문자열.

        Raises:
            GitError: Git 명령 실행 실패 시.
        """
        # 외부 diff 도구와 색상 출력이 diff 형식을 바꾸지 않도록 고정
        options = ["--no-color", "--no-ext-diff"]
        try:
            if commit_range:
                return self._repo.git.diff(*options, commit_range)
            elif staged:
                return self._repo.git.diff(*options, "--cached")
            else:
                return self._repo.git.diff(*options)
        except GitCommandError as e:
            raise GitError(f"diff 가져오기 실패: {e}") from e

    def get_current_branch(self) -> str:
        """현재 브랜치 이름을 반환합니다.

        Returns:
            현재 브랜치 이름. detached HEAD 상태이면 짧은 커밋 해시.
        """
        try:
            if self._repo.head.is_detached:
                return self._repo.head.commit.hexsha[:7]
            return self._repo.active_branch.name
        except GitCommandError as e:
            raise GitError(f"현재 브랜치 가져오기 실패: {e}") from e
        except (TypeError, ValueError):
            # 커밋이 없는 빈 저장소
            return "main"
