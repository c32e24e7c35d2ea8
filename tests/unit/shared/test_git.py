"""GitClient 테스트."""

import subprocess
from pathlib import Path

import pytest

from pr_sherpa.review.diff_parser import DiffParser
from pr_sherpa.shared.errors import GitError, InvalidRepositoryError
from pr_sherpa.shared.git import GitClient


def git(repo_path: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=repo_path, check=True, capture_output=True)


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """테스트용 Git 저장소를 생성합니다."""
    repo_path = tmp_path / "test_repo"
    repo_path.mkdir()

    git(repo_path, "init")
    git(repo_path, "config", "user.email", "test@example.com")
    git(repo_path, "config", "user.name", "Test User")
    # GPG 서명 비활성화 (테스트 환경용)
    git(repo_path, "config", "commit.gpgsign", "false")
    git(repo_path, "checkout", "-b", "feature")

    (repo_path / "main.py").write_text("def main():\n    run(3)\n")
    git(repo_path, "add", ".")
    git(repo_path, "commit", "-m", "Initial commit")

    return repo_path


class TestGitClient:
    """GitClient 테스트."""

    def test_invalid_repository(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidRepositoryError):
            GitClient(tmp_path / "missing")

    def test_unstaged_diff(self, git_repo: Path) -> None:
        (git_repo / "main.py").write_text("def main():\n    run(5)\n")

        diff = GitClient(git_repo).get_diff()

        parsed = DiffParser().parse(diff)
        assert [f.path for f in parsed.files] == ["main.py"]
        assert [line.line_number for line in parsed.files[0].hunks[0].lines] == [1, 2, 2]

    def test_staged_diff(self, git_repo: Path) -> None:
        (git_repo / "new.py").write_text("x = 1\n")
        git(git_repo, "add", "new.py")
        client = GitClient(git_repo)

        assert "new.py" in client.get_diff(staged=True)
        assert client.get_diff() == ""

    def test_commit_range_diff(self, git_repo: Path) -> None:
        (git_repo / "main.py").write_text("def main():\n    run(4)\n")
        git(git_repo, "commit", "-am", "Change count")

        diff = GitClient(git_repo).get_diff(commit_range="HEAD~1..HEAD")

        assert "+    run(4)" in diff

    def test_bad_commit_range(self, git_repo: Path) -> None:
        with pytest.raises(GitError):
            GitClient(git_repo).get_diff(commit_range="nope..HEAD")

    def test_current_branch(self, git_repo: Path) -> None:
        client = GitClient(git_repo)

        assert client.get_current_branch() == "feature"
        assert client.path == git_repo.resolve()

    def test_subdirectory_finds_repository(self, git_repo: Path) -> None:
        sub = git_repo / "pkg"
        sub.mkdir()

        client = GitClient(sub)

        assert client.get_current_branch() == "feature"
        assert client.path == git_repo.resolve()
