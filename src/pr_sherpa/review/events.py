"""GitHub Actions 이벤트 페이로드 처리."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from pr_sherpa.shared.errors import EventError, UnsupportedEventError
from pr_sherpa.shared.github import GitHubClient

logger = logging.getLogger(__name__)

SUPPORTED_ACTIONS = ("opened", "synchronize")


@dataclass
class PullRequestEvent:
    """pull_request 이벤트에서 필요한 필드."""

    action: str
    owner: str
    repo: str
    pull_number: int
    before: str | None = None
    after: str | None = None


def load_event(path: str | Path | None) -> PullRequestEvent:
    """이벤트 페이로드 파일을 읽어 PullRequestEvent로 변환.

    Args:
        path: GITHUB_EVENT_PATH 경로

    Returns:
        PullRequestEvent

    Raises:
        EventError: 파일을 읽을 수 없거나 필수 필드가 없는 경우
    """
    if not path:
        raise EventError("이벤트 페이로드 경로가 지정되지 않았습니다 (GITHUB_EVENT_PATH).")

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise EventError(f"이벤트 페이로드를 읽을 수 없습니다 ({path}): {e}") from e

    try:
        repository = data["repository"]
        number = data["number"]
        event = PullRequestEvent(
            action=str(data.get("action", "")),
            owner=repository["owner"]["login"],
            repo=repository["name"],
            pull_number=int(number),
            before=data.get("before"),
            after=data.get("after"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise EventError(f"이벤트 페이로드에 필수 필드가 없습니다: {e}") from e

    logger.debug(f"이벤트 로드: {event}")
    return event


async def resolve_diff(client: GitHubClient, event: PullRequestEvent) -> str:
    """이벤트 action에 맞는 diff를 가져옴.

    - opened: PR 전체 diff
    - synchronize: 푸시 전후 커밋(before..after) 사이의 diff

    Raises:
        UnsupportedEventError: 지원하지 않는 action
        EventError: synchronize에 커밋 정보가 없거나 diff가 비어 있는 경우
    """
    if event.action == "opened":
        diff = await client.get_pull_request_diff(event.owner, event.repo, event.pull_number)
    elif event.action == "synchronize":
        if not event.before or not event.after:
            raise EventError("synchronize 이벤트에 before/after 커밋이 없습니다.")
        diff = await client.compare_commits(
            event.owner, event.repo, event.before, event.after
        )
    else:
        raise UnsupportedEventError(
            f"지원하지 않는 이벤트 action입니다: {event.action!r} "
            f"(지원: {', '.join(SUPPORTED_ACTIONS)})"
        )

    if not diff or not diff.strip():
        raise EventError("diff가 비어 있습니다.")
    return diff
