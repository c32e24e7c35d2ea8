"""GitHub REST API 클라이언트."""

import logging
import os
from typing import Any

import httpx

from pr_sherpa.shared.errors import GitHubError
from pr_sherpa.shared.models import PullRequestDetails, ReviewComment

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"
DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"
JSON_MEDIA_TYPE = "application/vnd.github+json"


class GitHubClient:
    """Pull Request 조회 및 리뷰 작성을 위한 비동기 GitHub 클라이언트.

    `async with` 블록 안에서 사용하며, 블록을 벗어나면 연결을 닫습니다.
    """

    def __init__(
        self,
        token: str | None = None,
        api_url: str = GITHUB_API_BASE,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """GitHubClient 초기화.

        Args:
            token: GitHub 토큰. None이면 환경변수 GITHUB_TOKEN 사용.
            api_url: API 기본 URL (GitHub Enterprise용).
            timeout: 요청 1회 타임아웃(초).
            transport: httpx 트랜스포트 (테스트용 MockTransport 등).

        Raises:
            ValueError: 토큰이 설정되지 않은 경우.
        """
        self._token = token or os.environ.get("GITHUB_TOKEN")
        if not self._token:
            raise ValueError(
                "GitHub 토큰이 필요합니다. "
                "환경변수 GITHUB_TOKEN을 설정하거나 token 파라미터를 전달하세요."
            )

        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={
                "Accept": JSON_MEDIA_TYPE,
                "Authorization": f"Bearer {self._token}",
                "User-Agent": "pr-sherpa",
                "X-GitHub-Api-Version": "2022-11-28",
            },
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        accept: str | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """요청을 보내고 2xx가 아니면 GitHubError를 던짐.

        타임아웃 등 전송 오류(httpx.HTTPError)는 그대로 전파됩니다.
        """
        headers = {"Accept": accept} if accept else None
        response = await self._client.request(method, url, headers=headers, json=json)

        if response.is_error:
            raise GitHubError(
                f"GitHub returned {response.status_code} for {method} {url}: "
                f"{response.text}",
                status_code=response.status_code,
            )
        return response

    async def get_pull_request(
        self, owner: str, repo: str, pull_number: int
    ) -> PullRequestDetails:
        """PR 제목과 본문을 가져옴."""
        response = await self._request("GET", f"/repos/{owner}/{repo}/pulls/{pull_number}")
        data = response.json()
        return PullRequestDetails(
            owner=owner,
            repo=repo,
            pull_number=pull_number,
            title=data.get("title") or "",
            description=data.get("body") or "",
        )

    async def get_pull_request_diff(self, owner: str, repo: str, pull_number: int) -> str:
        """PR 전체 diff를 unified diff 텍스트로 가져옴."""
        response = await self._request(
            "GET",
            f"/repos/{owner}/{repo}/pulls/{pull_number}",
            accept=DIFF_MEDIA_TYPE,
        )
        return response.text

    async def compare_commits(self, owner: str, repo: str, base: str, head: str) -> str:
        """두 커밋 사이의 diff를 가져옴."""
        response = await self._request(
            "GET",
            f"/repos/{owner}/{repo}/compare/{base}...{head}",
            accept=DIFF_MEDIA_TYPE,
        )
        return response.text

    async def create_review(
        self,
        owner: str,
        repo: str,
        pull_number: int,
        comments: list[ReviewComment],
        event: str = "COMMENT",
    ) -> dict[str, Any]:
        """인라인 코멘트 묶음을 하나의 리뷰로 작성.

        Args:
            owner: 저장소 소유자
            repo: 저장소 이름
            pull_number: PR 번호
            comments: 앵커링된 코멘트 목록
            event: 리뷰 이벤트. 기본값은 승인/거절 없는 "COMMENT".

        Returns:
            생성된 리뷰 JSON

        Raises:
            GitHubError: GitHub가 요청을 거부한 경우
        """
        payload = {
            "event": event,
            "comments": [comment.to_payload() for comment in comments],
        }
        logger.debug(f"리뷰 요청 본문: {payload}")

        response = await self._request(
            "POST",
            f"/repos/{owner}/{repo}/pulls/{pull_number}/reviews",
            json=payload,
        )
        return response.json()
