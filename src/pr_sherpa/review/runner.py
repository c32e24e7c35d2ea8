"""Review Runner - diff hunk 단위 인라인 리뷰 실행기."""

import asyncio
import logging
from dataclasses import dataclass

from pr_sherpa.shared.config import AppConfig
from pr_sherpa.shared.github import GitHubClient
from pr_sherpa.shared.llm import BaseLLM
from pr_sherpa.shared.models import (
    DiffFile,
    DiffHunk,
    ParsedDiff,
    PullRequestDetails,
    ReviewComment,
    ReviewReport,
    ValidationResult,
)

from .anchorer import anchor_comments
from .diff_parser import DiffParser
from .events import PullRequestEvent, resolve_diff
from .path_filter import filter_files
from .prompt_builder import build_prompt
from .scheduler import DeliveryScheduler, SleepFn
from .validator import validate_response

logger = logging.getLogger(__name__)


@dataclass
class ReviewContext:
    """파이프라인 실행에 필요한 협력 객체 묶음.

    실행 시작 시 한 번 만들어 ReviewRunner에 전달합니다.
    host가 없으면 코멘트를 전송하지 않는 로컬 리뷰만 가능합니다.
    """

    llm: BaseLLM
    config: AppConfig
    host: GitHubClient | None = None
    sleep: SleepFn = asyncio.sleep


class ReviewRunner:
    """diff를 hunk 단위로 모델에 보내고 결과 코멘트를 전송하는 실행기.

    hunk는 항상 순차 처리되며 코멘트 순서는 파일, hunk, 후보 순서를 따릅니다.
    """

    def __init__(self, context: ReviewContext) -> None:
        """ReviewRunner 초기화.

        Args:
            context: LLM, 설정, GitHub 클라이언트를 담은 컨텍스트
        """
        self.context = context
        self._diff_parser = DiffParser()

    @property
    def config(self) -> AppConfig:
        return self.context.config

    def parse(self, diff_text: str) -> ParsedDiff:
        """diff 텍스트 파싱."""
        parsed = self._diff_parser.parse(diff_text)
        logger.info(f"파싱된 파일: {[f.path for f in parsed.files]}")
        return parsed

    async def analyze(
        self, diff: ParsedDiff, details: PullRequestDetails
    ) -> ReviewReport:
        """대상 파일의 모든 hunk를 리뷰하여 코멘트를 수집.

        Args:
            diff: 파싱된 diff
            details: PR 메타데이터

        Returns:
            코멘트가 채워진 ReviewReport (outcomes는 비어 있음)
        """
        files = filter_files(diff.files, self.config.review.include)
        logger.info(f"리뷰 대상 파일: {[f.path for f in files]}")

        comments: list[ReviewComment] = []
        hunks_reviewed = 0
        for file in files:
            for hunk in file.hunks:
                comments.extend(await self._review_hunk(file, hunk, details))
                hunks_reviewed += 1

        logger.info(f"생성된 코멘트: {len(comments)}개")
        return ReviewReport(
            pull_request=details,
            files_reviewed=len(files),
            hunks_reviewed=hunks_reviewed,
            comments=comments,
        )

    async def deliver(self, report: ReviewReport) -> ReviewReport:
        """수집된 코멘트를 배치로 나누어 PR 리뷰로 전송.

        Raises:
            RuntimeError: 컨텍스트에 GitHub 클라이언트가 없는 경우
        """
        host = self.context.host
        if host is None:
            raise RuntimeError("코멘트를 전송하려면 GitHub 클라이언트가 필요합니다.")

        if not report.comments:
            logger.info("전송할 코멘트가 없습니다.")
            return report

        details = report.pull_request

        async def submit(batch):
            await host.create_review(
                details.owner, details.repo, details.pull_number, batch.comments
            )

        review_config = self.config.review
        scheduler = DeliveryScheduler(
            submit,
            batch_size=review_config.batch_size,
            delay=review_config.delay_seconds,
            max_attempts=review_config.max_attempts,
            sleep=self.context.sleep,
        )
        report.outcomes = await scheduler.deliver(report.comments)

        if report.dropped_batches:
            logger.warning(
                f"{report.dropped_batches}개 배치 전송에 실패했습니다. "
                f"전송된 코멘트: {report.delivered_comments}/{len(report.comments)}"
            )
        return report

    async def _review_hunk(
        self, file: DiffFile, hunk: DiffHunk, details: PullRequestDetails
    ) -> list[ReviewComment]:
        """hunk 하나에 대해 프롬프트 생성, 모델 호출, 검증, 앵커링을 수행."""
        prompt = build_prompt(file, hunk, details, self.config.review.custom_prompts)
        result = await self._ask_model(prompt)

        if not result.ok:
            logger.warning(f"{file.path} hunk 응답 무시: {result.error}")
            return []

        return anchor_comments(file, hunk, result.candidates)

    async def _ask_model(self, prompt: str) -> ValidationResult:
        """모델을 호출하고 응답을 검증.

        모델 호출 실패나 타임아웃은 재시도하지 않습니다(재시도 0회).
        해당 hunk의 결과를 비우는 것으로 처리하고 다음 hunk로 넘어갑니다.
        재시도 예산은 코멘트 전송(DeliveryScheduler)에만 적용됩니다.
        """
        llm = self.context.llm
        try:
            raw = await asyncio.wait_for(
                asyncio.to_thread(
                    llm.complete, prompt, json_mode=llm.supports_json_mode()
                ),
                timeout=self.config.llm.timeout,
            )
        except TimeoutError:
            logger.error(f"모델 응답 타임아웃 ({self.config.llm.timeout}s)")
            return ValidationResult(ok=False, error="model call timed out")
        except Exception as e:
            logger.error(f"모델 호출 실패: {e}")
            return ValidationResult(ok=False, error=f"model call failed: {e}")

        logger.debug(f"Prompt: {prompt}")
        logger.debug(f"Response: {raw}")
        return validate_response(raw)


async def run_pull_request_review(
    context: ReviewContext, event: PullRequestEvent
) -> ReviewReport:
    """PR 이벤트 하나에 대한 전체 리뷰 워크플로우.

    PR 메타데이터와 diff 조회 실패는 예외로 전파됩니다 (작업 불가).

    Args:
        context: GitHub 클라이언트가 포함된 ReviewContext
        event: pull_request 이벤트

    Returns:
        전송 결과가 포함된 ReviewReport
    """
    host = context.host
    if host is None:
        raise RuntimeError("PR 리뷰에는 GitHub 클라이언트가 필요합니다.")

    # 지원하지 않는 action은 PR 조회 전에 실패
    diff_text = await resolve_diff(host, event)

    details = await host.get_pull_request(event.owner, event.repo, event.pull_number)
    logger.info(f"PR #{details.pull_number} 조회: {details.title}")

    runner = ReviewRunner(context)
    report = await runner.analyze(runner.parse(diff_text), details)
    return await runner.deliver(report)


async def review_local_diff(
    context: ReviewContext, diff_text: str, details: PullRequestDetails
) -> ReviewReport:
    """로컬 diff를 리뷰하고 코멘트를 전송하지 않고 반환."""
    runner = ReviewRunner(context)
    if not diff_text.strip():
        return ReviewReport(
            pull_request=details, files_reviewed=0, hunks_reviewed=0, comments=[]
        )
    return await runner.analyze(runner.parse(diff_text), details)


def review_local_diff_sync(
    context: ReviewContext, diff_text: str, details: PullRequestDetails
) -> ReviewReport:
    """review_local_diff()의 동기 버전."""
    return asyncio.run(review_local_diff(context, diff_text, details))
