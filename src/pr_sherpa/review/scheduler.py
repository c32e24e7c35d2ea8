"""리뷰 코멘트 배치 전송 스케줄러."""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable

from pr_sherpa.shared.models import (
    DeliveryAttempt,
    DeliveryOutcome,
    DeliveryStatus,
    ReviewBatch,
    ReviewComment,
)

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 5
DEFAULT_DELAY_SECONDS = 2.5
DEFAULT_MAX_ATTEMPTS = 3

SubmitFn = Callable[[ReviewBatch], Awaitable[object]]
SleepFn = Callable[[float], Awaitable[object]]


def partition_batches(
    comments: list[ReviewComment], batch_size: int
) -> list[ReviewBatch]:
    """코멘트를 최대 batch_size 크기의 연속된 배치로 분할.

    Raises:
        ValueError: batch_size가 1 미만인 경우
    """
    if batch_size <= 0:
        raise ValueError(f"batch_size는 1 이상이어야 합니다: {batch_size}")

    return [
        ReviewBatch(index=i // batch_size, comments=comments[i : i + batch_size])
        for i in range(0, len(comments), batch_size)
    ]


class DeliveryScheduler:
    """배치 단위 전송기.

    각 배치를 최대 max_attempts번 전송하고, 실패 시 delay만큼 기다린 뒤
    재시도합니다. 배치가 끝나면(성공이든 포기든) 마지막 배치를 포함해
    항상 delay만큼 기다립니다. 한 배치의 포기는 다음 배치에 영향을 주지 않습니다.
    """

    def __init__(
        self,
        submit: SubmitFn,
        batch_size: int = DEFAULT_BATCH_SIZE,
        delay: float = DEFAULT_DELAY_SECONDS,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        """DeliveryScheduler 초기화.

        Args:
            submit: 배치 하나를 전송하는 코루틴 함수. 실패 시 예외를 던짐.
            batch_size: 배치 최대 크기 (1 이상)
            delay: 재시도 간격이자 배치 간 간격(초, 0 이상)
            max_attempts: 배치당 총 시도 횟수 (1 이상)
            sleep: 대기 함수. 테스트에서는 가짜 함수로 대체.

        Raises:
            ValueError: 파라미터 범위가 잘못된 경우
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size는 1 이상이어야 합니다: {batch_size}")
        if delay < 0:
            raise ValueError(f"delay는 0 이상이어야 합니다: {delay}")
        if max_attempts < 1:
            raise ValueError(f"max_attempts는 1 이상이어야 합니다: {max_attempts}")

        self._submit = submit
        self.batch_size = batch_size
        self.delay = delay
        self.max_attempts = max_attempts
        self._sleep = sleep

    async def iter_deliveries(
        self, comments: list[ReviewComment]
    ) -> AsyncIterator[DeliveryOutcome]:
        """배치를 순서대로 전송하며 배치마다 DeliveryOutcome을 yield."""
        batches = partition_batches(comments, self.batch_size)
        if batches:
            logger.info(
                f"코멘트 {len(comments)}개를 {len(batches)}개 배치로 전송합니다."
            )

        for batch in batches:
            outcome = await self._deliver_batch(batch)
            yield outcome
            await self._sleep(self.delay)

    async def deliver(self, comments: list[ReviewComment]) -> list[DeliveryOutcome]:
        """모든 배치를 전송하고 결과 목록을 반환."""
        return [outcome async for outcome in self.iter_deliveries(comments)]

    async def _deliver_batch(self, batch: ReviewBatch) -> DeliveryOutcome:
        """배치 하나를 재시도 예산 안에서 전송."""
        history: list[DeliveryAttempt] = []

        for attempt in range(1, self.max_attempts + 1):
            try:
                await self._submit(batch)
            except Exception as e:
                history.append(
                    DeliveryAttempt(
                        batch=batch,
                        attempt=attempt,
                        status=DeliveryStatus.RETRYABLE_FAILURE,
                        error=str(e) or type(e).__name__,
                    )
                )
                logger.error(
                    f"배치 #{batch.index + 1} 전송 실패 "
                    f"(시도 {attempt}/{self.max_attempts}): {e}"
                )
                if attempt < self.max_attempts:
                    await self._sleep(self.delay)
                continue

            history.append(
                DeliveryAttempt(batch=batch, attempt=attempt, status=DeliveryStatus.SUCCESS)
            )
            logger.info(f"배치 #{batch.index + 1} 전송 완료 ({len(batch)}개 코멘트)")
            return DeliveryOutcome(
                batch=batch, status=DeliveryStatus.SUCCESS, history=history
            )

        logger.error(
            f"배치 #{batch.index + 1} 재시도 {self.max_attempts}회 모두 실패, 배치를 건너뜁니다."
        )
        return DeliveryOutcome(batch=batch, status=DeliveryStatus.EXHAUSTED, history=history)
