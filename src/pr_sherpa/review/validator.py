"""모델 응답 검증기.

모델 출력은 신뢰할 수 없는 입력으로 취급합니다. 어떤 입력이 와도
예외를 밖으로 던지지 않고 ValidationResult를 반환합니다.
"""

import json
import logging
from typing import Any

from pr_sherpa.shared.models import ReviewCandidate, ValidationResult

logger = logging.getLogger(__name__)

# 리뷰 항목의 필수 키와 허용 타입
REVIEW_ITEM_SCHEMA: dict[str, tuple[type, ...]] = {
    "lineNumber": (int, float, str),
    "reviewComment": (str,),
}


def _check_item(item: Any) -> str | None:
    """스키마 위반 사유를 반환. 유효하면 None."""
    if not isinstance(item, dict):
        return f"객체가 아님: {type(item).__name__}"

    for key, types in REVIEW_ITEM_SCHEMA.items():
        if key not in item:
            return f"필수 키 누락: {key}"
        value = item[key]
        # bool은 int의 하위 타입이므로 별도로 거부
        if isinstance(value, bool) or not isinstance(value, types):
            return f"{key} 타입 오류: {type(value).__name__}"

    if not item["reviewComment"].strip():
        return "reviewComment가 비어 있음"
    return None


def validate_response(raw: str | None) -> ValidationResult:
    """모델의 원문 응답을 ReviewCandidate 목록으로 변환.

    Args:
        raw: 모델이 반환한 텍스트

    Returns:
        ValidationResult. JSON 파싱에 실패하거나 최상위 구조가 잘못되면
        ok=False와 빈 후보 목록을 담습니다. 잘못된 개별 항목은 따로 버립니다.
    """
    text = (raw or "").strip() or "{}"

    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError 외에 정수 자릿수 제한 초과, 과도한 중첩도 포함
        logger.warning(f"모델 응답 JSON 파싱 실패: {e}")
        return ValidationResult(ok=False, error=f"invalid JSON: {e}")

    if not isinstance(data, dict):
        logger.warning(f"모델 응답이 JSON 객체가 아님: {type(data).__name__}")
        return ValidationResult(ok=False, error="top-level value is not an object")

    reviews = data.get("reviews")
    if reviews is None:
        return ValidationResult(ok=True)
    if not isinstance(reviews, list):
        logger.warning(f"'reviews'가 배열이 아님: {type(reviews).__name__}")
        return ValidationResult(ok=False, error="'reviews' is not an array")

    candidates = []
    for index, item in enumerate(reviews):
        problem = _check_item(item)
        if problem:
            logger.debug(f"리뷰 항목 #{index} 제외: {problem}")
            continue
        candidates.append(
            ReviewCandidate(
                line_number=item["lineNumber"],
                review_comment=item["reviewComment"],
            )
        )

    return ValidationResult(ok=True, candidates=candidates)
