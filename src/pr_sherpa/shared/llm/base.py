"""LLM 추상 베이스 클래스."""

from abc import ABC, abstractmethod


class BaseLLM(ABC):
    """리뷰 모델 어댑터의 추상 베이스 클래스.

    모든 LLM 제공자 구현체는 이 클래스를 상속해야 합니다.
    """

    @abstractmethod
    def complete(self, prompt: str, json_mode: bool = False, **kwargs) -> str:
        """단일 프롬프트에 대한 완성 응답 생성.

        Args:
            prompt: 입력 프롬프트 (system 메시지로 전달)
            json_mode: True면 제공자가 지원하는 경우 JSON 객체만 반환하도록 요청
            **kwargs: 추가 파라미터 (temperature, max_tokens 등)

        Returns:
            생성된 텍스트 응답
        """
        ...

    @abstractmethod
    def get_model_name(self) -> str:
        """현재 사용 중인 모델 이름 반환."""
        ...

    def supports_json_mode(self) -> bool:
        """strict JSON 응답 모드 지원 여부."""
        return False
