"""Anthropic LLM 어댑터 구현."""

import os

from anthropic import Anthropic

from .base import BaseLLM


class AnthropicLLM(BaseLLM):
    """Anthropic Messages API를 사용하는 어댑터.

    환경변수 ANTHROPIC_API_KEY에서 API 키를 로드합니다.
    JSON 전용 응답 모드가 없으므로 json_mode는 무시되고
    프롬프트의 출력 형식 지시에 의존합니다.
    """

    DEFAULT_MODEL = "claude-3-5-sonnet-latest"

    def __init__(
        self,
        model: str | None = None,
        api_key: str | None = None,
        max_tokens: int = 700,
        temperature: float = 0.2,
        top_p: float = 1.0,
        timeout: float | None = None,
    ) -> None:
        """Anthropic LLM 초기화.

        Args:
            model: 사용할 모델명.
            api_key: API 키. None이면 환경변수에서 로드.
            max_tokens: 최대 출력 토큰 수. 기본값 700.
            temperature: 생성 온도. 기본값 0.2.
            top_p: nucleus sampling 값. 1.0이면 요청에 포함하지 않음.
            timeout: 요청 타임아웃(초). None이면 SDK 기본값.

        Raises:
            ValueError: API 키가 설정되지 않은 경우.
        """
        self._api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not self._api_key:
            raise ValueError(
                "Anthropic API 키가 필요합니다. "
                "환경변수 ANTHROPIC_API_KEY를 설정하거나 api_key 파라미터를 전달하세요."
            )

        self._model = model or self.DEFAULT_MODEL
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._top_p = top_p
        if timeout is None:
            self._client = Anthropic(api_key=self._api_key)
        else:
            self._client = Anthropic(api_key=self._api_key, timeout=timeout)

    def complete(self, prompt: str, json_mode: bool = False, **kwargs) -> str:
        """프롬프트를 system 파라미터로 보내 응답 생성.

        Messages API는 user 메시지가 최소 하나 필요하므로
        diff 리뷰 요청을 user 턴으로 함께 보냅니다.
        """
        create_kwargs = {
            "model": self._model,
            "system": prompt,
            "messages": [{"role": "user", "content": "Review the diff above."}],
            "temperature": kwargs.get("temperature", self._temperature),
            "max_tokens": kwargs.get("max_tokens", self._max_tokens),
        }

        top_p = kwargs.get("top_p", self._top_p)
        if top_p != 1.0:
            create_kwargs["top_p"] = top_p

        response = self._client.messages.create(**create_kwargs)

        # 텍스트 블록만 이어 붙임
        return "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )

    def get_model_name(self) -> str:
        return self._model
