"""OpenAI LLM 어댑터 구현."""

import os

from openai import OpenAI

from .base import BaseLLM

# response_format={"type": "json_object"} 를 지원하는 모델
JSON_MODE_MODELS = frozenset(
    {
        "gpt-4o",
        "gpt-4o-mini",
        "gpt-4-turbo",
        "gpt-4-turbo-preview",
        "gpt-4-0125-preview",
        "gpt-4-1106-preview",
        "gpt-3.5-turbo",
        "gpt-3.5-turbo-0125",
        "gpt-3.5-turbo-1106",
    }
)


class OpenAILLM(BaseLLM):
    """OpenAI Chat Completions API를 사용하는 어댑터.

    환경변수 OPENAI_API_KEY에서 API 키를 로드합니다.
    """

    DEFAULT_MODEL = "gpt-4"

    def __init__(
        self,
        model: str | None = None,
        api_key: str | None = None,
        max_tokens: int = 700,
        temperature: float = 0.2,
        top_p: float = 1.0,
        timeout: float | None = None,
    ) -> None:
        """OpenAI LLM 초기화.

        Args:
            model: 사용할 모델명. 기본값은 gpt-4.
            api_key: API 키. None이면 환경변수에서 로드.
            max_tokens: 최대 출력 토큰 수. 기본값 700.
            temperature: 생성 온도. 기본값 0.2.
            top_p: nucleus sampling 값. 기본값 1.0.
            timeout: 요청 타임아웃(초). None이면 SDK 기본값.

        Raises:
            ValueError: API 키가 설정되지 않은 경우.
        """
        self._api_key = api_key or os.environ.get("OPENAI_API_KEY")
        if not self._api_key:
            raise ValueError(
                "OpenAI API 키가 필요합니다. "
                "환경변수 OPENAI_API_KEY를 설정하거나 api_key 파라미터를 전달하세요."
            )

        self._model = model or self.DEFAULT_MODEL
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._top_p = top_p
        if timeout is None:
            self._client = OpenAI(api_key=self._api_key)
        else:
            self._client = OpenAI(api_key=self._api_key, timeout=timeout)

    def complete(self, prompt: str, json_mode: bool = False, **kwargs) -> str:
        """프롬프트를 system 메시지로 보내 응답 생성.

        Args:
            prompt: 입력 프롬프트
            json_mode: True이고 모델이 지원하면 JSON 객체 응답을 강제
            **kwargs: 추가 파라미터 (temperature, max_tokens 등)

        Returns:
            생성된 텍스트 응답 (내용이 없으면 빈 문자열)
        """
        create_kwargs = {
            "model": self._model,
            "messages": [{"role": "system", "content": prompt}],
            "temperature": kwargs.get("temperature", self._temperature),
            "max_tokens": kwargs.get("max_tokens", self._max_tokens),
            "top_p": kwargs.get("top_p", self._top_p),
            "frequency_penalty": 0,
            "presence_penalty": 0,
        }

        if json_mode and self.supports_json_mode():
            create_kwargs["response_format"] = {"type": "json_object"}

        response = self._client.chat.completions.create(**create_kwargs)

        return response.choices[0].message.content or ""

    def get_model_name(self) -> str:
        return self._model

    def supports_json_mode(self) -> bool:
        return self._model in JSON_MODE_MODELS
