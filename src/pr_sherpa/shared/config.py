"""Configuration management - YAML 설정 로더, 스키마, Action 입력 오버레이."""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, get_origin

import yaml

from pr_sherpa.shared.errors import ConfigError

CONFIG_FILE_NAMES = (".pr-sherpa.yaml", ".pr-sherpa.yml")


@dataclass
class LLMConfig:
    """LLM 설정."""

    provider: str = "openai"
    model: str = "gpt-4"
    max_tokens: int = 700
    temperature: float = 0.2
    top_p: float = 1.0
    timeout: float = 120.0  # 모델 호출 1회 타임아웃(초)


@dataclass
class ReviewConfig:
    """리뷰 파이프라인 설정."""

    include: list[str] = field(default_factory=list)
    custom_prompts: list[str] = field(default_factory=list)
    batch_size: int = 5
    delay_ms: int = 2500
    max_attempts: int = 3

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000


@dataclass
class GitHubConfig:
    """GitHub API 설정."""

    api_url: str = "https://api.github.com"
    timeout: float = 30.0


@dataclass
class AppConfig:
    """애플리케이션 전체 설정."""

    llm: LLMConfig = field(default_factory=LLMConfig)
    review: ReviewConfig = field(default_factory=ReviewConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)

    def validate(self) -> "AppConfig":
        """값 범위 검사.

        Raises:
            ConfigError: 허용 범위를 벗어난 값이 있는 경우
        """
        if self.review.batch_size <= 0:
            raise ConfigError(f"batch_size는 1 이상이어야 합니다: {self.review.batch_size}")
        if self.review.delay_ms < 0:
            raise ConfigError(f"delay_ms는 0 이상이어야 합니다: {self.review.delay_ms}")
        if self.review.max_attempts < 1:
            raise ConfigError(
                f"max_attempts는 1 이상이어야 합니다: {self.review.max_attempts}"
            )
        if self.llm.max_tokens <= 0:
            raise ConfigError(f"max_tokens는 1 이상이어야 합니다: {self.llm.max_tokens}")
        return self


def _is_valid_value(expected: Any, value: Any) -> bool:
    """설정 값이 필드 타입과 맞는지 확인. bool은 숫자로 취급하지 않음."""
    if get_origin(expected) is list:
        return isinstance(value, list) and all(isinstance(item, str) for item in value)
    if isinstance(value, bool):
        return expected is bool
    if expected is float:
        return isinstance(value, (int, float))
    return isinstance(value, expected)


def _build_section(cls: type, data: Any, section: str) -> Any:
    """dict를 설정 dataclass로 변환. 알 수 없는 키나 타입이 맞지 않는 값은 ConfigError."""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigError(f"'{section}' 섹션은 매핑이어야 합니다.")

    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"'{section}' 섹션의 알 수 없는 키: {', '.join(unknown)}")

    for f in fields(cls):
        if f.name in data and not _is_valid_value(f.type, data[f.name]):
            raise ConfigError(
                f"'{section}.{f.name}' 값의 타입이 잘못되었습니다: {data[f.name]!r}"
            )
    return cls(**data)


def _dict_to_config(data: dict[str, Any]) -> AppConfig:
    """딕셔너리를 AppConfig로 변환."""
    return AppConfig(
        llm=_build_section(LLMConfig, data.get("llm"), "llm"),
        review=_build_section(ReviewConfig, data.get("review"), "review"),
        github=_build_section(GitHubConfig, data.get("github"), "github"),
    )


def _search_paths(config_path: Path | None) -> list[Path]:
    paths = [Path.cwd() / name for name in CONFIG_FILE_NAMES]
    paths.append(get_global_config_path())
    return [config_path, *paths] if config_path else paths


def get_global_config_path() -> Path:
    """전역 설정 파일 경로 반환."""
    return Path.home() / ".config" / "pr-sherpa" / "config.yaml"


def get_config_path() -> Path | None:
    """현재 사용 중인 설정 파일 경로 반환."""
    for path in _search_paths(None):
        if path.exists():
            return path
    return None


def load_config(config_path: Path | None = None) -> AppConfig:
    """설정 파일 로드.

    Args:
        config_path: 설정 파일 경로. None이면 기본 경로 탐색.

    Returns:
        AppConfig 인스턴스 (파일이 없으면 기본값)

    Raises:
        ConfigError: YAML 문법 오류 또는 잘못된 설정 값
    """
    for path in _search_paths(config_path):
        if path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"설정 파일 파싱 실패 ({path}): {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"설정 파일 최상위는 매핑이어야 합니다: {path}")
            try:
                return _dict_to_config(data).validate()
            except TypeError as e:
                raise ConfigError(f"잘못된 설정 값 ({path}): {e}") from e

    # 설정 파일 없으면 기본값 사용
    return AppConfig()


# ============================================================
# GitHub Action 입력 (INPUT_<NAME> 환경변수)
# ============================================================


def _get_input(env: Mapping[str, str], name: str) -> str:
    """GitHub Actions 규칙에 따라 입력 값을 읽음 (공백은 대문자 이름에서 `_`)."""
    key = f"INPUT_{name.replace(' ', '_').upper()}"
    return env.get(key, "").strip()


def _parse_int(value: str, name: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ConfigError(f"{name} 입력은 정수여야 합니다: {value!r}") from e


def apply_action_inputs(config: AppConfig, env: Mapping[str, str]) -> AppConfig:
    """GitHub Action 입력으로 설정 값을 덮어씀. 비어 있는 입력은 무시.

    Args:
        config: 기본 설정
        env: 환경변수 매핑 (보통 os.environ)

    Returns:
        입력이 반영된 같은 AppConfig 인스턴스

    Raises:
        ConfigError: 숫자 입력이 올바르지 않은 경우
    """
    model = _get_input(env, "OPENAI_API_MODEL")
    if model:
        config.llm.model = model

    max_tokens = _get_input(env, "max_tokens")
    if max_tokens:
        config.llm.max_tokens = _parse_int(max_tokens, "max_tokens")

    batch_size = _get_input(env, "BATCH_SIZE")
    if batch_size:
        config.review.batch_size = _parse_int(batch_size, "BATCH_SIZE")

    delay = _get_input(env, "DELAY_BETWEEN_BATCHES")
    if delay:
        config.review.delay_ms = _parse_int(delay, "DELAY_BETWEEN_BATCHES")

    include = _get_input(env, "include")
    if include:
        config.review.include = [p.strip() for p in include.split(",") if p.strip()]

    custom_prompts = _get_input(env, "custom_prompts")
    if custom_prompts:
        config.review.custom_prompts = [
            line.strip() for line in custom_prompts.splitlines() if line.strip()
        ]

    return config.validate()
