"""Prompts module - 리뷰 프롬프트 템플릿 로더."""

from functools import lru_cache
from pathlib import Path

PROMPTS_DIR = Path(__file__).parent


@lru_cache(maxsize=None)
def _read_template(name: str) -> str:
    prompt_path = PROMPTS_DIR / f"{name}.md"
    if not prompt_path.is_file():
        raise FileNotFoundError(f"Prompt template not found: {name}.md")
    return prompt_path.read_text(encoding="utf-8")


def load_prompt(name: str, **kwargs: str | int | list[str]) -> str:
    """프롬프트 템플릿을 읽어 변수를 치환.

    템플릿은 str.format 문법을 사용하므로 JSON 예시의 중괄호는
    템플릿 안에서 `{{ }}` 로 이스케이프되어 있어야 합니다.

    Args:
        name: 프롬프트 이름 (예: "review/inline")
        **kwargs: 템플릿 변수. 리스트는 줄바꿈으로 이어 붙입니다.

    Returns:
        포맷된 프롬프트 문자열

    Raises:
        FileNotFoundError: 프롬프트 파일이 존재하지 않는 경우
        KeyError: 필수 템플릿 변수가 누락된 경우
    """
    template = _read_template(name)

    values = {
        key: "\n".join(str(item) for item in value) if isinstance(value, list) else value
        for key, value in kwargs.items()
    }

    try:
        return template.format(**values)
    except KeyError as e:
        raise KeyError(f"Missing template variable: {e}") from e


def get_available_prompts() -> list[str]:
    """사용 가능한 프롬프트 이름 목록 (예: ["review/inline"])."""
    return sorted(
        md_file.relative_to(PROMPTS_DIR).with_suffix("").as_posix()
        for md_file in PROMPTS_DIR.rglob("*.md")
    )
