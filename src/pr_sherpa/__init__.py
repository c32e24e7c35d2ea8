"""PR-Sherpa: diff hunk 단위 AI 인라인 코드 리뷰 도구."""

__version__ = "0.1.0"
