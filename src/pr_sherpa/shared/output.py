"""출력 포매터 모듈."""

import json
import re
from abc import ABC, abstractmethod
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pr_sherpa.shared.models import OutputFormat, ReviewReport


_UNESCAPES = {"n": "\n", "r": "", "t": "\t"}
_ESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)


def _unescape(body: str) -> str:
    """전송용으로 이스케이프된 본문을 사람이 읽을 수 있게 되돌림."""
    return _ESCAPE_PATTERN.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(1)), body)


class BaseFormatter(ABC):
    """ReviewReport 출력 포매터 추상 클래스."""

    @abstractmethod
    def format(self, report: ReviewReport) -> str:
        """리포트를 포맷된 문자열로 변환.

        Args:
            report: 리뷰 실행 결과

        Returns:
            포맷된 문자열
        """
        ...


class ConsoleFormatter(BaseFormatter):
    """Rich를 사용한 터미널 출력 포매터."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(record=True)

    def format(self, report: ReviewReport) -> str:
        """리포트를 콘솔에 출력하고 출력한 텍스트를 반환."""
        pr = report.pull_request
        self.console.print(
            Panel(
                f"[bold blue]{pr.title or '(제목 없음)'}[/bold blue]\n"
                f"[dim]{pr.owner}/{pr.repo}#{pr.pull_number}[/dim]",
                title="Inline Review",
                border_style="blue",
            )
        )

        stats_table = Table(title="Statistics", show_header=True)
        stats_table.add_column("Metric", style="cyan")
        stats_table.add_column("Value", style="green")
        stats_table.add_row("Files Reviewed", str(report.files_reviewed))
        stats_table.add_row("Hunks Reviewed", str(report.hunks_reviewed))
        stats_table.add_row("Comments", str(len(report.comments)))
        if report.outcomes:
            stats_table.add_row("Delivered", str(report.delivered_comments))
            stats_table.add_row("Dropped Batches", str(report.dropped_batches))
        self.console.print(stats_table)

        if not report.comments:
            self.console.print("[dim]No issues found.[/dim]")

        for comment in report.comments:
            self.console.print(
                f"\n[bold magenta]{comment.path}:{comment.line}[/bold magenta]"
            )
            self.console.print(_unescape(comment.body), markup=False)

        return self.console.export_text()


class JSONFormatter(BaseFormatter):
    """JSON 형식 출력 포매터."""

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def _to_serializable(self, obj: Any) -> Any:
        if isinstance(obj, Enum):
            return obj.value
        if is_dataclass(obj) and not isinstance(obj, type):
            return self._to_serializable(asdict(obj))
        if isinstance(obj, dict):
            return {k: self._to_serializable(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [self._to_serializable(v) for v in obj]
        return obj

    def format(self, report: ReviewReport) -> str:
        data = {
            "pull_request": self._to_serializable(report.pull_request),
            "files_reviewed": report.files_reviewed,
            "hunks_reviewed": report.hunks_reviewed,
            "comments": [c.to_payload() for c in report.comments],
            "outcomes": [
                {
                    "batch": o.batch.index,
                    "size": len(o.batch),
                    "status": o.status.value,
                    "attempts": o.attempts,
                    "error": o.error,
                }
                for o in report.outcomes
            ],
        }
        return json.dumps(data, indent=self.indent, ensure_ascii=False)


class MarkdownFormatter(BaseFormatter):
    """Markdown 형식 출력 포매터."""

    def format(self, report: ReviewReport) -> str:
        pr = report.pull_request
        lines = [
            f"# Inline Review: {pr.title or '(untitled)'}",
            "",
            f"- Pull request: `{pr.owner}/{pr.repo}#{pr.pull_number}`",
            f"- Files reviewed: {report.files_reviewed}",
            f"- Hunks reviewed: {report.hunks_reviewed}",
            f"- Comments: {len(report.comments)}",
            "",
        ]

        if not report.comments:
            lines.append("*No issues found.*")

        for comment in report.comments:
            lines.append(f"## `{comment.path}:{comment.line}`")
            lines.append("")
            lines.append(_unescape(comment.body))
            lines.append("")

        return "\n".join(lines)


def get_formatter(format_type: str = "console") -> BaseFormatter:
    """출력 형식에 맞는 포매터 반환.

    Raises:
        ValueError: 지원하지 않는 출력 형식
    """
    formatters: dict[str, type[BaseFormatter]] = {
        OutputFormat.CONSOLE.value: ConsoleFormatter,
        OutputFormat.JSON.value: JSONFormatter,
        OutputFormat.MARKDOWN.value: MarkdownFormatter,
    }

    formatter_class = formatters.get(format_type.lower())
    if formatter_class is None:
        raise ValueError(
            f"지원하지 않는 출력 형식입니다: {format_type}. "
            f"사용 가능: {', '.join(formatters)}"
        )
    return formatter_class()
