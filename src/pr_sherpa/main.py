"""PR-Sherpa CLI 엔트리포인트."""

import asyncio
import logging
import os
from pathlib import Path
from typing import NoReturn

import click
import httpx
from rich.console import Console
from rich.logging import RichHandler

from pr_sherpa import __version__
from pr_sherpa.shared.config import (
    AppConfig,
    apply_action_inputs,
    get_config_path,
    load_config,
)
from pr_sherpa.shared.errors import PRSherpaError
from pr_sherpa.shared.output import get_formatter

console = Console()
logger = logging.getLogger("pr_sherpa")


class Context:
    """CLI 컨텍스트."""

    def __init__(self):
        self.config: AppConfig | None = None
        self.format = "console"
        self.verbose = False


pass_context = click.make_pass_decorator(Context, ensure=True)


def _setup_logging(verbose: bool) -> None:
    """RichHandler로 pr_sherpa 로거 출력 설정."""
    handler = RichHandler(console=Console(stderr=True), show_path=verbose)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _build_llm(config: AppConfig):
    from pr_sherpa.shared.llm import get_llm

    api_key = None
    if config.llm.provider.lower() == "openai":
        # Action 입력으로 전달된 키도 허용
        api_key = os.environ.get("OPENAI_API_KEY") or os.environ.get("INPUT_OPENAI_API_KEY")

    return get_llm(
        config.llm.provider,
        model=config.llm.model,
        api_key=api_key,
        max_tokens=config.llm.max_tokens,
        temperature=config.llm.temperature,
        top_p=config.llm.top_p,
        timeout=config.llm.timeout,
    )


def _fail(ctx: Context, error: Exception) -> NoReturn:
    console.print(f"[red]오류:[/red] {error}")
    if ctx.verbose:
        import traceback

        console.print(traceback.format_exc())
    raise click.Abort()


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="설정 파일 경로",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["console", "json", "markdown"]),
    default="console",
    help="출력 형식",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="상세 출력 (프롬프트/응답 디버그 로그 포함)",
)
@click.version_option(version=__version__, prog_name="pr-sherpa")
@pass_context
def cli(ctx: Context, config: str | None, format: str, verbose: bool):
    """PR-Sherpa: diff hunk 단위 AI 인라인 코드 리뷰 도구."""
    ctx.format = format
    ctx.verbose = verbose
    _setup_logging(verbose)

    try:
        ctx.config = load_config(Path(config) if config else None)
    except PRSherpaError as e:
        _fail(ctx, e)


# ============================================================
# GitHub Action 명령어
# ============================================================


async def _run_action(config: AppConfig, event_path: str | None):
    from pr_sherpa.review import ReviewContext, load_event, run_pull_request_review
    from pr_sherpa.shared.github import GitHubClient

    event = load_event(event_path)
    llm = _build_llm(config)
    token = os.environ.get("GITHUB_TOKEN") or os.environ.get("INPUT_GITHUB_TOKEN")

    async with GitHubClient(
        token=token, api_url=config.github.api_url, timeout=config.github.timeout
    ) as host:
        context = ReviewContext(llm=llm, config=config, host=host)
        return await run_pull_request_review(context, event)


@cli.command()
@click.option(
    "--event-path",
    envvar="GITHUB_EVENT_PATH",
    type=click.Path(),
    help="pull_request 이벤트 페이로드 경로 (기본: $GITHUB_EVENT_PATH)",
)
@pass_context
def action(ctx: Context, event_path: str | None):
    """GitHub Actions에서 PR diff를 리뷰하고 인라인 코멘트를 작성."""
    try:
        config = apply_action_inputs(ctx.config, os.environ)
        logger.info(f"Include patterns: {config.review.include}")
        report = asyncio.run(_run_action(config, event_path))
    except (PRSherpaError, httpx.HTTPError, ValueError) as e:
        _fail(ctx, e)

    formatter = get_formatter(ctx.format)
    output = formatter.format(report)
    if ctx.format != "console":
        console.print(output, markup=False, soft_wrap=True)


# ============================================================
# 로컬 리뷰 명령어
# ============================================================


@cli.command()
@click.argument("commit_range", required=False)
@click.option("--staged", is_flag=True, help="스테이지된 변경만 리뷰")
@click.option("--title", default=None, help="컨텍스트로 사용할 제목 (기본: 브랜치 이름)")
@click.option("--description", default="", help="컨텍스트로 사용할 설명")
@pass_context
def local(
    ctx: Context,
    commit_range: str | None,
    staged: bool,
    title: str | None,
    description: str,
):
    """로컬 Git diff를 리뷰하고 코멘트를 출력 (GitHub에 전송하지 않음)."""
    from pr_sherpa.review import ReviewContext, review_local_diff_sync
    from pr_sherpa.shared.git import GitClient
    from pr_sherpa.shared.models import PullRequestDetails

    try:
        git = GitClient(".")
        diff_text = git.get_diff(staged=staged, commit_range=commit_range)
        details = PullRequestDetails(
            owner="local",
            repo=git.path.name,
            pull_number=0,
            title=title or git.get_current_branch(),
            description=description,
        )
        context = ReviewContext(llm=_build_llm(ctx.config), config=ctx.config)

        with console.status("[bold green]리뷰 진행 중..."):
            report = review_local_diff_sync(context, diff_text, details)
    except (PRSherpaError, ValueError) as e:
        _fail(ctx, e)

    formatter = get_formatter(ctx.format)
    output = formatter.format(report)
    if ctx.format != "console":
        console.print(output, markup=False, soft_wrap=True)


# ============================================================
# Config 명령어 그룹
# ============================================================


@cli.group()
@pass_context
def config(ctx: Context):
    """설정 관리."""
    pass


@config.command("show")
@pass_context
def config_show(ctx: Context):
    """현재 설정 표시."""
    config_path = get_config_path()

    if config_path:
        console.print(f"[bold]설정 파일:[/bold] {config_path}")
    else:
        console.print("[dim]설정 파일 없음 (기본값 사용)[/dim]")

    console.print()
    console.print("[bold]LLM 설정:[/bold]")
    console.print(f"  Provider: {ctx.config.llm.provider}")
    console.print(f"  Model: {ctx.config.llm.model}")
    console.print(f"  Max tokens: {ctx.config.llm.max_tokens}")

    review = ctx.config.review
    console.print()
    console.print("[bold]리뷰 설정:[/bold]")
    console.print(f"  Include: {', '.join(review.include) or '(전체)'}")
    console.print(f"  배치 크기: {review.batch_size}")
    console.print(f"  배치 간격: {review.delay_ms}ms")
    console.print(f"  재시도 횟수: {review.max_attempts}")


if __name__ == "__main__":
    cli()
