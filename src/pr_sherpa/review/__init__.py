"""Review module - diff 앵커링 인라인 리뷰 파이프라인."""

from pr_sherpa.review.anchorer import anchor_comments, escape_comment_body
from pr_sherpa.review.diff_parser import DiffParser
from pr_sherpa.review.events import PullRequestEvent, load_event, resolve_diff
from pr_sherpa.review.path_filter import filter_files, matches
from pr_sherpa.review.prompt_builder import build_prompt
from pr_sherpa.review.runner import (
    ReviewContext,
    ReviewRunner,
    review_local_diff,
    review_local_diff_sync,
    run_pull_request_review,
)
from pr_sherpa.review.scheduler import DeliveryScheduler, partition_batches
from pr_sherpa.review.validator import validate_response

__all__ = [
    "DiffParser",
    "DeliveryScheduler",
    "PullRequestEvent",
    "ReviewContext",
    "ReviewRunner",
    "anchor_comments",
    "build_prompt",
    "escape_comment_body",
    "filter_files",
    "load_event",
    "matches",
    "partition_batches",
    "resolve_diff",
    "review_local_diff",
    "review_local_diff_sync",
    "run_pull_request_review",
    "validate_response",
]
