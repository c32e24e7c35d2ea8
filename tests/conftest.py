"""Pytest configuration and shared fixtures."""

from unittest.mock import MagicMock

import pytest

from pr_sherpa.shared.config import AppConfig
from pr_sherpa.shared.models import PullRequestDetails

SAMPLE_DIFF = """\
diff --git a/src/app.py b/src/app.py
index 1111111..2222222 100644
--- a/src/app.py
+++ b/src/app.py
@@ -8,3 +8,5 @@ def main():
     setup()
-    run(3)
+    retries = 3
+    run(retries)
     teardown()
+    return 0
diff --git a/docs/notes.md b/docs/notes.md
index 3333333..4444444 100644
--- a/docs/notes.md
+++ b/docs/notes.md
@@ -1,2 +1,3 @@
 # Notes
+Some note.
 End.
diff --git a/src/legacy.py b/src/legacy.py
deleted file mode 100644
index 5555555..0000000
--- a/src/legacy.py
+++ /dev/null
@@ -1,2 +0,0 @@
-def legacy():
-    pass
"""


@pytest.fixture
def sample_diff_text() -> str:
    """파일 3개(수정, 문서, 삭제)를 포함한 diff."""
    return SAMPLE_DIFF


@pytest.fixture
def pr_details() -> PullRequestDetails:
    """샘플 PR 메타데이터."""
    return PullRequestDetails(
        owner="octo",
        repo="demo",
        pull_number=42,
        title="Add retry count",
        description="Makes the retry count explicit.",
    )


@pytest.fixture
def app_config() -> AppConfig:
    """기본 설정."""
    return AppConfig()


@pytest.fixture
def mock_llm() -> MagicMock:
    """빈 리뷰를 반환하는 Mock LLM."""
    llm = MagicMock()
    llm.complete.return_value = '{"reviews": []}'
    llm.supports_json_mode.return_value = False
    return llm
