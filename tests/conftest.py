from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from critical_review.completion import CompletionClient
from critical_review.models import PRDetails

MODIFIED_FILE_DIFF = "\n".join([
    "diff --git a/src/app.py b/src/app.py",
    "index 83db48f..bf269f4 100644",
    "--- a/src/app.py",
    "+++ b/src/app.py",
    "@@ -1,4 +1,5 @@",
    " import os",
    "-import sys",
    "+import json",
    "+import logging",
    " ",
    " def main():",
    "@@ -10,3 +11,4 @@ def main():",
    "     config = load()",
    "     run(config)",
    "+    cleanup()",
    "     return 0",
])

NEW_FILE_DIFF = "\n".join([
    "diff --git a/src/util.py b/src/util.py",
    "new file mode 100644",
    "index 0000000..e69de29",
    "--- /dev/null",
    "+++ b/src/util.py",
    "@@ -0,0 +1,2 @@",
    "+def helper():",
    "+    return None",
])

DELETED_FILE_DIFF = "\n".join([
    "diff --git a/old.txt b/old.txt",
    "deleted file mode 100644",
    "index e69de29..0000000",
    "--- a/old.txt",
    "+++ /dev/null",
    "@@ -1,2 +0,0 @@",
    "-first",
    "-second",
])

SINGLE_LINE_DIFF = "\n".join([
    "diff --git a/src/users.py b/src/users.py",
    "--- a/src/users.py",
    "+++ b/src/users.py",
    "@@ -9,0 +10 @@ def display_name(user):",
    "+    return user.profile.name",
])

LOCK_FILE_DIFF = "\n".join([
    "diff --git a/package.lock b/package.lock",
    "--- a/package.lock",
    "+++ b/package.lock",
    "@@ -1 +1 @@",
    "-version 1",
    "+version 2",
])


def completion_response(content):
    """Build an object shaped like an OpenAI chat completion response."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def pr_details():
    return PRDetails(
        owner="octo",
        repo="shop",
        pull_number=42,
        title="Add user display names",
        description="Shows the profile name next to each order.",
    )


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create.return_value = completion_response('{"reviews": []}')
    return client


@pytest.fixture
def completion_client(openai_client):
    return CompletionClient(openai_client, "gpt-4", timeout=5)
