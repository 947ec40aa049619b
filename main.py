#!/usr/bin/env python3

import json
import logging
import sys
from typing import Any, Dict, List, Optional

from config import load_config, validate_config
from critical_review.diff_parser import DiffParser
from critical_review.errors import PlatformError, ReviewBotError
from critical_review.exclusion import filter_files
from critical_review.github_client import GitHubClient
from critical_review.models import PRDetails, ReviewComment
from critical_review.pipeline import ReviewPipeline
from critical_review.reviewers.base_reviewer import BaseReviewer
from critical_review.reviewers.code_reviewer import AICodeReviewer

logger = logging.getLogger("critical_review")

# "opened": review the whole PR; "synchronize": review only the newly pushed commits
SUPPORTED_ACTIONS = ("opened", "synchronize")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )


def read_event(event_path: str) -> Dict[str, Any]:
    """Load the GitHub Actions event payload."""
    with open(event_path, "r", encoding="utf-8") as f:
        return json.load(f)


def fetch_diff(github: GitHubClient, pr_details: PRDetails, event_data: Dict[str, Any]) -> Optional[str]:
    """
    Fetches the diff to review for the event.

    Args:
        github: GitHub client
        pr_details: Pull request details
        event_data: GitHub Actions event payload

    Returns:
        Diff text, or None for unsupported events
    """
    action = event_data.get("action")
    if action == "opened":
        return github.get_diff(pr_details.owner, pr_details.repo, pr_details.pull_number)
    if action == "synchronize":
        base, head = event_data.get("before"), event_data.get("after")
        if not base or not head:
            raise PlatformError("synchronize event is missing the before/after commits")
        return github.get_compare_diff(pr_details.owner, pr_details.repo, base, head)
    return None


def review_pull_request(
        config: Dict[str, Any],
        event_data: Dict[str, Any],
        github: GitHubClient,
        reviewer: BaseReviewer,
) -> List[ReviewComment]:
    """
    Reviews the pull request described by the event and posts the comments.

    Returns:
        The comments that were posted

    Raises:
        MalformedDiffError: If the diff cannot be parsed, in which case nothing is posted
        PlatformError: If the pull request or its diff cannot be retrieved
        SubmissionError: If GitHub rejects the review
    """
    action = event_data.get("action")
    if action not in SUPPORTED_ACTIONS:
        logger.info("Unsupported event: %s (action %s)", config.get("github_event_name"), action)
        return []

    pr_details = github.get_pr_details(event_data)
    logger.info("Analyzing PR #%s in repo %s/%s", pr_details.pull_number, pr_details.owner, pr_details.repo)

    diff = fetch_diff(github, pr_details, event_data)
    if not diff:
        logger.info("No diff found. Exiting.")
        return []

    parsed_files = DiffParser.parse_diff(diff)
    files = filter_files(parsed_files, config.get("exclude_patterns", []))
    logger.info("%d of %d changed files left after exclusions", len(files), len(parsed_files))

    pipeline = ReviewPipeline(
        reviewer,
        github_client=github,
        max_workers=config.get("max_workers", 1),
        review_body=config.get("review_body", "Code Reviewer Comments"),
    )
    comments = pipeline.run(files, pr_details)
    pipeline.submit(pr_details, comments)
    return comments


def main() -> int:
    """Main function to execute the code review process."""
    configure_logging()
    try:
        config = load_config()
        logging.getLogger().setLevel(config["log_level"])
        logger.info("Starting PR review bot...")
        validate_config(config)

        event_data = read_event(config["github_event_path"])
        github = GitHubClient(config["github_token"], api_url=config["github_api_url"])
        reviewer = AICodeReviewer(config)
        review_pull_request(config, event_data, github, reviewer)
    except (ReviewBotError, OSError, json.JSONDecodeError) as e:
        logger.error("Error in main execution: %s", e)
        return 1
    except Exception:
        logger.exception("Error in main execution")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
