#!/usr/bin/env python3

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from critical_review.github_client import GitHubClient
from critical_review.models import DiffFile, DiffHunk, PRDetails, ReviewComment
from critical_review.reviewers.base_reviewer import BaseReviewer

logger = logging.getLogger(__name__)


class ReviewPipeline:
    """
    Runs a reviewer over every hunk of a diff and posts the comments as one review.

    Hunks are independent: each one is reviewed as a separate task and
    writes its own result slot, and the slots are merged in diff order.
    """

    def __init__(
            self,
            reviewer: BaseReviewer,
            github_client: Optional[GitHubClient] = None,
            max_workers: int = 1,
            review_body: str = "Code Reviewer Comments",
    ):
        self.reviewer = reviewer
        self.github_client = github_client
        self.max_workers = max(1, max_workers)
        self.review_body = review_body

    def collect_tasks(self, files: Sequence[DiffFile]) -> List[Tuple[DiffFile, DiffHunk]]:
        """List the (file, hunk) pairs to review, in diff order."""
        tasks = []
        for diff_file in files:
            if not diff_file.target_path:
                logger.info("Skipping deleted file: %s", diff_file.source_path)
                continue
            if not self.reviewer.can_review_file(diff_file.target_path):
                logger.info("Skipping excluded file: %s", diff_file.target_path)
                continue

            logger.info("Processing file: %s (%d hunks)", diff_file.target_path, len(diff_file.hunks))
            for hunk in diff_file.hunks:
                tasks.append((diff_file, hunk))
        return tasks

    def run(self, files: Sequence[DiffFile], pr_details: PRDetails) -> List[ReviewComment]:
        """
        Reviews every hunk of the given files.

        Args:
            files: Parsed and filtered diff files
            pr_details: Pull request details

        Returns:
            List of comments, ordered by file and hunk
        """
        tasks = self.collect_tasks(files)
        if not tasks:
            return []

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            slots = list(executor.map(lambda task: self._review_task(task[0], task[1], pr_details), tasks))

        comments = []
        for slot in slots:
            comments.extend(slot)
        logger.info("Reviewed %d hunks, %d comments", len(tasks), len(comments))
        return comments

    def _review_task(self, diff_file: DiffFile, hunk: DiffHunk, pr_details: PRDetails) -> List[ReviewComment]:
        try:
            comments = self.reviewer.review_hunk(diff_file, hunk, pr_details)
        except Exception:
            logger.exception("%s failed on hunk %s of %s", self.reviewer.name, hunk.header, diff_file.target_path)
            return []
        return comments or []

    def submit(self, pr_details: PRDetails, comments: Sequence[ReviewComment]) -> bool:
        """
        Posts the comments as a single review.

        Returns:
            True if a review was created, False if there was nothing to post

        Raises:
            SubmissionError: If GitHub rejects the review
        """
        if not comments:
            logger.info("No issues found to comment on. Great job!")
            return False

        if self.github_client is None:
            raise ValueError("A GitHub client is required to submit a review")

        logger.info("Creating %d review comments", len(comments))
        self.github_client.create_review(
            pr_details.owner,
            pr_details.repo,
            pr_details.pull_number,
            comments,
            body=self.review_body,
        )
        return True
