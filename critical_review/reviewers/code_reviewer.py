#!/usr/bin/env python3

import logging
from typing import Any, Dict, List, Optional

from critical_review.completion import CompletionClient
from critical_review.findings import map_findings
from critical_review.models import DiffFile, DiffHunk, PRDetails, ReviewComment
from critical_review.prompt import build_prompt
from critical_review.reviewers.base_reviewer import BaseReviewer

logger = logging.getLogger(__name__)


class AICodeReviewer(BaseReviewer):
    """AI-powered code reviewer that only reports critical issues."""

    def __init__(self, config: Dict[str, Any], completion_client: Optional[CompletionClient] = None):
        super().__init__(config)
        self.completion_client = completion_client or CompletionClient.from_config(config)
        self.title_prefix = config.get("title_prefix", "")

    def review_hunk(self, diff_file: DiffFile, hunk: DiffHunk, pr_details: PRDetails) -> Optional[List[ReviewComment]]:
        """
        Review one hunk using the completion backend.

        Args:
            diff_file: File the hunk belongs to
            hunk: Hunk from the diff
            pr_details: Pull request details

        Returns:
            List of comments, or None when the backend gave no usable result
        """
        logger.debug("Number of lines in hunk %s of %s: %d", hunk.header, diff_file.path, len(hunk.lines))

        prompt = build_prompt(diff_file, hunk, pr_details, title_prefix=self.title_prefix)
        findings = self.completion_client.review(prompt)
        if findings is None:
            logger.warning("No usable review for hunk %s of %s", hunk.header, diff_file.path)
            return None

        logger.info("Reviews received for %s: %d items", diff_file.path, len(findings))
        return map_findings(diff_file, findings)
