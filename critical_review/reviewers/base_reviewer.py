#!/usr/bin/env python3

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from critical_review.exclusion import is_excluded
from critical_review.models import DiffFile, DiffHunk, PRDetails, ReviewComment


class BaseReviewer(ABC):
    """
    Base class for all code reviewers.
    Each reviewer reviews one hunk at a time and should implement review_hunk.
    """

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.name = self.__class__.__name__

    def can_review_file(self, file_path: str) -> bool:
        """
        Determine if this reviewer can handle this file.
        Can be overridden by subclasses for specific file type filtering.

        Args:
            file_path: Path to the file in the repository

        Returns:
            True if this reviewer can review the file, False otherwise
        """
        return not is_excluded(file_path, self.config.get("exclude_patterns", []))

    @abstractmethod
    def review_hunk(self, diff_file: DiffFile, hunk: DiffHunk, pr_details: PRDetails) -> Optional[List[ReviewComment]]:
        """
        Review one hunk and return comments.

        Args:
            diff_file: File the hunk belongs to
            hunk: Hunk from the diff
            pr_details: Pull request details

        Returns:
            List of comments, or None when no usable review was produced
        """
        pass
