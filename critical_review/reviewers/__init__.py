"""
Reviewer modules for PR code review.

Available reviewers:
- AICodeReviewer: Asks an OpenAI model for critical issues in each hunk
"""

from critical_review.reviewers.base_reviewer import BaseReviewer
from critical_review.reviewers.code_reviewer import AICodeReviewer

__all__ = [
    'AICodeReviewer',
    'BaseReviewer',
]
