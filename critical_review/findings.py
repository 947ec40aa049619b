#!/usr/bin/env python3

import logging
import re
from typing import Any, List, Sequence

from critical_review.errors import MalformedFindingLineNumberError, UnresolvableTargetPathError
from critical_review.models import DiffFile, RawFinding, ReviewComment

logger = logging.getLogger(__name__)

LINE_NUMBER_RE = re.compile(r"^\d+$")


def coerce_line_number(token: Any) -> int:
    """
    Converts a line number sent by the model into a positive integer.

    Raises:
        MalformedFindingLineNumberError: If the token is not an integer or a numeric string
    """
    if isinstance(token, int) and not isinstance(token, bool):
        number = token
    elif isinstance(token, str) and LINE_NUMBER_RE.match(token.strip()):
        number = int(token.strip())
    else:
        raise MalformedFindingLineNumberError(token)

    if number < 1:
        raise MalformedFindingLineNumberError(token)
    return number


def map_findings(diff_file: DiffFile, findings: Sequence[RawFinding]) -> List[ReviewComment]:
    """
    Creates comment objects from AI responses.

    Findings whose line number is not an integer are dropped and logged.

    Args:
        diff_file: File the reviewed hunk belongs to
        findings: Findings returned for the hunk

    Returns:
        List of comments anchored to the file's target path
    """
    if not diff_file.target_path:
        error = UnresolvableTargetPathError(
            f"Cannot anchor {len(findings)} finding(s): file has no target path"
        )
        logger.warning("%s", error)
        return []

    comments = []
    for finding in findings:
        try:
            line = coerce_line_number(finding.lineNumber)
        except MalformedFindingLineNumberError as e:
            logger.warning("Dropping finding for %s: %s", diff_file.target_path, e)
            continue
        comments.append(ReviewComment(path=diff_file.target_path, line=line, body=finding.reviewComment))
    return comments
