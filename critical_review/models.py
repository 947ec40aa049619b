#!/usr/bin/env python3

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, field_validator


@dataclass(frozen=True)
class PRDetails:
    """Data class for pull request details."""
    owner: str
    repo: str
    pull_number: int
    title: str = ""
    description: str = ""


@dataclass(frozen=True)
class DiffLine:
    """A single line of a hunk with its old and new side line numbers."""
    content: str
    old_number: Optional[int] = None
    new_number: Optional[int] = None

    @property
    def is_added(self) -> bool:
        return self.old_number is None and self.new_number is not None

    @property
    def is_removed(self) -> bool:
        return self.new_number is None and self.old_number is not None

    @property
    def is_context(self) -> bool:
        return self.old_number is not None and self.new_number is not None

    @property
    def display_number(self) -> Optional[int]:
        """Line number shown to the model: new side first, old side otherwise."""
        return self.new_number if self.new_number is not None else self.old_number

    @property
    def text(self) -> str:
        """Line content without its diff prefix."""
        if self.content[:1] in ("+", "-", " "):
            return self.content[1:]
        return self.content


@dataclass(frozen=True)
class DiffHunk:
    """Data class for one hunk of a changed file."""
    header: str
    old_start: int
    old_length: int
    new_start: int
    new_length: int
    lines: Tuple[DiffLine, ...] = ()


@dataclass(frozen=True)
class DiffFile:
    """
    Data class for a changed file in a PR.

    ``target_path`` is None when the file was deleted and ``source_path``
    is None when the file was added.
    """
    source_path: Optional[str]
    target_path: Optional[str]
    hunks: Tuple[DiffHunk, ...] = field(default_factory=tuple)
    is_new: bool = False
    is_deleted: bool = False
    is_renamed: bool = False

    @property
    def path(self) -> str:
        return self.target_path or ""


@dataclass(frozen=True)
class ReviewComment:
    """A line-anchored comment ready to be posted to the pull request."""
    path: str
    line: int
    body: str

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "line": self.line, "body": self.body}


class RawFinding(BaseModel):
    lineNumber: str = Field(..., description="The line number the comment refers to, as sent by the model")
    reviewComment: str = Field(..., description="The code review comment")

    @field_validator("lineNumber", mode="before")
    @classmethod
    def _line_number_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return str(value)
        return value
