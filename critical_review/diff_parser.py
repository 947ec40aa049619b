#!/usr/bin/env python3

import re
from typing import Any, Dict, List, Optional, Tuple

from critical_review.errors import MalformedDiffError
from critical_review.models import DiffFile, DiffHunk, DiffLine

HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(.*)$")
DEV_NULL = "/dev/null"


def _resolve_path(raw: str) -> Optional[str]:
    """Turn a ``---``/``+++`` path into a repository path, None for /dev/null."""
    path = raw.split("\t", 1)[0].strip()
    if len(path) >= 2 and path.startswith('"') and path.endswith('"'):
        path = path[1:-1]
    if not path or path == DEV_NULL:
        return None
    if path.startswith("a/") or path.startswith("b/"):
        return path[2:]
    return path


class DiffParser:
    """Parser for Git diff output."""

    @staticmethod
    def parse_diff(diff_str: str) -> List[DiffFile]:
        """
        Parses the diff string and returns a structured format.

        Args:
            diff_str: Unified diff text, as returned by the GitHub diff media type

        Returns:
            List of DiffFile objects in document order

        Raises:
            MalformedDiffError: If a hunk header is invalid, a hunk has no file,
                or a hunk body does not match the line counts of its header
        """
        files: List[DiffFile] = []
        current_file: Optional[Dict[str, Any]] = None
        current_hunk: Optional[Dict[str, Any]] = None

        def close_hunk() -> None:
            nonlocal current_hunk
            if current_hunk is None:
                return
            if current_hunk["old_remaining"] or current_hunk["new_remaining"]:
                raise MalformedDiffError(
                    f"Hunk {current_hunk['header']!r} ended before all of its lines were read"
                )
            current_file["hunks"].append(DiffHunk(
                header=current_hunk["header"],
                old_start=current_hunk["old_start"],
                old_length=current_hunk["old_length"],
                new_start=current_hunk["new_start"],
                new_length=current_hunk["new_length"],
                lines=tuple(current_hunk["lines"]),
            ))
            current_hunk = None

        def close_file() -> None:
            nonlocal current_file
            close_hunk()
            if current_file is None:
                return
            files.append(DiffFile(
                source_path=None if current_file["is_new"] else current_file["source"],
                target_path=None if current_file["is_deleted"] else current_file["target"],
                hunks=tuple(current_file["hunks"]),
                is_new=current_file["is_new"],
                is_deleted=current_file["is_deleted"],
                is_renamed=current_file["is_renamed"],
            ))
            current_file = None

        def open_file(source: Optional[str] = None, target: Optional[str] = None) -> None:
            nonlocal current_file
            close_file()
            current_file = {
                "source": source,
                "target": target,
                "hunks": [],
                "is_new": False,
                "is_deleted": False,
                "is_renamed": False,
                "seen_headers": False,
            }

        for line in diff_str.splitlines():
            if current_hunk is not None and (current_hunk["old_remaining"] or current_hunk["new_remaining"]):
                DiffParser._consume_hunk_line(current_hunk, line)
                continue

            if line.startswith("\\"):
                # "\ No newline at end of file" after the last line of a hunk
                continue

            if line.startswith("diff --git "):
                source, target = DiffParser._split_git_header(line)
                open_file(source, target)
                continue

            if line.startswith("--- "):
                if current_file is None or current_file["hunks"] or current_hunk is not None \
                        or current_file["seen_headers"]:
                    open_file()
                current_file["source"] = _resolve_path(line[4:])
                current_file["seen_headers"] = True
                if current_file["source"] is None:
                    current_file["is_new"] = True
                continue

            if line.startswith("+++ "):
                if current_file is None:
                    open_file()
                current_file["target"] = _resolve_path(line[4:])
                current_file["seen_headers"] = True
                if current_file["target"] is None:
                    current_file["is_deleted"] = True
                continue

            if line.startswith("@@"):
                if current_file is None:
                    raise MalformedDiffError(f"Hunk header without a file header: {line!r}")
                close_hunk()
                current_hunk = DiffParser._open_hunk(line)
                continue

            if current_file is None:
                continue

            if line.startswith("new file mode"):
                current_file["is_new"] = True
            elif line.startswith("deleted file mode"):
                current_file["is_deleted"] = True
            elif line.startswith("rename from "):
                current_file["is_renamed"] = True
                current_file["source"] = line[len("rename from "):].strip()
            elif line.startswith("rename to "):
                current_file["is_renamed"] = True
                current_file["target"] = line[len("rename to "):].strip()
            # index, mode, similarity and "Binary files ... differ" lines carry no hunks

        close_file()
        return files

    @staticmethod
    def _split_git_header(line: str) -> Tuple[Optional[str], Optional[str]]:
        """Extract the a/ and b/ paths from a ``diff --git`` line."""
        rest = line[len("diff --git "):].strip()
        separator = rest.rfind(" b/")
        if rest.startswith("a/") and separator > 0:
            return rest[2:separator], rest[separator + 3:]
        return None, None

    @staticmethod
    def _open_hunk(header: str) -> Dict[str, Any]:
        match = HUNK_HEADER_RE.match(header)
        if not match:
            raise MalformedDiffError(f"Invalid diff hunk header: {header!r}")

        old_start = int(match.group(1))
        old_length = int(match.group(2)) if match.group(2) is not None else 1
        new_start = int(match.group(3))
        new_length = int(match.group(4)) if match.group(4) is not None else 1

        # Line numbers start at 1; a zero start is only valid for an empty side.
        if (old_start == 0 and old_length > 0) or (new_start == 0 and new_length > 0):
            raise MalformedDiffError(f"Invalid line numbering in hunk header: {header!r}")

        return {
            "header": header,
            "old_start": old_start,
            "old_length": old_length,
            "new_start": new_start,
            "new_length": new_length,
            "old_line": old_start,
            "new_line": new_start,
            "old_remaining": old_length,
            "new_remaining": new_length,
            "lines": [],
        }

    @staticmethod
    def _consume_hunk_line(hunk: Dict[str, Any], line: str) -> None:
        if line.startswith("\\"):
            return

        if line.startswith("+"):
            hunk["new_remaining"] -= 1
            diff_line = DiffLine(content=line, new_number=hunk["new_line"])
            hunk["new_line"] += 1
        elif line.startswith("-"):
            hunk["old_remaining"] -= 1
            diff_line = DiffLine(content=line, old_number=hunk["old_line"])
            hunk["old_line"] += 1
        else:
            hunk["old_remaining"] -= 1
            hunk["new_remaining"] -= 1
            diff_line = DiffLine(content=line, old_number=hunk["old_line"], new_number=hunk["new_line"])
            hunk["old_line"] += 1
            hunk["new_line"] += 1

        if hunk["old_remaining"] < 0 or hunk["new_remaining"] < 0:
            raise MalformedDiffError(
                f"Hunk {hunk['header']!r} has more lines than its header declares"
            )
        hunk["lines"].append(diff_line)
