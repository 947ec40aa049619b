#!/usr/bin/env python3

from critical_review.models import DiffFile, DiffHunk, PRDetails

RESPONSE_FORMAT = '{"reviews": [{"lineNumber": <line_number>, "reviewComment": "<review comment>"}]}'

REVIEW_RULES = f"""Your task is to review pull requests for CRITICAL issues only.

CRITICAL RULES:
- ONLY report bugs that would cause: crashes, data loss, security vulnerabilities, or severe performance issues
- If there are no critical issues, return empty array: {{"reviews": []}}
- Response format: {RESPONSE_FORMAT}
- Write comments in GitHub Markdown format
- Be extremely selective - when in doubt, do NOT comment"""

NEVER_COMMENT_ON = """NEVER comment on:
- Code style, formatting, or organization
- Adding or updating comments
- Import paths or organization
- Variable/function naming conventions
- Whether variables/functions are used elsewhere
- Minor refactoring or code duplication
- Missing TypeScript types
- Console.log or debug statements
- Missing error handling (unless causes crashes)
- Performance optimizations (unless severe impact)
- Missing input validation (unless critical security risk)
- Async/await vs promises style choices
- React component structure or hooks usage
- CSS or styling issues"""

CRITICAL_ISSUES = """ONLY comment on CRITICAL issues:

Backend Critical Issues:
- SQL injection vulnerabilities
- NoSQL injection attacks
- Authentication/authorization bypasses
- Exposed API keys, passwords, or secrets
- Unvalidated file uploads leading to RCE
- CORS misconfigurations exposing sensitive data
- Race conditions in database transactions
- Memory leaks in server processes
- Infinite loops or recursion without exit
- Null/undefined access causing server crashes

Frontend Critical Issues:
- XSS (Cross-Site Scripting) vulnerabilities
- Exposed sensitive data in client code
- Infinite loops crashing the browser
- Memory leaks in React components (uncleared intervals/listeners)
- Null/undefined access causing app crashes
- localStorage/sessionStorage security issues with sensitive data
- Broken authentication flows
- API calls exposing secrets in request headers/body
- Critical accessibility issues (keyboard traps)"""


def render_hunk(hunk: DiffHunk) -> str:
    """Render the hunk header followed by one ``<line number> <content>`` row per line."""
    rows = [hunk.header]
    rows.extend(f"{line.display_number} {line.content}" for line in hunk.lines)
    return "\n".join(rows)


def build_prompt(diff_file: DiffFile, hunk: DiffHunk, pr_details: PRDetails, title_prefix: str = "") -> str:
    """
    Creates the prompt for one hunk of a changed file.

    The output only depends on the arguments, so the same hunk always
    produces the same prompt.

    Args:
        diff_file: File the hunk belongs to
        hunk: Hunk to review
        pr_details: Pull request details
        title_prefix: Text put in front of the pull request title

    Returns:
        Prompt string for the completion backend
    """
    return f"""{REVIEW_RULES}

{NEVER_COMMENT_ON}

{CRITICAL_ISSUES}

Review the following code diff in the file "{diff_file.path}" and take the pull request title and description into account when writing the response.

Pull request title: {title_prefix}{pr_details.title}
Pull request description:

---
{pr_details.description}
---

Git diff to review:

```diff
{render_hunk(hunk)}
```
"""
