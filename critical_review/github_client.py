#!/usr/bin/env python3

import logging
from typing import Any, Dict, Sequence

import requests
from github import Auth, Github, GithubException

from critical_review.errors import PlatformError, SubmissionError
from critical_review.models import PRDetails, ReviewComment

logger = logging.getLogger(__name__)

DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"


class GitHubClient:
    """Handles all interactions with GitHub API."""

    def __init__(self, github_token: str, api_url: str = "https://api.github.com", timeout: float = 30.0):
        """
        Initialize GitHub client with authentication token.

        Args:
            github_token: GitHub authentication token
            api_url: Base URL of the GitHub REST API
            timeout: Timeout in seconds for raw diff requests
        """
        self.github_token = github_token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.gh = Github(auth=Auth.Token(github_token), base_url=self.api_url)

    def get_pr_details(self, event_data: Dict[str, Any]) -> PRDetails:
        """
        Retrieves details of the pull request from a GitHub Actions event payload.

        Args:
            event_data: Parsed content of the file at GITHUB_EVENT_PATH

        Returns:
            PRDetails object containing PR information

        Raises:
            PlatformError: If the payload has no pull request or the API call fails
        """
        try:
            repo_full_name = event_data["repository"]["full_name"]
            pull_number = event_data.get("number") or event_data["pull_request"]["number"]
        except (KeyError, TypeError) as e:
            raise PlatformError(f"Event payload does not describe a pull request: missing {e}") from e

        owner, repo = repo_full_name.split("/", 1)
        try:
            pr = self.gh.get_repo(repo_full_name).get_pull(pull_number)
        except GithubException as e:
            raise PlatformError(f"Failed to get pull request {repo_full_name}#{pull_number}: {e}") from e

        return PRDetails(owner, repo, pull_number, pr.title or "", pr.body or "")

    def get_diff(self, owner: str, repo: str, pull_number: int) -> str:
        """
        Fetches the diff of the pull request from GitHub API.

        Args:
            owner: Repository owner
            repo: Repository name
            pull_number: Pull request number

        Returns:
            String containing the diff
        """
        logger.info("Attempting to get diff for: %s/%s PR#%s", owner, repo, pull_number)
        return self._get_raw_diff(f"{self.api_url}/repos/{owner}/{repo}/pulls/{pull_number}")

    def get_compare_diff(self, owner: str, repo: str, base: str, head: str) -> str:
        """
        Fetches the diff between two commits, used when new commits are pushed to a PR.

        Args:
            owner: Repository owner
            repo: Repository name
            base: Commit the PR head pointed to before the push
            head: Commit the PR head points to after the push

        Returns:
            String containing the diff
        """
        logger.info("Attempting to get diff for: %s/%s %s...%s", owner, repo, base, head)
        return self._get_raw_diff(f"{self.api_url}/repos/{owner}/{repo}/compare/{base}...{head}")

    def _get_raw_diff(self, url: str) -> str:
        headers = {
            'Authorization': f'Bearer {self.github_token}',
            'Accept': DIFF_MEDIA_TYPE,
        }
        try:
            response = requests.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise PlatformError(f"Failed to get diff from {url}: {e}") from e

        if response.status_code != 200:
            raise PlatformError(
                f"Failed to get diff from {url}. Status code: {response.status_code}, response: {response.text}"
            )

        logger.info("Retrieved diff length: %d", len(response.text))
        return response.text

    def create_review(
            self,
            owner: str,
            repo: str,
            pull_number: int,
            comments: Sequence[ReviewComment],
            body: str = "Code Reviewer Comments",
    ) -> None:
        """
        Submits the review comments to the GitHub API as a single review.

        Args:
            owner: Repository owner
            repo: Repository name
            pull_number: Pull request number
            comments: Comments to create
            body: Body of the review

        Raises:
            SubmissionError: If GitHub rejects the review
        """
        logger.info("Attempting to create %d review comments", len(comments))
        try:
            pr = self.gh.get_repo(f"{owner}/{repo}").get_pull(pull_number)
            review = pr.create_review(
                body=body,
                comments=[comment.to_dict() for comment in comments],
                event="COMMENT",
            )
        except GithubException as e:
            raise SubmissionError(f"Error creating review: {e}") from e

        logger.info("Review created successfully with ID: %s", review.id)
