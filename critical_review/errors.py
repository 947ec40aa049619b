#!/usr/bin/env python3


class ReviewBotError(Exception):
    """Base class for all errors raised by the review bot."""


class ConfigurationError(ReviewBotError):
    """Required configuration is missing or invalid."""


class MalformedDiffError(ReviewBotError):
    """The diff text cannot be split into files, hunks and numbered lines."""


class BackendError(ReviewBotError):
    """The completion backend did not produce a usable result."""


class BackendUnavailableError(BackendError):
    """The completion backend could not be reached or returned an error status."""


class BackendMalformedResponseError(BackendError):
    """The completion backend answered with text that is not valid JSON."""


class UnresolvableTargetPathError(ReviewBotError):
    """A finding cannot be anchored because its file has no target path."""


class MalformedFindingLineNumberError(ReviewBotError):
    """A finding's line number is not an integer."""

    def __init__(self, token):
        super().__init__(f"Invalid line number in finding: {token!r}")
        self.token = token


class PlatformError(ReviewBotError):
    """Pull request metadata or diff could not be retrieved."""


class SubmissionError(ReviewBotError):
    """The batched review was rejected by the platform."""
