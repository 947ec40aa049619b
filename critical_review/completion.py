#!/usr/bin/env python3

import json
import logging
import re
from typing import Any, Dict, List, Optional

from openai import AzureOpenAI, OpenAI, OpenAIError
from pydantic import ValidationError

from critical_review.errors import BackendMalformedResponseError, BackendUnavailableError
from critical_review.models import RawFinding

logger = logging.getLogger(__name__)

# Sampling parameters per model. "json_mode" asks the API for a JSON object response.
DEFAULT_MODEL_PROFILE: Dict[str, Any] = {
    "temperature": 1,
    "max_completion_tokens": 3000,
    "top_p": 1,
    "frequency_penalty": 0,
    "presence_penalty": 0,
    "json_mode": False,
}

MODEL_PROFILES: Dict[str, Dict[str, Any]] = {
    # o3-mini supports only a few options
    "o3-mini": {
        "max_completion_tokens": 1400,
        "json_mode": True,
    },
    "gpt-4": {
        "temperature": 0.1,
        "max_completion_tokens": 2048,
        "top_p": 0.8,
        "frequency_penalty": 0.6,
        "presence_penalty": 0.5,
        "json_mode": False,
    },
}

FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
FENCE_CLOSE_RE = re.compile(r"\s*```$")


def get_model_profile(model: str) -> Dict[str, Any]:
    """Return a copy of the parameter profile for a model, or the default profile."""
    return dict(MODEL_PROFILES.get(model, DEFAULT_MODEL_PROFILE))


def build_request_params(model: str, profile: Dict[str, Any]) -> Dict[str, Any]:
    """Turn a parameter profile into keyword arguments for ``chat.completions.create``."""
    params = {key: value for key, value in profile.items() if key != "json_mode"}
    params["model"] = model
    if profile.get("json_mode"):
        params["response_format"] = {"type": "json_object"}
    return params


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence from a model response."""
    cleaned = text.strip()
    cleaned = FENCE_OPEN_RE.sub("", cleaned)
    cleaned = FENCE_CLOSE_RE.sub("", cleaned)
    return cleaned.strip()


def parse_review_response(text: str) -> List[RawFinding]:
    """
    Parses the model output into findings.

    A valid JSON document without a usable "reviews" array means there are
    no findings. Entries that are not well formed findings are skipped.

    Args:
        text: Raw text returned by the model

    Returns:
        List of RawFinding objects, possibly empty

    Raises:
        BackendMalformedResponseError: If the text is not valid JSON
    """
    cleaned = strip_code_fence(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise BackendMalformedResponseError(f"Response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        return []
    reviews = data.get("reviews")
    if not isinstance(reviews, list):
        return []

    findings = []
    for review in reviews:
        try:
            findings.append(RawFinding.model_validate(review))
        except ValidationError as e:
            logger.warning("Skipping malformed review entry %r: %s", review, e)
    return findings


class CompletionClient:
    """Sends review prompts to an OpenAI chat completion model."""

    def __init__(self, client: OpenAI, model: str, timeout: float = 60.0):
        self.client = client
        self.model = model
        self.timeout = timeout
        self.profile = get_model_profile(model)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CompletionClient":
        """
        Creates the client described by the configuration.

        Azure OpenAI is used when an Azure endpoint is configured, in which case
        the deployment name is sent as the model.
        """
        timeout = config.get("request_timeout", 60.0)
        if config.get("azure_openai_endpoint"):
            client = AzureOpenAI(
                azure_endpoint=config["azure_openai_endpoint"],
                api_key=config.get("azure_openai_key"),
                api_version=config.get("azure_openai_api_version"),
            )
            return cls(client, config["azure_openai_deployment"], timeout=timeout)

        client = OpenAI(api_key=config.get("openai_api_key"))
        return cls(client, config["openai_api_model"], timeout=timeout)

    def complete(self, prompt: str) -> str:
        """
        Sends one prompt and returns the text of the first choice.

        Raises:
            BackendUnavailableError: If the request fails
            BackendMalformedResponseError: If the response has no choices
        """
        params = build_request_params(self.model, self.profile)
        logger.debug("Query config for completion request: %s", params)
        try:
            response = self.client.chat.completions.create(
                messages=[{"role": "system", "content": prompt}],
                timeout=self.timeout,
                **params,
            )
        except OpenAIError as e:
            raise BackendUnavailableError(f"Completion request failed: {e}") from e

        if not response.choices:
            raise BackendMalformedResponseError("Completion response has no choices")
        return response.choices[0].message.content or "{}"

    def review(self, prompt: str) -> Optional[List[RawFinding]]:
        """
        Asks the model to review one hunk.

        Args:
            prompt: Prompt built for the hunk

        Returns:
            List of findings (possibly empty), or None when the backend gave no usable result
        """
        try:
            text = self.complete(prompt)
            logger.debug("AI response: %s", strip_code_fence(text))
            return parse_review_response(text)
        except BackendUnavailableError as e:
            logger.error("Backend unavailable: %s", e)
        except BackendMalformedResponseError as e:
            logger.error("Unusable backend response: %s", e)
        return None
