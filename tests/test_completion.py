from unittest.mock import MagicMock

import pytest
from openai import OpenAIError

from conftest import completion_response
from critical_review.completion import (
    DEFAULT_MODEL_PROFILE,
    CompletionClient,
    build_request_params,
    get_model_profile,
    parse_review_response,
    strip_code_fence,
)
from critical_review.errors import BackendMalformedResponseError


def test_model_profiles_are_looked_up_by_name() -> None:
    assert get_model_profile("o3-mini") == {"max_completion_tokens": 1400, "json_mode": True}
    assert get_model_profile("gpt-4")["temperature"] == 0.1
    assert get_model_profile("some-new-model") == DEFAULT_MODEL_PROFILE


def test_model_profile_is_a_copy() -> None:
    profile = get_model_profile("unknown")
    profile["temperature"] = 0

    assert DEFAULT_MODEL_PROFILE["temperature"] == 1


def test_build_request_params_json_mode() -> None:
    params = build_request_params("o3-mini", get_model_profile("o3-mini"))

    assert params == {
        "model": "o3-mini",
        "max_completion_tokens": 1400,
        "response_format": {"type": "json_object"},
    }
    assert "response_format" not in build_request_params("gpt-4", get_model_profile("gpt-4"))


@pytest.mark.parametrize(
    "text",
    [
        '{"reviews": []}',
        '  {"reviews": []}\n',
        '```json\n{"reviews": []}\n```',
        '```JSON\n{"reviews": []}\n```',
        '```\n{"reviews": []}\n```',
    ],
)
def test_strip_code_fence(text: str) -> None:
    assert strip_code_fence(text) == '{"reviews": []}'


def test_parse_fenced_response() -> None:
    text = '```json\n{"reviews": [{"lineNumber": "10", "reviewComment": "Null check missing"}]}\n```'

    findings = parse_review_response(text)

    assert [(f.lineNumber, f.reviewComment) for f in findings] == [("10", "Null check missing")]


def test_numeric_line_number_is_kept_as_text() -> None:
    findings = parse_review_response('{"reviews": [{"lineNumber": 7, "reviewComment": "Leak"}]}')

    assert findings[0].lineNumber == "7"


@pytest.mark.parametrize("text", ["{}", '{"reviews": null}', '{"reviews": "none"}', "[]", '{"other": 1}'])
def test_valid_json_without_reviews_means_no_findings(text: str) -> None:
    assert parse_review_response(text) == []


def test_malformed_entries_are_skipped() -> None:
    text = '{"reviews": [{"lineNumber": "3"}, "oops", {"lineNumber": "4", "reviewComment": "SQL injection"}]}'

    findings = parse_review_response(text)

    assert [f.lineNumber for f in findings] == ["4"]


def test_invalid_json_raises() -> None:
    with pytest.raises(BackendMalformedResponseError):
        parse_review_response("I found no critical issues.")


def test_review_sends_one_system_message(openai_client: MagicMock, completion_client: CompletionClient) -> None:
    assert completion_client.review("PROMPT") == []

    openai_client.chat.completions.create.assert_called_once()
    kwargs = openai_client.chat.completions.create.call_args.kwargs
    assert kwargs["messages"] == [{"role": "system", "content": "PROMPT"}]
    assert kwargs["model"] == "gpt-4"
    assert kwargs["timeout"] == 5
    assert kwargs["max_completion_tokens"] == 2048


def test_review_returns_none_on_unparsable_text(openai_client: MagicMock, completion_client: CompletionClient) -> None:
    openai_client.chat.completions.create.return_value = completion_response("not json at all")

    assert completion_client.review("PROMPT") is None


def test_review_returns_none_on_backend_error(openai_client: MagicMock, completion_client: CompletionClient) -> None:
    openai_client.chat.completions.create.side_effect = OpenAIError("connection refused")

    assert completion_client.review("PROMPT") is None


def test_empty_content_means_no_findings(openai_client: MagicMock, completion_client: CompletionClient) -> None:
    openai_client.chat.completions.create.return_value = completion_response(None)

    assert completion_client.review("PROMPT") == []


def test_from_config_uses_model_name() -> None:
    client = CompletionClient.from_config({"openai_api_key": "sk-test", "openai_api_model": "o3-mini"})

    assert client.model == "o3-mini"
    assert client.profile["json_mode"] is True


def test_from_config_uses_azure_deployment() -> None:
    client = CompletionClient.from_config({
        "azure_openai_endpoint": "https://example.openai.azure.com",
        "azure_openai_key": "key",
        "azure_openai_api_version": "2024-06-01",
        "azure_openai_deployment": "review-deployment",
        "request_timeout": 10.0,
    })

    assert client.model == "review-deployment"
    assert client.timeout == 10.0
    assert client.profile == DEFAULT_MODEL_PROFILE
