import pytest

from config import load_config, parse_exclude_patterns, validate_config
from critical_review.errors import ConfigurationError


def test_defaults() -> None:
    config = load_config({})

    assert config["exclude_patterns"] == []
    assert config["openai_api_model"] == "gpt-4"
    assert config["max_workers"] == 1
    assert config["request_timeout"] == 60.0
    assert config["title_prefix"] == ""
    assert config["review_body"] == "Code Reviewer Comments"
    assert config["github_api_url"] == "https://api.github.com"
    assert config["log_level"] == "INFO"


def test_action_inputs() -> None:
    config = load_config({
        "INPUT_GITHUB_TOKEN": "ghp_test",
        "INPUT_OPENAI_API_KEY": "sk-test",
        "INPUT_OPENAI_API_MODEL": "o3-mini",
        "INPUT_EXCLUDE": "*.lock, dist/**,,",
        "INPUT_MAX_WORKERS": "4",
        "INPUT_REQUEST_TIMEOUT": "",
        "INPUT_LOG_LEVEL": "debug",
    })

    assert config["github_token"] == "ghp_test"
    assert config["openai_api_key"] == "sk-test"
    assert config["openai_api_model"] == "o3-mini"
    assert config["exclude_patterns"] == ["*.lock", "dist/**"]
    assert config["max_workers"] == 4
    assert config["request_timeout"] == 60.0
    assert config["log_level"] == "DEBUG"


def test_parse_exclude_patterns() -> None:
    assert parse_exclude_patterns(None) == []
    assert parse_exclude_patterns("   ") == []
    assert parse_exclude_patterns("a, b") == ["a", "b"]


@pytest.mark.parametrize(
    "environ",
    [
        {"INPUT_MAX_WORKERS": "many"},
        {"INPUT_MAX_WORKERS": "0"},
        {"INPUT_REQUEST_TIMEOUT": "soon"},
        {"INPUT_REQUEST_TIMEOUT": "-1"},
        {"INPUT_LOG_LEVEL": "chatty"},
    ],
)
def test_invalid_values(environ) -> None:
    with pytest.raises(ConfigurationError):
        load_config(environ)


def test_validate_reports_missing_variables() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        validate_config(load_config({"GITHUB_TOKEN": "ghp_test"}))

    assert "GITHUB_EVENT_PATH" in str(excinfo.value)
    assert "OPENAI_API_KEY" in str(excinfo.value)


def test_validate_azure_requires_deployment() -> None:
    config = load_config({
        "GITHUB_TOKEN": "ghp_test",
        "GITHUB_EVENT_PATH": "/tmp/event.json",
        "AZURE_OPENAI_ENDPOINT": "https://example.openai.azure.com",
        "AZURE_OPENAI_KEY": "key",
        "AZURE_OPENAI_API_VERSION": "2024-06-01",
    })

    with pytest.raises(ConfigurationError, match="AZURE_OPENAI_DEPLOYMENT"):
        validate_config(config)


def test_validate_ok() -> None:
    validate_config(load_config({
        "GITHUB_TOKEN": "ghp_test",
        "GITHUB_EVENT_PATH": "/tmp/event.json",
        "OPENAI_API_KEY": "sk-test",
    }))
