"""Tests for Settings.from_env."""

import pytest

from topic_sentiment.shared.exceptions import ConfigurationError
from topic_sentiment.shared.settings import (
    DEFAULT_EMBEDDING_MODEL,
    DEFAULT_USER_AGENT,
    Settings,
)


class TestDefaults:
    def test_empty_environment(self):
        settings = Settings.from_env({})
        assert settings.gnews_api_key is None
        assert settings.reddit_client_id is None
        assert settings.reddit_client_secret is None
        assert settings.reddit_user_agent == DEFAULT_USER_AGENT == "sentiment-dashboard/1.0"
        assert settings.embedding_model == DEFAULT_EMBEDDING_MODEL
        assert settings.http_timeout == 30.0
        assert settings.max_results == 50
        assert settings.api_port == 8000

    def test_blank_values_are_missing(self):
        settings = Settings.from_env({"GNEWS_API_KEY": "  ", "REDDIT_USER_AGENT": ""})
        assert settings.gnews_api_key is None
        assert settings.reddit_user_agent == DEFAULT_USER_AGENT

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("GNEWS_API_KEY", "from-os")
        assert Settings.from_env().gnews_api_key == "from-os"


class TestFromEnv:
    def test_all_values(self):
        settings = Settings.from_env(
            {
                "GNEWS_API_KEY": "gkey",
                "REDDIT_CLIENT_ID": "rid",
                "REDDIT_CLIENT_SECRET": "rsecret",
                "REDDIT_USER_AGENT": "my-agent/2.0",
                "EMBEDDING_MODEL": "sentence-transformers/paraphrase-MiniLM-L3-v2",
                "HTTP_TIMEOUT": "12.5",
                "MAX_RESULTS": "20",
                "SENTIMENT_API_HOST": "0.0.0.0",
                "SENTIMENT_API_PORT": "9000",
            }
        )
        assert settings.gnews_api_key == "gkey"
        assert settings.reddit_client_id == "rid"
        assert settings.reddit_client_secret == "rsecret"
        assert settings.reddit_user_agent == "my-agent/2.0"
        assert settings.embedding_model == "sentence-transformers/paraphrase-MiniLM-L3-v2"
        assert settings.http_timeout == 12.5
        assert settings.max_results == 20
        assert settings.api_host == "0.0.0.0"
        assert settings.api_port == 9000

    @pytest.mark.parametrize(
        "name,value",
        [
            ("HTTP_TIMEOUT", "soon"),
            ("HTTP_TIMEOUT", "0"),
            ("HTTP_TIMEOUT", "-1"),
            ("HTTP_TIMEOUT", "nan"),
            ("HTTP_TIMEOUT", "inf"),
            ("MAX_RESULTS", "0"),
            ("MAX_RESULTS", "2.5"),
            ("SENTIMENT_API_PORT", "http"),
        ],
    )
    def test_invalid_numbers(self, name, value):
        with pytest.raises(ConfigurationError, match=name):
            Settings.from_env({name: value})

    def test_to_dict(self):
        d = Settings(gnews_api_key="k").to_dict()
        assert d["gnews_api_key"] == "k"
        assert d["max_results"] == 50
        assert set(d) >= {"embedding_model", "http_timeout", "reddit_user_agent"}
