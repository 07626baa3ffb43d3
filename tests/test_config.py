# tests/test_config.py
"""Tests for configuration defaults and environment overrides."""

import pytest
from pydantic import ValidationError

from feed_curator.config import _ENV_FIELDS, DEFAULT_INTERESTS, CuratorConfig


class TestDefaults:
    def test_defaults(self):
        config = CuratorConfig()
        assert config.threshold == pytest.approx(0.35)
        assert config.log_capacity == 2000
        assert config.probe_attempts == 3
        assert config.keep_alive_interval == 30.0
        assert config.reinject_grace == 0.5
        assert config.spam_keywords == ["promoted", "sponsored", "free crypto", "giveaway"]
        assert config.feed_hosts == ("x.com", "twitter.com")

    def test_spam_keywords_not_shared(self):
        a = CuratorConfig()
        a.spam_keywords.append("airdrop")
        assert "airdrop" not in CuratorConfig().spam_keywords

    def test_default_interests(self):
        assert DEFAULT_INTERESTS[:3] == ["technology", "science", "finance"]
        assert len(DEFAULT_INTERESTS) == 11


class TestValidation:
    @pytest.mark.parametrize("threshold", [-1.5, 1.01])
    def test_threshold_range(self, threshold):
        with pytest.raises(ValidationError):
            CuratorConfig(threshold=threshold)

    def test_positive_timeouts(self):
        with pytest.raises(ValidationError):
            CuratorConfig(download_timeout=0)

    def test_probe_attempts_at_least_one(self):
        with pytest.raises(ValidationError):
            CuratorConfig(probe_attempts=0)


class TestFromEnv:
    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("FEED_CURATOR_PROBE_ATTEMPTS", "5")
        monkeypatch.setenv("FEED_CURATOR_PROBE_TIMEOUT", "12.5")
        monkeypatch.setenv("FEED_CURATOR_SPAM_KEYWORDS", "Airdrop, , promo code")

        config = CuratorConfig.from_env()

        assert config.probe_attempts == 5
        assert config.probe_timeout == pytest.approx(12.5)
        assert config.spam_keywords == ["airdrop", "promo code"]

    def test_values_set_after_import(self, monkeypatch):
        monkeypatch.setenv("FEED_CURATOR_THRESHOLD", "0.5")
        monkeypatch.setenv("FEED_CURATOR_DOWNLOAD_TIMEOUT", "45")
        monkeypatch.setenv("FEED_CURATOR_AUTO_RETRY_DELAY", "15")
        monkeypatch.setenv("FEED_CURATOR_LOG_CAPACITY", "100")

        config = CuratorConfig.from_env()

        assert config.threshold == pytest.approx(0.5)
        assert config.download_timeout == pytest.approx(45.0)
        assert config.auto_retry_delay == pytest.approx(15.0)
        assert config.log_capacity == 100

    def test_invalid_value_is_rejected(self, monkeypatch):
        monkeypatch.setenv("FEED_CURATOR_THRESHOLD", "2.5")
        with pytest.raises(ValidationError):
            CuratorConfig.from_env()

    def test_no_overrides(self, monkeypatch):
        for name, _ in _ENV_FIELDS.values():
            monkeypatch.delenv(name, raising=False)
        assert CuratorConfig.from_env() == CuratorConfig()
