"""Configuration tests."""

from datetime import timedelta

import pytest

from virtuebox import config
from virtuebox.app import create_app
from virtuebox.core.exceptions import ConfigurationError


class TestParseDuration:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("7d", timedelta(days=7)),
            ("12h", timedelta(hours=12)),
            ("30m", timedelta(minutes=30)),
            ("45s", timedelta(seconds=45)),
            ("3600", timedelta(seconds=3600)),
            (" 2d ", timedelta(days=2)),
        ],
    )
    def test_valid(self, value, expected):
        assert config.parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "7w", "d", "-1d", "0", "1.5h"])
    def test_invalid(self, value):
        with pytest.raises(ConfigurationError):
            config.parse_duration(value)

    def test_default_lifetime_is_seven_days(self):
        assert config.get_token_lifetime() == timedelta(days=7)


class TestDatabaseUrl:
    def test_required(self, monkeypatch):
        monkeypatch.setattr(config, "DATABASE_URL", None)
        with pytest.raises(ConfigurationError):
            config.require_database_url()

    def test_app_fails_fast_without_url(self, monkeypatch):
        monkeypatch.setattr(config, "DATABASE_URL", "")
        with pytest.raises(ConfigurationError):
            create_app()
