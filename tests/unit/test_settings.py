"""
Unit tests for Settings.

Tests cover:
- Stock adjustment defaults and backoff conversion
- Rejection of out-of-range tuning values and unknown timezones
- Database URL derivation from the data directory
"""

import pydantic
import pytest

from stockledger.config.settings import Settings


class TestSettings:
    """Tests for Settings validation and derived values."""

    def test_adjustment_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.adjust_max_attempts == 3
        assert settings.adjust_backoff_seconds == pytest.approx(0.1)
        assert settings.aggregate_cache_ttl_seconds == 30

    def test_zero_attempts_rejected(self):
        """
        GIVEN adjust_max_attempts of 0
        WHEN Settings is built
        THEN validation fails
        """
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None, adjust_max_attempts=0)

    def test_unknown_timezone_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None, timezone="Mars/Olympus")

    def test_database_url_derived_from_data_dir(self, tmp_path):
        settings = Settings(_env_file=None, data_dir=tmp_path / "data")

        assert settings.get_database_url() == f"sqlite:///{tmp_path / 'data' / 'stockledger.db'}"
        assert (tmp_path / "data").is_dir()

    def test_explicit_database_url_wins(self, tmp_path):
        settings = Settings(_env_file=None, data_dir=tmp_path, database_url="sqlite://")

        assert settings.get_database_url() == "sqlite://"
