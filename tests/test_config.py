"""Tests for environment-driven settings."""

from decimal import Decimal

from rulify import evaluate_expression
from rulify.core.config import Settings, get_settings


class TestSettings:
    def test_defaults(self):
        settings = Settings()

        assert settings.decimal_precision == 28
        assert settings.rules_file is None
        assert settings.rules_dir is None

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("RULIFY_RULES_DIR", "/srv/rules")
        monkeypatch.setenv("RULIFY_DECIMAL_PRECISION", "10")

        settings = get_settings()

        assert settings.rules_dir == "/srv/rules"
        assert settings.decimal_precision == 10

    def test_settings_are_cached(self):
        assert get_settings() is get_settings()

    def test_precision_applies_to_arithmetic(self, monkeypatch):
        monkeypatch.setenv("RULIFY_DECIMAL_PRECISION", "5")

        assert evaluate_expression("1 / 3", {}) == Decimal("0.33333")
