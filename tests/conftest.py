"""Pytest fixtures for test suite."""

import pytest
from decimal import Decimal
from pathlib import Path
from typing import Any

from rulify import RuleEngine, RuleLoader
from rulify.core.config import get_settings


# =============================================================================
# Core Fixtures
# =============================================================================


@pytest.fixture
def rules_dir() -> Path:
    """Path to the bundled rule documents."""
    return Path(__file__).parent.parent / "rulify" / "rules" / "data"


@pytest.fixture
def travel_rules_file(rules_dir: Path) -> Path:
    return rules_dir / "travel_package.json"


@pytest.fixture
def rule_loader(rules_dir: Path) -> RuleLoader:
    return RuleLoader(rules_dir)


@pytest.fixture
def travel_engine(rule_loader: RuleLoader, travel_rules_file: Path) -> RuleEngine:
    """Engine loaded with the travel package rules."""
    engine = RuleEngine()
    for rule in rule_loader.load_file(travel_rules_file):
        engine.add_rule(rule)
    return engine


@pytest.fixture
def booking() -> dict[str, Any]:
    """Booking fact-set for the travel package rules."""
    return {
        "stay_days": 7,
        "weekdays": 5,
        "weekends": 2,
        "base_rate_weekday": Decimal("100"),
        "base_rate_weekend": Decimal("150"),
        "start_day": "Monday",
        "adults": 3,
        "flight_price_adult": Decimal("500"),
        "has_flight": True,
        "has_transfer": True,
        "transfer_price": Decimal("50"),
        "children": [3, 8, 14],
        "total_package": Decimal("3000"),
    }


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate tests from RULIFY_* variables and the settings cache."""
    for name in ("RULIFY_RULES_FILE", "RULIFY_RULES_DIR", "RULIFY_DECIMAL_PRECISION"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
