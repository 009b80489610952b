import pytest
from pydantic import ValidationError

from commerce_desk.config.marketplaces import MARKETPLACE_PROFILES, get_profile, marketplace_label
from commerce_desk.config.thresholds import (
    DEFAULT_THRESHOLD_POLICY,
    MetricDefinition,
    ThresholdDirection,
    ThresholdPolicy,
    ThresholdRule,
)
from commerce_desk.models.schemas import MarketplaceKey, TaskPriority


def rule(**overrides):
    data = dict(
        metric="CTR", tier="below-floor", direction=ThresholdDirection.FLOOR,
        limit=1.0, title="t", action="a",
    )
    data.update(overrides)
    return ThresholdRule(**data)


def test_floor_and_ceiling_deviation():
    assert rule().deviation(0.5) == pytest.approx(0.5)
    assert rule().is_breached(0.99)
    assert not rule().is_breached(1.0)
    ceiling = rule(direction=ThresholdDirection.CEILING, limit=2.5)
    assert ceiling.deviation(5.0) == pytest.approx(1.0)
    assert not ceiling.is_breached(2.5)


def test_priority_for():
    assert rule().priority_for(0.4) == TaskPriority.HIGH
    assert rule().priority_for(0.75) == TaskPriority.MEDIUM
    assert rule().priority_for(0.95) == TaskPriority.LOW


def test_rule_bands_must_be_ordered():
    with pytest.raises(ValidationError):
        rule(high_deviation=0.1, medium_deviation=0.3)


def test_rule_limit_must_be_positive():
    with pytest.raises(ValidationError):
        rule(limit=0)


def test_policy_rejects_rules_for_unknown_metrics():
    with pytest.raises(ValidationError):
        ThresholdPolicy(metrics=[], rules=[rule()])


def test_format_value():
    assert DEFAULT_THRESHOLD_POLICY.format_value("CTR", 0.9) == "0.9%"
    assert DEFAULT_THRESHOLD_POLICY.format_value("Rating", 4.0) == "4/5"
    assert DEFAULT_THRESHOLD_POLICY.format_value("Unknown", 3.0) == "3"


def test_every_marketplace_has_a_profile():
    assert set(MARKETPLACE_PROFILES) == set(MarketplaceKey)
    assert marketplace_label("meesho") == "Meesho"
    assert get_profile(MarketplaceKey.MYNTRA).bullet_limit == 8


def test_profiles_have_distinct_bullet_caps():
    caps = [p.bullet_limit for p in MARKETPLACE_PROFILES.values()]
    assert len(set(caps)) == len(caps)


def test_strict_synonyms_must_be_listed():
    with pytest.raises(ValidationError):
        MetricDefinition(name="Return Rate", synonyms=("return rate",), strict_synonyms=("return",))
