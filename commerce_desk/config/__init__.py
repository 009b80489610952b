"""Configuration: settings, marketplace rule tables and threshold policy."""

from commerce_desk.config.marketplaces import (
    MARKETPLACE_PROFILES,
    MarketplaceProfile,
    get_profile,
    marketplace_label,
)
from commerce_desk.config.settings import Settings, get_settings
from commerce_desk.config.thresholds import (
    DEFAULT_THRESHOLD_POLICY,
    MetricDefinition,
    ThresholdDirection,
    ThresholdPolicy,
    ThresholdRule,
)

__all__ = [
    "Settings",
    "get_settings",
    "MARKETPLACE_PROFILES",
    "MarketplaceProfile",
    "get_profile",
    "marketplace_label",
    "DEFAULT_THRESHOLD_POLICY",
    "MetricDefinition",
    "ThresholdDirection",
    "ThresholdPolicy",
    "ThresholdRule",
]
