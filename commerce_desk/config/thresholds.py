"""
Metric definitions and threshold policy.

The threshold table is the single source of truth for which metrics the
desk recognizes, which synonyms the extractor accepts, and when a value is
at risk. It ships as a default policy and can be replaced from a JSON file
(see Settings.thresholds_file).

Values are percentages except Rating, which is out of 5.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from commerce_desk.models.schemas import TaskPriority


class ThresholdDirection(str, Enum):
    """Which side of the limit is unhealthy."""
    FLOOR = "floor"      # value below limit is a problem
    CEILING = "ceiling"  # value above limit is a problem


class MetricDefinition(BaseModel):
    """A recognized metric and the phrases that name it."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Canonical metric name")
    synonyms: tuple[str, ...] = Field(..., min_length=1)
    strict_synonyms: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Everyday words that only name the metric with an explicit ':', '=', 'is' or 'was', or a % value",
    )
    unit: str = Field(default="%", description="Display unit")

    @model_validator(mode="after")
    def check_strict_synonyms(self) -> "MetricDefinition":
        """Strict synonyms must be listed synonyms."""
        extra = set(self.strict_synonyms) - set(self.synonyms)
        if extra:
            raise ValueError(f"Strict synonyms are not listed as synonyms: {sorted(extra)}")
        return self

    def format_value(self, value: float) -> str:
        """Render a value with its unit."""
        number = f"{value:g}"
        if self.unit == "%":
            return f"{number}%"
        return f"{number}{self.unit}"


class ThresholdRule(BaseModel):
    """One threshold that turns a metric value into a task."""

    model_config = ConfigDict(frozen=True)

    metric: str
    tier: str = Field(..., description="Breach tier, part of the task id")
    direction: ThresholdDirection
    limit: float = Field(..., gt=0)
    title: str
    action: str
    tags: tuple[str, ...] = Field(default_factory=tuple)
    high_deviation: float = Field(default=0.5, gt=0)
    medium_deviation: float = Field(default=0.2, gt=0)

    @model_validator(mode="after")
    def check_bands(self) -> "ThresholdRule":
        """High band must start at or above the medium band."""
        if self.high_deviation < self.medium_deviation:
            raise ValueError("high_deviation must be >= medium_deviation")
        return self

    def deviation(self, value: float) -> float:
        """Relative distance past the limit; positive means breached."""
        if self.direction == ThresholdDirection.FLOOR:
            return (self.limit - value) / self.limit
        return (value - self.limit) / self.limit

    def is_breached(self, value: float) -> bool:
        return self.deviation(value) > 0

    def priority_for(self, value: float) -> TaskPriority:
        """Map deviation to priority: severe deviation is high."""
        deviation = self.deviation(value)
        if deviation >= self.high_deviation:
            return TaskPriority.HIGH
        if deviation >= self.medium_deviation:
            return TaskPriority.MEDIUM
        return TaskPriority.LOW


class ThresholdPolicy(BaseModel):
    """Recognized metrics plus the threshold table applied to them."""

    metrics: list[MetricDefinition]
    rules: list[ThresholdRule]

    @model_validator(mode="after")
    def check_rule_metrics(self) -> "ThresholdPolicy":
        """Every rule must reference a defined metric."""
        names = {m.name for m in self.metrics}
        unknown = [r.metric for r in self.rules if r.metric not in names]
        if unknown:
            raise ValueError(f"Rules reference unknown metrics: {unknown}")
        return self

    def get_metric(self, name: str) -> Optional[MetricDefinition]:
        for metric in self.metrics:
            if metric.name == name:
                return metric
        return None

    def rules_for(self, metric: str) -> list[ThresholdRule]:
        return [r for r in self.rules if r.metric == metric]

    def format_value(self, metric: str, value: float) -> str:
        definition = self.get_metric(metric)
        if definition is None:
            return f"{value:g}"
        return definition.format_value(value)

    @classmethod
    def from_file(cls, path: Path) -> "ThresholdPolicy":
        """Load a policy from a JSON file."""
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))


DEFAULT_METRICS = [
    MetricDefinition(
        name="CTR",
        synonyms=("ctr", "click through rate", "click-through rate", "clickthrough rate"),
    ),
    MetricDefinition(
        name="Conversion",
        synonyms=("conversion rate", "conversion", "conv rate", "cvr"),
    ),
    MetricDefinition(
        name="Cancellation Rate",
        synonyms=("cancellation rate", "cancel rate", "cancellations", "cancellation"),
        strict_synonyms=("cancellations", "cancellation"),
    ),
    MetricDefinition(
        name="Return Rate",
        synonyms=("return rate", "returns rate", "returns", "return"),
        strict_synonyms=("returns", "return"),
    ),
    MetricDefinition(
        name="ACoS",
        synonyms=("acos", "advertising cost of sale", "advertising cost of sales"),
    ),
    MetricDefinition(
        name="Late Dispatch Rate",
        synonyms=("late dispatch rate", "late shipment rate", "late dispatch", "ldr"),
    ),
    MetricDefinition(
        name="Rating",
        synonyms=("seller rating", "average rating", "avg rating", "rating"),
        unit="/5",
    ),
]

DEFAULT_RULES = [
    ThresholdRule(
        metric="CTR",
        tier="below-floor",
        direction=ThresholdDirection.FLOOR,
        limit=1.0,
        title="Refresh main images and titles to lift CTR",
        action="Swap in a white-background hero image, front-load the key attribute in the title and re-check search placement.",
        tags=("ctr", "creatives", "listing-quality"),
    ),
    ThresholdRule(
        metric="Conversion",
        tier="below-floor",
        direction=ThresholdDirection.FLOOR,
        limit=2.0,
        title="Tighten listing content and pricing to improve conversion",
        action="Rewrite bullets around buyer questions, add size/spec detail and benchmark price against the top three competitors.",
        tags=("content", "conversion", "pricing"),
    ),
    ThresholdRule(
        metric="Cancellation Rate",
        tier="above-ceiling",
        direction=ThresholdDirection.CEILING,
        limit=2.5,
        title="Fix inventory sync to cut cancellations",
        action="Reconcile stock across marketplaces daily and pause SKUs that are out of stock at the warehouse.",
        tags=("cancellation", "inventory", "operations"),
    ),
    ThresholdRule(
        metric="Return Rate",
        tier="above-ceiling",
        direction=ThresholdDirection.CEILING,
        limit=5.0,
        title="Audit size charts and product accuracy to reduce returns",
        action="Review return reasons, correct size charts and colour descriptions, and tighten QC before dispatch.",
        tags=("quality", "returns", "sizing"),
    ),
    ThresholdRule(
        metric="ACoS",
        tier="above-ceiling",
        direction=ThresholdDirection.CEILING,
        limit=30.0,
        title="Trim wasted ad spend to bring ACoS down",
        action="Negate non-converting search terms, lower bids on low-margin SKUs and shift budget to proven campaigns.",
        tags=("acos", "advertising", "budget"),
    ),
    ThresholdRule(
        metric="Late Dispatch Rate",
        tier="above-ceiling",
        direction=ThresholdDirection.CEILING,
        limit=4.0,
        title="Tighten dispatch SLAs to stop late shipments",
        action="Move the packing cut-off earlier, confirm courier pickups and raise handling time on slow SKUs.",
        tags=("dispatch", "logistics", "operations"),
    ),
    ThresholdRule(
        metric="Rating",
        tier="below-floor",
        direction=ThresholdDirection.FLOOR,
        limit=4.0,
        title="Recover seller rating through review follow-ups",
        action="Resolve open complaints, request feedback from happy buyers and fix the defects named in recent reviews.",
        tags=("customer-experience", "rating", "reviews"),
        high_deviation=0.25,
        medium_deviation=0.1,
    ),
]

DEFAULT_THRESHOLD_POLICY = ThresholdPolicy(metrics=DEFAULT_METRICS, rules=DEFAULT_RULES)


__all__ = [
    "ThresholdDirection",
    "MetricDefinition",
    "ThresholdRule",
    "ThresholdPolicy",
    "DEFAULT_METRICS",
    "DEFAULT_RULES",
    "DEFAULT_THRESHOLD_POLICY",
]
