"""
Metrics extractor for Commerce Desk.

Parses free-text performance snapshots ("Amazon CTR: 0.9, Conversion: 1.4")
into structured metrics. Recognition is keyword based: a known metric name
or synonym followed by a number, optionally with a percent sign. Anything
else in the text is ignored, and unmentioned metrics stay absent.
"""

import re
from typing import Optional

from commerce_desk.config.thresholds import (
    DEFAULT_THRESHOLD_POLICY,
    ThresholdDirection,
    ThresholdPolicy,
)
from commerce_desk.models.schemas import PerformanceSnapshot
from commerce_desk.utils.logger import get_logger

logger = get_logger(__name__)


NOTHING_RECOGNIZED = (
    "No recognizable metrics found. Try a format like 'CTR: 0.9, Conversion: 1.4'."
)

_SEPARATOR = r"(?P<sep>(?:\s*(?:[:=]|\bis\b|\bwas\b|\bat\b))*)\s*"
_VALUE = r"(?<![\w])(?P<value>-?\d*\.?\d+)\s*(?P<percent>%)?"
_EXPLICIT_SEPARATOR = re.compile(r"[:=]|\b(?:is|was)\b", re.IGNORECASE)


def _phrase(text: str) -> str:
    return " ".join(re.split(r"[\s_\-]+", text.strip().lower()))


def _synonym_regex(synonym: str) -> str:
    # Spaces, hyphens and underscores are interchangeable inside a phrase
    return r"[\s_\-]+".join(re.escape(word) for word in _phrase(synonym).split(" "))


def strict_phrases(policy: ThresholdPolicy) -> set[str]:
    """Synonyms that need an explicit separator or a % value to count."""
    return {_phrase(s) for metric in policy.metrics for s in metric.strict_synonyms}


def build_metric_pattern(policy: ThresholdPolicy) -> tuple[re.Pattern, dict[str, str]]:
    """
    Compile the scanning regex for a policy.

    Returns the pattern and a lookup from lowercase synonym to metric name.
    Longer synonyms are tried first so "return rate" beats "return".
    """
    lookup: dict[str, str] = {}
    for metric in policy.metrics:
        for synonym in metric.synonyms:
            lookup[_phrase(synonym)] = metric.name

    alternatives = sorted(lookup, key=len, reverse=True)
    names = "|".join(_synonym_regex(s) for s in alternatives)
    pattern = re.compile(
        rf"(?<![\w])(?P<name>{names})(?![\w]){_SEPARATOR}{_VALUE}",
        re.IGNORECASE,
    )
    return pattern, lookup


def parse_metrics(text: str, policy: ThresholdPolicy = DEFAULT_THRESHOLD_POLICY) -> dict[str, float]:
    """
    Scan text for metric/value pairs.

    When a metric is mentioned more than once, the last value wins. Values
    keep their sign. Strict synonyms ("return 10 units") are skipped unless
    written as "Returns: 6" or "returns 6%".
    """
    if not text or not text.strip():
        return {}

    pattern, lookup = build_metric_pattern(policy)
    strict = strict_phrases(policy)
    found: dict[str, float] = {}
    for match in pattern.finditer(text):
        phrase = _phrase(match.group("name"))
        metric = lookup.get(phrase)
        if metric is None:
            continue
        if phrase in strict and not (
            _EXPLICIT_SEPARATOR.search(match.group("sep")) or match.group("percent")
        ):
            continue
        found[metric] = float(match.group("value"))

    # Canonical order follows the policy table
    return {m.name: found[m.name] for m in policy.metrics if m.name in found}


def build_narrative(metrics: dict[str, float], policy: ThresholdPolicy = DEFAULT_THRESHOLD_POLICY) -> str:
    """
    Summarize which metrics are at risk and which are healthy.

    Deterministic: metrics are listed in policy order.
    """
    if not metrics:
        return NOTHING_RECOGNIZED

    at_risk: list[str] = []
    healthy: list[str] = []
    for name, value in metrics.items():
        shown = policy.format_value(name, value)
        breached = [rule for rule in policy.rules_for(name) if rule.is_breached(value)]
        if breached:
            rule = breached[0]
            side = "floor" if rule.direction == ThresholdDirection.FLOOR else "ceiling"
            limit = policy.format_value(name, rule.limit)
            at_risk.append(f"{name} {shown} ({side} {limit})")
        else:
            healthy.append(f"{name} {shown}")

    if not at_risk:
        count = len(healthy)
        noun = "metric is" if count == 1 else "metrics are"
        return f"All {count} tracked {noun} within healthy ranges."

    narrative = "At risk: " + ", ".join(at_risk) + "."
    if healthy:
        narrative += " Healthy: " + ", ".join(healthy) + "."
    return narrative


def extract_metrics(
    text: str,
    policy: Optional[ThresholdPolicy] = None,
) -> PerformanceSnapshot:
    """
    Parse a free-text snapshot into a PerformanceSnapshot.

    Never raises: text without any recognizable metric produces an empty
    mapping and an explanatory narrative.

    Args:
        text: Operator-typed or transcribed metrics sentence.
        policy: Threshold policy (defaults to the built-in table).

    Returns:
        PerformanceSnapshot
    """
    policy = policy or DEFAULT_THRESHOLD_POLICY
    metrics = parse_metrics(text, policy)
    snapshot = PerformanceSnapshot(metrics=metrics, narrative=build_narrative(metrics, policy))
    logger.debug("Metrics extracted", metrics=metrics)
    return snapshot


__all__ = [
    "NOTHING_RECOGNIZED",
    "build_metric_pattern",
    "strict_phrases",
    "parse_metrics",
    "build_narrative",
    "extract_metrics",
]
