"""
Task synthesizer.

Turns a PerformanceSnapshot into prioritized TaskRecommendation objects by
applying the threshold table. Every breached rule raises exactly one task
whose id is derived from the metric and the rule tier, so the same
condition always maps to the same id across runs.
"""

import re
from typing import Optional

from commerce_desk.config.thresholds import (
    DEFAULT_THRESHOLD_POLICY,
    ThresholdDirection,
    ThresholdPolicy,
    ThresholdRule,
)
from commerce_desk.models.schemas import PerformanceSnapshot, TaskRecommendation
from commerce_desk.utils.logger import get_logger

logger = get_logger(__name__)


def slugify(text: str) -> str:
    """Lowercase, non-alphanumeric runs collapsed to single hyphens."""
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def task_id(metric: str, tier: str) -> str:
    """Stable task id for a (metric, tier) condition."""
    return f"task-{slugify(metric)}-{slugify(tier)}"


class TaskSynthesizer:
    """Applies a ThresholdPolicy to parsed metrics."""

    def __init__(self, policy: Optional[ThresholdPolicy] = None):
        self.policy = policy or DEFAULT_THRESHOLD_POLICY

    def synthesize(self, snapshot: PerformanceSnapshot) -> list[TaskRecommendation]:
        """
        Build recommendations for every breached threshold.

        Args:
            snapshot: Parsed metrics.

        Returns:
            Tasks sorted by priority (high first), ties in threshold-table
            order. Empty when every metric is healthy.
        """
        tasks: list[TaskRecommendation] = []
        for rule in self.policy.rules:
            value = snapshot.metrics.get(rule.metric)
            if value is None or not rule.is_breached(value):
                continue
            tasks.append(self.build_task(rule, value))

        # sorted() is stable, so table order survives within a priority
        tasks = sorted(tasks, key=lambda t: t.priority.rank)
        logger.info(
            "Tasks synthesized",
            metrics=len(snapshot.metrics),
            tasks=len(tasks),
            ids=[t.id for t in tasks],
        )
        return tasks

    def build_task(self, rule: ThresholdRule, value: float) -> TaskRecommendation:
        side = "floor" if rule.direction == ThresholdDirection.FLOOR else "ceiling"
        shown = self.policy.format_value(rule.metric, value)
        limit = self.policy.format_value(rule.metric, rule.limit)
        return TaskRecommendation(
            id=task_id(rule.metric, rule.tier),
            title=rule.title,
            description=f"{rule.metric} is at {shown} against a {side} of {limit}. {rule.action}",
            priority=rule.priority_for(value),
            tags=set(rule.tags),
            metric_impact={rule.metric: value},
        )


def craft_tasks_from_snapshot(
    snapshot: PerformanceSnapshot,
    policy: Optional[ThresholdPolicy] = None,
) -> list[TaskRecommendation]:
    """
    Convenience function for one-off task synthesis.

    Args:
        snapshot: Parsed performance metrics
        policy: Threshold policy (defaults to the built-in table)

    Returns:
        List of TaskRecommendation
    """
    return TaskSynthesizer(policy).synthesize(snapshot)


__all__ = [
    "TaskSynthesizer",
    "craft_tasks_from_snapshot",
    "slugify",
    "task_id",
]
