import pytest

from commerce_desk.config.thresholds import DEFAULT_THRESHOLD_POLICY, ThresholdPolicy
from commerce_desk.models.schemas import PerformanceSnapshot, TaskPriority, TaskStatus
from commerce_desk.tasks.extractor import extract_metrics
from commerce_desk.tasks.synthesizer import (
    TaskSynthesizer,
    craft_tasks_from_snapshot,
    slugify,
    task_id,
)


def test_task_id_is_stable_slug():
    assert task_id("Cancellation Rate", "above-ceiling") == "task-cancellation-rate-above-ceiling"
    assert task_id("ACoS", "above ceiling") == "task-acos-above-ceiling"
    assert slugify("  Late/Dispatch  Rate ") == "late-dispatch-rate"


def test_cancellation_example_yields_one_high_task():
    tasks = craft_tasks_from_snapshot(extract_metrics("Cancellation Rate: 9.5"))
    assert len(tasks) == 1
    task = tasks[0]
    assert task.id == "task-cancellation-rate-above-ceiling"
    assert task.priority == TaskPriority.HIGH
    assert task.status == TaskStatus.PENDING
    assert "cancellation" in task.tags
    assert task.metric_impact == {"Cancellation Rate": 9.5}
    assert task.description.startswith("Cancellation Rate is at 9.5% against a ceiling of 2.5%.")


def test_repeat_analysis_gives_same_ids():
    first = craft_tasks_from_snapshot(extract_metrics("Cancellation Rate: 9.5"))
    second = craft_tasks_from_snapshot(extract_metrics("Cancellation Rate: 9.5"))
    assert [t.id for t in first] == [t.id for t in second]


def test_sorted_by_priority(breach_snapshot):
    tasks = craft_tasks_from_snapshot(breach_snapshot)
    assert [(t.id, t.priority) for t in tasks] == [
        ("task-cancellation-rate-above-ceiling", TaskPriority.HIGH),
        ("task-conversion-below-floor", TaskPriority.MEDIUM),
        ("task-ctr-below-floor", TaskPriority.LOW),
    ]


@pytest.mark.parametrize("metric,value,expected", [
    ("CTR", 1.0, None),
    ("CTR", 0.5, TaskPriority.HIGH),
    ("CTR", 0.7, TaskPriority.MEDIUM),
    ("Return Rate", 5.5, TaskPriority.LOW),
    ("ACoS", 45, TaskPriority.HIGH),
    ("Rating", 3.0, TaskPriority.HIGH),
    ("Rating", 3.5, TaskPriority.MEDIUM),
    ("Rating", 3.9, TaskPriority.LOW),
    ("Rating", 4.6, None),
])
def test_priority_bands(metric, value, expected):
    tasks = craft_tasks_from_snapshot(PerformanceSnapshot(metrics={metric: value}))
    if expected is None:
        assert tasks == []
    else:
        assert [t.priority for t in tasks] == [expected]


def test_healthy_or_empty_snapshot_yields_nothing():
    assert craft_tasks_from_snapshot(extract_metrics("all good today")) == []
    assert craft_tasks_from_snapshot(PerformanceSnapshot(metrics={"CTR": 3.0, "Conversion": 4.0})) == []


def test_unknown_metric_is_ignored():
    assert craft_tasks_from_snapshot(PerformanceSnapshot(metrics={"Footfall": 1.0})) == []


def test_custom_policy():
    policy = ThresholdPolicy.model_validate({
        "metrics": [{"name": "CTR", "synonyms": ["ctr"]}],
        "rules": [{
            "metric": "CTR",
            "tier": "below-floor",
            "direction": "floor",
            "limit": 2.0,
            "title": "Lift CTR",
            "action": "Refresh images.",
            "tags": ["ctr"],
        }],
    })
    tasks = TaskSynthesizer(policy).synthesize(PerformanceSnapshot(metrics={"CTR": 1.5}))
    assert [t.title for t in tasks] == ["Lift CTR"]
    assert tasks[0].priority == TaskPriority.MEDIUM


def test_default_policy_covers_every_metric():
    for metric in DEFAULT_THRESHOLD_POLICY.metrics:
        assert DEFAULT_THRESHOLD_POLICY.rules_for(metric.name)
