"""
Metrics-to-tasks engine.

Parses free-text performance snapshots, raises prioritized tasks for
threshold breaches and merges them into the running task list.
"""

from commerce_desk.tasks.extractor import (
    NOTHING_RECOGNIZED,
    build_narrative,
    extract_metrics,
    parse_metrics,
)
from commerce_desk.tasks.merger import open_tasks, toggle_task_status, upsert_tasks
from commerce_desk.tasks.synthesizer import (
    TaskSynthesizer,
    craft_tasks_from_snapshot,
    task_id,
)

__all__ = [
    # Extraction
    "NOTHING_RECOGNIZED",
    "extract_metrics",
    "parse_metrics",
    "build_narrative",

    # Synthesis
    "TaskSynthesizer",
    "craft_tasks_from_snapshot",
    "task_id",

    # Merging
    "upsert_tasks",
    "toggle_task_status",
    "open_tasks",
]
