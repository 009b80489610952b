"""
Task list merging.

Recommendations accumulate across analysis runs: a repeated condition
refreshes its existing task instead of adding a duplicate, and the
operator's status mark always survives re-analysis.
"""

from typing import Iterable, Sequence

from commerce_desk.models.schemas import TaskRecommendation, TaskStatus
from commerce_desk.utils.logger import get_logger

logger = get_logger(__name__)


def upsert_tasks(
    existing: Sequence[TaskRecommendation],
    incoming: Iterable[TaskRecommendation],
) -> list[TaskRecommendation]:
    """
    Merge a synthesized batch into the current task list.

    Existing order is preserved. A task whose id is already present takes the
    new priority, metric impact and description but keeps its status. New ids
    are appended as pending. Tasks absent from the batch are left alone.
    Inputs are not modified.
    """
    # Later duplicates inside one batch replace earlier ones
    batch: dict[str, TaskRecommendation] = {}
    for task in incoming:
        batch[task.id] = task

    merged: list[TaskRecommendation] = []
    updated = 0
    for task in existing:
        fresh = batch.pop(task.id, None)
        if fresh is None:
            merged.append(task)
            continue
        merged.append(
            task.model_copy(
                update={
                    "priority": fresh.priority,
                    "metric_impact": fresh.metric_impact,
                    "description": fresh.description,
                }
            )
        )
        updated += 1

    for fresh in batch.values():
        merged.append(fresh.model_copy(update={"status": TaskStatus.PENDING}))

    logger.debug("Tasks merged", updated=updated, added=len(batch), total=len(merged))
    return merged


def toggle_task_status(
    tasks: Sequence[TaskRecommendation],
    task_id: str,
) -> list[TaskRecommendation]:
    """
    Flip one task between pending and done.

    Returns a new list; an unknown id leaves the tasks unchanged.
    """
    result = []
    for task in tasks:
        if task.id == task_id:
            status = TaskStatus.DONE if task.is_open else TaskStatus.PENDING
            task = task.model_copy(update={"status": status})
            logger.info("Task status toggled", task_id=task_id, status=status.value)
        result.append(task)
    return result


def open_tasks(tasks: Iterable[TaskRecommendation]) -> list[TaskRecommendation]:
    """Pending tasks, in list order."""
    return [task for task in tasks if task.is_open]


__all__ = [
    "upsert_tasks",
    "toggle_task_status",
    "open_tasks",
]
