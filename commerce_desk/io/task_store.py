"""
Task board persistence as a JSON array of TaskRecommendation.
"""

import json
from pathlib import Path
from typing import Sequence, Union

from pydantic import TypeAdapter, ValidationError

from commerce_desk.models.schemas import TaskRecommendation
from commerce_desk.utils.errors import TaskStoreError
from commerce_desk.utils.logger import get_logger

logger = get_logger(__name__)

_TASK_LIST = TypeAdapter(list[TaskRecommendation])


def load_tasks(path: Union[str, Path]) -> list[TaskRecommendation]:
    """
    Load the task board; a missing file is an empty board.

    Raises:
        TaskStoreError: When the file exists but cannot be decoded.
    """
    path = Path(path)
    if not path.exists():
        return []
    try:
        tasks = _TASK_LIST.validate_json(path.read_bytes())
    except ValidationError as e:
        raise TaskStoreError(
            f"Task file is not a valid task list: {path}",
            {"path": str(path), "errors": e.error_count()},
        ) from e
    logger.debug("Tasks loaded", path=str(path), tasks=len(tasks))
    return tasks


def save_tasks(tasks: Sequence[TaskRecommendation], path: Union[str, Path]) -> Path:
    """Write the task board, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = _TASK_LIST.dump_python(list(tasks), mode="json")
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.debug("Tasks saved", path=str(path), tasks=len(tasks))
    return path


__all__ = ["load_tasks", "save_tasks"]
