"""Utils module for Commerce Desk."""

from commerce_desk.utils.logger import LogContext, get_logger, setup_logging
from commerce_desk.utils.errors import DeskError, SheetReadError, TaskStoreError

__all__ = [
    "get_logger",
    "setup_logging",
    "LogContext",
    "DeskError",
    "SheetReadError",
    "TaskStoreError",
]
