"""
Error types for the desk's outer layer.

The rule engine itself never raises for content problems; these exceptions
cover file boundaries (catalog sheets, task files) so the CLI can report
them with a stable code.
"""

from typing import Optional


class DeskError(Exception):
    """Base application exception carrying a machine-readable code."""
    
    def __init__(self, code: str, message: str, details: Optional[dict] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class SheetReadError(DeskError):
    """Catalog sheet could not be read or parsed."""
    
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__("SHEET_READ_ERROR", message, details)


class TaskStoreError(DeskError):
    """Task file could not be read or decoded."""
    
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__("TASK_STORE_ERROR", message, details)
