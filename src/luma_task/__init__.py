"""Luma Task - a calm task manager that understands plain sentences."""

__version__ = "0.2.0"

from .parsers import ParsedTask, Recurrence, RecurrenceType, TaskParser, Unit, parse_task
from .task import Task

__all__ = [
    "ParsedTask",
    "Recurrence",
    "RecurrenceType",
    "TaskParser",
    "Unit",
    "parse_task",
    "Task",
    "__version__",
]
