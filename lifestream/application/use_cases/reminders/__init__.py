"""Use cases driving reminder evaluation."""

from .evaluate import DEFAULT_TOLERANCE, ReminderEvaluation, evaluate_reminders, reminder_window
from .scheduler import ReminderScheduler

__all__ = [
    "DEFAULT_TOLERANCE",
    "ReminderEvaluation",
    "ReminderScheduler",
    "evaluate_reminders",
    "reminder_window",
]
