"""Aggregate application use cases."""

from .reminders import ReminderScheduler, evaluate_reminders
from .settings import update_reminder_settings

__all__ = [
    "ReminderScheduler",
    "evaluate_reminders",
    "update_reminder_settings",
]
