"""Use cases for managing reminder settings."""

from .update_settings import update_reminder_settings

__all__ = ["update_reminder_settings"]
