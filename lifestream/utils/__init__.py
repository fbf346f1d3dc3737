"""Utility helpers for reusable functionality."""

from .datetime import (
    format_instant,
    get_app_timezone,
    now_in_app_naive_datetime,
    now_in_app_timezone,
    parse_instant,
    to_app_timezone,
)
from .retry import RetryOutcome, retry_async

__all__ = [
    "format_instant",
    "get_app_timezone",
    "now_in_app_naive_datetime",
    "now_in_app_timezone",
    "parse_instant",
    "to_app_timezone",
    "RetryOutcome",
    "retry_async",
]
