"""Client for extracting calendar events from free text with an OpenAI-compatible API."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from openai import OpenAI, OpenAIError

from lifestream.config import get_settings
from lifestream.domain.entities import CalendarEvent, ProposedEvent
from lifestream.utils import get_app_timezone, now_in_app_timezone, to_app_timezone

logger = logging.getLogger(__name__)

_MAX_CONTEXT_EVENTS = 50


class OpenAIConfigurationError(RuntimeError):
    """Raised when the basic configuration for the model endpoint is missing."""


class OpenAIServiceError(RuntimeError):
    """Raised when the model endpoint does not answer as expected."""


@dataclass
class EventExtraction:
    """Events proposed by the model plus the confirmation to show the user."""

    events: list[ProposedEvent] = field(default_factory=list)
    message: str = ""


def _strip_code_fences(text: str) -> str:
    """Return JSON text without Markdown code fences."""

    s = text.strip()
    if not s.startswith("```"):
        return text

    cleaned = s.strip("`")
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1:
        return text
    return cleaned[start : end + 1]


def _remove_trailing_commas(text: str) -> str:
    """Remove trailing commas that break strict JSON decoding."""

    return re.sub(r",(\s*[}\]])", r"\1", text)


def _extract_json_object(text: str) -> str:
    """Return the outermost ``{...}`` block of a reply wrapped in prose."""

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return text
    return text[start : end + 1]


def decode_model_payload(text: str) -> dict[str, Any]:
    """Decode the model reply, tolerating code fences, prose and trailing commas."""

    candidate = text
    for sanitize in (_strip_code_fences, _extract_json_object, _remove_trailing_commas):
        try:
            payload = json.loads(candidate)
        except json.JSONDecodeError:
            candidate = sanitize(candidate)
            continue
        break
    else:
        try:
            payload = json.loads(candidate)
        except json.JSONDecodeError as exc:
            logger.error("Could not decode the model reply: %s", text)
            raise OpenAIServiceError("The model reply is not valid JSON.") from exc

    if not isinstance(payload, dict):
        raise OpenAIServiceError("The model reply must be a JSON object.")
    return payload


def parse_extraction(payload: Mapping[str, Any]) -> EventExtraction:
    """Turn the decoded reply into :class:`EventExtraction`.

    Entries without a usable title or start are dropped with a warning; type
    and priority are passed through as text and coerced later.
    """

    raw_events = payload.get("eventsToAdd") or []
    if not isinstance(raw_events, Sequence) or isinstance(raw_events, (str, bytes)):
        raise OpenAIServiceError("'eventsToAdd' must be a list.")

    events: list[ProposedEvent] = []
    for raw in raw_events:
        if not isinstance(raw, Mapping):
            logger.warning("Ignoring proposed event that is not an object: %r", raw)
            continue
        title = raw.get("title")
        start = raw.get("start")
        if not isinstance(title, str) or not title.strip():
            logger.warning("Ignoring proposed event without title: %r", raw)
            continue
        if not isinstance(start, str) or not start.strip():
            logger.warning("Ignoring proposed event without start: %r", raw)
            continue
        end = raw.get("end")
        description = raw.get("description")
        events.append(
            ProposedEvent(
                title=title.strip(),
                start=start.strip(),
                end=end.strip() if isinstance(end, str) and end.strip() else None,
                description=description.strip() if isinstance(description, str) else "",
                type=raw.get("type") if isinstance(raw.get("type"), str) else None,
                priority=raw.get("priority") if isinstance(raw.get("priority"), str) else None,
            )
        )

    message = payload.get("confirmationMessage")
    return EventExtraction(events=events, message=message if isinstance(message, str) else "")


def build_prompt(
    transcript: str,
    *,
    current_events: Sequence[CalendarEvent],
    view_date: datetime,
    now: datetime,
) -> str:
    timezone_name = str(get_app_timezone())
    local_now = to_app_timezone(now)
    local_view = to_app_timezone(view_date)

    existing = [
        {"title": event.title, "start": event.start, "end": event.end}
        for event in list(current_events)[:_MAX_CONTEXT_EVENTS]
    ]
    return (
        "You are an intelligent calendar assistant.\n\n"
        "CRITICAL CONTEXT:\n"
        f"- User's timezone: {timezone_name}\n"
        f"- Current user local time (right now): {local_now.strftime('%Y/%m/%d %H:%M:%S')}\n"
        f"- User is currently viewing the calendar for: {local_view.strftime('%B %Y')}\n"
        f"- Events already in the calendar: {json.dumps(existing, ensure_ascii=False)}\n\n"
        "Your goal is to parse the user's natural language request and extract calendar events.\n\n"
        "Rules for time calculation:\n"
        "1. Base all relative dates (like 'tomorrow', 'this afternoon') on the current user local time.\n"
        f"2. When the user specifies a time (e.g. 'at 2 PM'), it refers to {timezone_name} time.\n"
        "3. 'start' and 'end' must be ISO 8601 strings with an explicit offset "
        "(for example 2023-10-27T15:00:00+08:00).\n"
        "4. If no duration is specified, assume 1 hour.\n\n"
        "Categorization rules:\n"
        "1. Categorize events into WORK, PERSONAL, URGENT, or OTHER.\n"
        "2. Priority is HIGH (crucial/urgent), MEDIUM (standard) or LOW (optional). Default to MEDIUM.\n\n"
        "Language rules:\n"
        "1. Detect the language of the user's input.\n"
        "2. 'confirmationMessage' MUST be in the same language as the user's input.\n\n"
        "Return an empty array for 'eventsToAdd' if the user is just chatting.\n\n"
        f"User request: {transcript}\n\n"
        "Output only valid JSON in the following format:\n"
        '{"eventsToAdd": [{"title": "Event Title", "start": "2023-10-27T14:30:00+08:00", '
        '"end": "2023-10-27T15:30:00+08:00", "description": "Event Description", '
        '"type": "WORK", "priority": "MEDIUM"}], '
        '"confirmationMessage": "Confirmation message in the user\'s language"}'
    )


class EventExtractionService:
    """Ask the configured chat model to turn free text into proposed events."""

    def __init__(self, client: OpenAI | None = None) -> None:
        settings = get_settings()
        self._model = settings.openai_model
        self._temperature = settings.openai_temperature

        if client is not None:
            self._client = client
            return

        api_key = (settings.openai_api_key or "").strip()
        if not api_key:
            raise OpenAIConfigurationError(
                "OPENAI_API_KEY is not defined in the environment.",
            )
        client_kwargs: dict[str, Any] = {"api_key": api_key}
        base_url = (settings.openai_base_url or "").strip()
        if base_url:
            client_kwargs["base_url"] = base_url
        self._client = OpenAI(**client_kwargs)

    def extract(
        self,
        transcript: str,
        *,
        current_events: Sequence[CalendarEvent] = (),
        view_date: datetime | None = None,
        now: datetime | None = None,
    ) -> EventExtraction:
        now = now or now_in_app_timezone()
        prompt = build_prompt(
            transcript,
            current_events=current_events,
            view_date=view_date or now,
            now=now,
        )

        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self._temperature,
                response_format={"type": "json_object"},
            )
        except OpenAIError as exc:
            raise OpenAIServiceError("The request to the model endpoint failed.") from exc

        try:
            text = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as exc:
            raise OpenAIServiceError("The model reply contains no choices.") from exc
        if not text:
            raise OpenAIServiceError("The model reply contains no usable text.")

        logger.debug("Raw model reply: %s", text)
        return parse_extraction(decode_model_payload(text))


__all__ = [
    "EventExtraction",
    "EventExtractionService",
    "OpenAIConfigurationError",
    "OpenAIServiceError",
    "build_prompt",
    "decode_model_payload",
    "parse_extraction",
]
