"""
Ordering and merging of message histories pulled from several threads.

Messages are treated as read-only records (dicts or attribute objects);
functions here only select and reorder references, never copy or reshape
them.
"""

from __future__ import annotations

import math
import time
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Callable, List, Optional

# Probed in this order; the first present, non-null, convertible value wins.
CREATED_AT_FIELDS = (
    "created_at",
    "createdAt",
    "created_on",
    "createdOn",
    "created",
    "timestamp",
)
ROLE_FIELDS = ("role", "author", "from")
ID_FIELDS = ("id", "message_id")

# Numbers at or above this magnitude are already epoch milliseconds.
MILLISECONDS_THRESHOLD = 10**12


def _get_field(message: Any, name: str) -> Any:
    if isinstance(message, Mapping):
        return message.get(name)
    return getattr(message, name, None)


def _first_present(message: Any, names: Sequence[str]) -> Any:
    for name in names:
        value = _get_field(message, name)
        if value is not None:
            return value
    return None


def message_role(message: Any) -> str:
    role = _first_present(message, ROLE_FIELDS)
    return "" if role is None else str(role)


def message_id(message: Any) -> str:
    value = _first_present(message, ID_FIELDS)
    return "" if value is None else str(value)


def _numeric_to_ms(value: float) -> Optional[int]:
    if not math.isfinite(value):
        return None
    if abs(value) >= MILLISECONDS_THRESHOLD:
        return int(value)
    return int(value * 1000)


def _datetime_to_ms(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def _to_ms(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return _numeric_to_ms(float(value))
        except OverflowError:
            return None
    if isinstance(value, datetime):
        return _datetime_to_ms(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return _numeric_to_ms(float(text))
        except ValueError:
            pass
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return _datetime_to_ms(datetime.fromisoformat(text))
        except ValueError:
            pass
        try:
            return _datetime_to_ms(parsedate_to_datetime(value.strip()))
        except (TypeError, ValueError):
            return None
    return None


def extract_creation_time_ms(
    message: Any, now: Callable[[], float] = time.time
) -> int:
    """
    Best-effort creation time of a message in epoch milliseconds.

    Numeric values are seconds unless already millisecond-scale; strings
    are parsed as numbers or ISO-8601 timestamps. When nothing usable is
    found the current wall-clock time is returned, which makes the order
    of such messages depend on when they were inspected.
    """
    for name in CREATED_AT_FIELDS:
        value = _get_field(message, name)
        if value is None:
            continue
        ms = _to_ms(value)
        if ms is not None:
            return ms
    return int(now() * 1000)


def order_messages(messages: Iterable[Any]) -> List[Any]:
    """
    Stable ascending order by creation time, ties broken by message id.
    """
    keyed = [(extract_creation_time_ms(m), message_id(m), m) for m in messages]
    keyed.sort(key=lambda item: (item[0], item[1]))
    return [m for _, _, m in keyed]


def merge_threads(*thread_messages: Iterable[Any], limit: Optional[int] = None) -> List[Any]:
    """
    Concatenate histories from several threads and order the result.
    A positive `limit` keeps only the most recent entries.
    """
    combined: List[Any] = []
    for messages in thread_messages:
        if messages:
            combined.extend(messages)
    ordered = order_messages(combined)
    if isinstance(limit, int) and not isinstance(limit, bool) and limit > 0:
        return ordered[-limit:]
    return ordered


def last_message_by_role(messages: Sequence[Any], role: str = "assistant") -> Optional[Any]:
    """
    Most recent message from `role`, else the last message, else None.
    """
    if not messages:
        return None
    target = role.lower()
    for message in reversed(messages):
        if message_role(message).lower() == target:
            return message
    return messages[-1]


__all__ = [
    "CREATED_AT_FIELDS",
    "extract_creation_time_ms",
    "last_message_by_role",
    "merge_threads",
    "message_id",
    "message_role",
    "order_messages",
]
