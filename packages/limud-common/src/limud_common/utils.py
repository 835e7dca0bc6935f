"""
Shared utility functions for Limud.

Contains general-purpose helpers used across both services: human
readable file sizes and durations, text truncation for previews, and
invocation of callbacks that may be either plain functions or
coroutine functions.
"""

from __future__ import annotations

import inspect
import math
from collections.abc import Callable
from typing import Any

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def format_file_size(size: int) -> str:
    """Format *size* bytes as e.g. ``"1.5 MB"``.

    Two decimals at most, trailing zeros dropped. Sizes beyond the
    largest unit stay in GB.
    """
    if size <= 0:
        return "0 Bytes"
    exponent = 0
    while exponent < len(_SIZE_UNITS) - 1 and size >= 1024 ** (exponent + 1):
        exponent += 1
    value = f"{size / 1024**exponent:.2f}".rstrip("0").rstrip(".")
    return f"{value} {_SIZE_UNITS[exponent]}"


def format_duration(seconds: float | None) -> str:
    """Format *seconds* as ``M:SS`` or ``H:MM:SS``; empty for missing values."""
    if not seconds or math.isnan(seconds):
        return ""
    total = int(seconds)
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def truncate_text(text: str | None, max_length: int = 200) -> str:
    """Cut *text* to *max_length* characters, appending ``...`` when cut."""
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


async def maybe_await(callback: Callable[..., Any], *args: Any) -> Any:
    """Call *callback* with *args*, awaiting the result if it is awaitable."""
    result = callback(*args)
    if inspect.isawaitable(result):
        return await result
    return result
