"""Optional diagnostic tracing written to standard error."""

from __future__ import annotations

import inspect
import os
import sys

_ENV_VAR = "CLITREE_TRACING"

_enabled = os.environ.get(_ENV_VAR) == "on"


def set_tracing(enabled: bool) -> None:
    """Switch tracing on or off at run time."""
    global _enabled
    _enabled = bool(enabled)


def is_tracing() -> bool:
    """Return whether trace messages are currently written."""
    return _enabled


def tracef(message: str, *args: object) -> None:
    """Write a %-formatted trace line, tagged with the caller's location."""
    if not _enabled:
        return

    text = message % args if args else message
    if not text.endswith("\n"):
        text += "\n"

    location = "?:0 (?)"
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    if caller is not None:
        code = caller.f_code
        location = f"{code.co_filename}:{caller.f_lineno} ({code.co_name})"
    del frame, caller

    sys.stderr.write(f"## CLITREE TRACE {location} {text}")