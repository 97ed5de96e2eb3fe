"""Controller layer: session snapshots and the capture driver."""

from .capture import CaptureController
from .session import (
    CollageSession,
    SessionStatus,
    capture,
    change_format,
    new_session,
    reset,
    set_live_filter,
    set_result_filter,
    undo,
)

__all__ = [
    "CaptureController",
    "CollageSession",
    "SessionStatus",
    "new_session",
    "capture",
    "undo",
    "change_format",
    "set_live_filter",
    "set_result_filter",
    "reset",
]
