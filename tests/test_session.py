"""Unit tests for the collage session state machine."""

from __future__ import annotations

import pytest

from stripcollage.controllers import (
    SessionStatus,
    capture,
    change_format,
    new_session,
    reset,
    set_live_filter,
    set_result_filter,
    undo,
)
from stripcollage.errors import (
    CaptureOrderError,
    InvalidGeometryError,
    UndoUnavailableError,
    UnknownFilterError,
)
from stripcollage.filters import default_catalog
from stripcollage.layouts import CollageFormat
from stripcollage.raster import RasterSurface


def _part(width=10, height=5):
    return RasterSurface.blank(width, height, (50, 60, 70, 255))


def _captured(fmt, count, base=(10, 15)):
    session = new_session(fmt)
    for step in range(1, count + 1):
        session = capture(session, step, _part(), base)
    return session


def test_new_session_is_idle():
    session = new_session()
    assert session.format is CollageFormat.TWO_STRIPS
    assert session.step == 1
    assert session.status is SessionStatus.IDLE
    assert session.base_size is None
    assert dict(session.parts) == {}


def test_undo_after_two_captures_returns_to_step_two():
    session = _captured(CollageFormat.THREE_STRIPS, 2)
    assert session.step == 3

    session = undo(session)

    assert session.step == 2
    assert session.captured_steps == (1,)
    assert session.status is SessionStatus.CAPTURING


def test_capture_advances_to_complete():
    session = _captured(CollageFormat.TWO_STRIPS, 1)
    assert session.status is SessionStatus.CAPTURING
    session = capture(session, 2, _part())
    assert session.is_complete
    assert session.step == 3
    with pytest.raises(CaptureOrderError):
        capture(session, 3, _part())


def test_capture_rejects_wrong_step():
    session = new_session(CollageFormat.THREE_STRIPS)
    with pytest.raises(CaptureOrderError):
        capture(session, 2, _part())
    with pytest.raises(InvalidGeometryError):
        capture(session, 4, _part())


def test_transitions_do_not_mutate_snapshots():
    first = new_session(CollageFormat.THREE_STRIPS)
    second = capture(first, 1, _part(), (10, 15))
    assert first.step == 1 and dict(first.parts) == {}
    assert second.step == 2
    with pytest.raises(TypeError):
        second.parts[2] = _part()
    with pytest.raises(AttributeError):
        second.step = 5


def test_base_size_set_once():
    session = capture(new_session(CollageFormat.THREE_STRIPS), 1, _part(), (10, 15))
    session = capture(session, 2, _part(), (99, 99))
    assert session.base_size == (10, 15)
    assert undo(undo(session)).base_size == (10, 15)


def test_first_capture_requires_frame_size():
    session = new_session(CollageFormat.TWO_STRIPS)
    with pytest.raises(InvalidGeometryError):
        capture(session, 1, _part(1080, 720))
    assert session.base_size is None and session.step == 1

    session = capture(session, 1, _part(1080, 720), (1080, 1440))
    assert session.base_size == (1080, 1440)
    assert capture(session, 2, _part(1080, 720)).base_size == (1080, 1440)


def test_undo_until_idle_then_unavailable():
    session = undo(_captured(CollageFormat.TWO_STRIPS, 1))
    assert session.status is SessionStatus.IDLE
    assert session.step == 1
    with pytest.raises(UndoUnavailableError):
        undo(session)


def test_undo_from_complete():
    session = undo(_captured(CollageFormat.TWO_STRIPS, 2))
    assert session.step == 2
    assert session.status is SessionStatus.CAPTURING


def test_change_format_without_progress_swaps_format():
    session = set_live_filter(new_session(), "cool")
    changed = change_format(session, CollageFormat.THREE_STRIPS)
    assert changed.format is CollageFormat.THREE_STRIPS
    assert changed.total_steps == 3
    assert changed.live_filter == "cool"
    assert change_format(changed, CollageFormat.THREE_STRIPS) is changed


def test_change_format_with_progress_resets():
    session = set_result_filter(_captured(CollageFormat.THREE_STRIPS, 2), "warm")
    changed = change_format(session, CollageFormat.TWO_STRIPS)
    assert changed.step == 1
    assert dict(changed.parts) == {}
    assert changed.base_size is None
    assert changed.status is SessionStatus.IDLE
    assert changed.result_filter == "warm"


def test_change_to_current_format_keeps_progress():
    session = _captured(CollageFormat.THREE_STRIPS, 2)
    assert change_format(session, CollageFormat.THREE_STRIPS) is session


def test_filter_selection_is_validated_when_catalog_given():
    catalog = default_catalog()
    session = set_live_filter(new_session(), "vintage", catalog)
    assert session.live_filter == "vintage"
    assert session.result_filter == "none"
    with pytest.raises(UnknownFilterError):
        set_result_filter(session, "nope", catalog)


def test_reset_restores_defaults():
    session = set_live_filter(_captured(CollageFormat.GRID, 3), "cool")
    fresh = reset(session)
    assert fresh == new_session()
    assert fresh.live_filter == "none"
