"""Unit tests for debounced persistence of editor edits."""

import asyncio

import pytest

from ui.persistence import DEFAULT_WINDOWS, DebouncedPersistenceBridge

# Scaled-down windows keep the tests fast while preserving their ratio
WINDOWS = {"content": 0.2, "title": 0.1}


class Recorder:
    """Async persist callable that records its calls."""

    def __init__(self, fail: bool = False) -> None:
        self.calls: list[tuple[str, str]] = []
        self.fail = fail

    async def __call__(self, field: str, value: str) -> None:
        if self.fail:
            raise RuntimeError("disk full")
        self.calls.append((field, value))


def test_default_windows() -> None:
    """Test that content waits one second and title half a second."""
    assert DEFAULT_WINDOWS == {"content": 1.0, "title": 0.5}


@pytest.mark.asyncio
async def test_rapid_edits_persist_latest_value_once() -> None:
    """Test that edits inside the window coalesce into one save of the last value."""
    recorder = Recorder()
    bridge = DebouncedPersistenceBridge(recorder, windows=WINDOWS)

    bridge.on_change("content", "a")
    await asyncio.sleep(0.05)
    bridge.on_change("content", "ab")
    await asyncio.sleep(0.05)
    bridge.on_change("content", "abc")

    await asyncio.sleep(0.1)
    assert recorder.calls == []

    await asyncio.sleep(0.25)
    await bridge.wait_idle()
    assert recorder.calls == [("content", "abc")]


@pytest.mark.asyncio
async def test_edit_after_window_persists_again() -> None:
    """Test that a same-field edit after the window expires is a second save."""
    recorder = Recorder()
    bridge = DebouncedPersistenceBridge(recorder, windows=WINDOWS)

    bridge.on_change("content", "a")
    await asyncio.sleep(0.25)
    await bridge.wait_idle()
    assert recorder.calls == [("content", "a")]

    bridge.on_change("content", "b")
    await asyncio.sleep(0.25)
    await bridge.wait_idle()
    assert recorder.calls == [("content", "a"), ("content", "b")]


@pytest.mark.asyncio
async def test_fields_have_independent_timers() -> None:
    """Test that a title edit does not reset or absorb a content edit."""
    recorder = Recorder()
    bridge = DebouncedPersistenceBridge(recorder, windows=WINDOWS)

    bridge.on_change("content", "body")
    bridge.on_change("title", "Title")

    await asyncio.sleep(0.15)
    await bridge.wait_idle()
    assert recorder.calls == [("title", "Title")]

    await asyncio.sleep(0.15)
    await bridge.wait_idle()
    assert recorder.calls == [("title", "Title"), ("content", "body")]


@pytest.mark.asyncio
async def test_cancel_drops_pending_value() -> None:
    """Test that a cancelled field is never persisted."""
    recorder = Recorder()
    bridge = DebouncedPersistenceBridge(recorder, windows=WINDOWS)

    bridge.on_change("content", "manual edit")
    bridge.cancel("content")

    await asyncio.sleep(0.3)
    assert recorder.calls == []
    assert not bridge.has_pending()


@pytest.mark.asyncio
async def test_close_cancels_without_flushing() -> None:
    """Test that closing the bridge drops every pending save."""
    recorder = Recorder()
    bridge = DebouncedPersistenceBridge(recorder, windows=WINDOWS)

    bridge.on_change("content", "x")
    bridge.on_change("title", "y")
    assert bridge.has_pending("content")
    assert bridge.has_pending("title")

    bridge.close()

    await asyncio.sleep(0.3)
    assert recorder.calls == []


@pytest.mark.asyncio
async def test_flush_persists_pending_values_immediately() -> None:
    """Test that flush writes pending values without waiting for the window."""
    recorder = Recorder()
    bridge = DebouncedPersistenceBridge(recorder, windows=WINDOWS)

    bridge.on_change("content", "x")
    bridge.on_change("title", "y")

    await bridge.flush()

    assert sorted(recorder.calls) == [("content", "x"), ("title", "y")]
    assert not bridge.has_pending()

    # Timers were cancelled, nothing is written twice
    await asyncio.sleep(0.3)
    assert len(recorder.calls) == 2


@pytest.mark.asyncio
async def test_persist_failure_is_reported_not_raised() -> None:
    """Test that a failing save goes to the error callback."""
    errors: list[tuple[str, Exception]] = []
    bridge = DebouncedPersistenceBridge(
        Recorder(fail=True),
        windows=WINDOWS,
        on_error=lambda field, e: errors.append((field, e)),
    )

    bridge.on_change("title", "t")
    await asyncio.sleep(0.15)
    await bridge.wait_idle()

    assert len(errors) == 1
    assert errors[0][0] == "title"
    assert isinstance(errors[0][1], RuntimeError)


@pytest.mark.asyncio
async def test_unknown_field_raises() -> None:
    """Test that a field without a window is rejected."""
    bridge = DebouncedPersistenceBridge(Recorder(), windows=WINDOWS)

    with pytest.raises(KeyError):
        bridge.on_change("format", "latex")
