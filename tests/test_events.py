"""Tests for the event emitter."""
import logging

import pytest

from dogeup.utils.events import EventEmitter


@pytest.mark.asyncio
async def test_sync_and_async_listeners():
    events = EventEmitter()
    seen = []

    async def async_listener(value):
        seen.append(("async", value))

    events.on("tick", lambda value: seen.append(("sync", value)))
    events.on("tick", async_listener)

    await events.emit("tick", 1)

    assert seen == [("sync", 1), ("async", 1)]


@pytest.mark.asyncio
async def test_off_and_duplicate_registration():
    events = EventEmitter()
    seen = []
    listener = seen.append

    events.on("tick", listener)
    events.on("tick", listener)
    await events.emit("tick", 1)
    events.off("tick", listener)
    await events.emit("tick", 2)

    assert seen == [1]


@pytest.mark.asyncio
async def test_listener_errors_do_not_propagate(caplog):
    caplog.set_level(logging.ERROR, logger="dogeup.utils.events")
    events = EventEmitter()
    seen = []

    def broken(_):
        raise ValueError("boom")

    events.on("tick", broken)
    events.on("tick", seen.append)

    await events.emit("tick", 1)
    await events.emit("unknown", 1)

    assert seen == [1]
    assert "boom" in caplog.text


@pytest.mark.asyncio
async def test_on_returns_callback():
    events = EventEmitter()
    seen = []

    listener = events.on("state", seen.append)
    await events.emit("state", "done")

    assert listener == seen.append
    assert seen == ["done"]
