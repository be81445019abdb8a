from __future__ import annotations

import asyncio

import pytest

from sitebuild.utils.async_helpers import run_sync


def test_run_sync_returns_value() -> None:
    async def _coro() -> int:
        await asyncio.sleep(0)
        return 42

    assert run_sync(_coro()) == 42


def test_run_sync_propagates_exception() -> None:
    async def _boom() -> None:
        raise ValueError("oops")

    with pytest.raises(ValueError, match="oops"):
        run_sync(_boom())


async def test_run_sync_inside_running_loop() -> None:
    """With a loop already running, the coroutine runs on a worker thread."""

    async def _coro() -> str:
        await asyncio.sleep(0)
        return "done"

    assert run_sync(_coro()) == "done"
