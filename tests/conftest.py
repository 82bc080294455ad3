"""Pytest configuration and shared fixtures."""

import asyncio

import pytest


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class RecordingDispatcher:
    """Async dispatch stand-in that records calls and can be held in flight."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.release = asyncio.Event()
        self.release.set()
        self.fail_with: BaseException | None = None

    async def dispatch(self, *args):
        self.calls.append(args)
        call_number = len(self.calls)
        await self.release.wait()
        if self.fail_with is not None:
            raise self.fail_with
        return {"args": args, "call": call_number}

    def hold(self) -> None:
        self.release.clear()

    def resume(self) -> None:
        self.release.set()


@pytest.fixture
def clock():
    """A fake clock starting at t=0 ms."""
    return FakeClock()


@pytest.fixture
def dispatcher():
    """A recording async dispatcher."""
    return RecordingDispatcher()
