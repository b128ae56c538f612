from __future__ import annotations

import asyncio
import json

import pytest

from hostbridge import BridgeConfig, HostBridge, ManualScheduler


class RecordingChannel:
    """Channel primitive that keeps every message it is handed."""

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.error: BaseException | None = None

    def __call__(self, raw: str) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append(raw)

    @property
    def messages(self) -> list[dict]:
        return [json.loads(raw) for raw in self.sent]


@pytest.fixture
def loop():
    event_loop = asyncio.new_event_loop()
    yield event_loop
    event_loop.close()


@pytest.fixture
def clock() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def bridge(channel: RecordingChannel, loop, clock: ManualScheduler) -> HostBridge:
    return HostBridge(channel, loop=loop, scheduler=clock, config=BridgeConfig())
