from __future__ import annotations

import asyncio
from typing import List

import pytest


class FakeClock:
    """
    Simulated time: sleep() advances `now` instead of waiting.
    """
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay
        await asyncio.sleep(0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
