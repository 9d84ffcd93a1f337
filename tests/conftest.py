import random
from contextlib import asynccontextmanager

import anyio
import pytest

from rug_roulette.game import PoolEngine, PoolSettings


class RecordingBroadcaster:
    """Keeps every published pool event, serialized as it was at publish time."""

    def __init__(self):
        self.events: list[tuple[str, dict]] = []

    async def publish(self, kind, pool):
        self.events.append((kind, pool.to_wire()))

    def snapshot(self, pool):
        return {"type": "pool_updated", "seq": len(self.events), "pool": pool.to_wire()}

    @property
    def kinds(self) -> list[str]:
        return [kind for kind, _ in self.events]

    @property
    def last(self) -> tuple[str, dict]:
        return self.events[-1]


class FixedRandom:
    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings() -> PoolSettings:
    # the countdown never fires on its own; tests drive it with tick()
    return PoolSettings(
        min_stake=1,
        max_stake=100,
        max_players=10,
        first_pool_seconds=300,
        pool_seconds_min=120,
        pool_seconds_span=300,
        tick_seconds=3600,
        new_pool_delay_seconds=0,
        starting_balance=1000,
    )


@asynccontextmanager
async def running_engine(settings: PoolSettings, seed: int = 1234):
    recorder = RecordingBroadcaster()
    engine = PoolEngine(settings, recorder, rng=random.Random(seed))
    async with engine.running():
        yield engine, recorder


async def wait_for_new_pool(engine: PoolEngine, old_pool_id: str) -> None:
    with anyio.fail_after(2):
        while engine.pool.id == old_pool_id:
            await anyio.sleep(0.001)
