import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from broadcaster import Broadcast

from ..config import POOL_CHANNEL
from ..models import Pool

log = logging.getLogger(__name__)

POOL_UPDATED = "pool_updated"
NEW_POOL = "new_pool"
RUG_EVENT = "rug_event"


def pool_message(kind: str, pool: Pool, seq: int) -> dict:
    return {"type": kind, "seq": seq, "pool": pool.to_wire()}


class PoolBroadcaster:
    """Fans pool events out to every connected observer.

    Payloads are serialized at publish time, so a later mutation of the pool
    never leaks into an event that is still queued for delivery. Every event
    carries an increasing `seq`; a snapshot carries the `seq` of the last
    event it already reflects.
    """

    def __init__(self, broadcast: Broadcast, channel: str = POOL_CHANNEL):
        self.broadcast = broadcast
        self.channel = channel
        self.seq = 0

    async def publish(self, kind: str, pool: Pool) -> None:
        self.seq += 1
        log.debug(f"Publishing {kind} #{self.seq} for pool {pool.id}")
        await self.broadcast.publish(
            channel=self.channel, message=json.dumps(pool_message(kind, pool, self.seq))
        )

    def snapshot(self, pool: Pool) -> dict:
        return pool_message(POOL_UPDATED, pool, self.seq)

    @asynccontextmanager
    async def subscribe(self) -> AsyncIterator:
        async with self.broadcast.subscribe(channel=self.channel) as subscriber:
            yield subscriber

    @staticmethod
    async def newer_than(subscriber, seq: int) -> AsyncIterator[str]:
        """Messages from `subscriber` published after event number `seq`."""
        async for event in subscriber:
            if json.loads(event.message)["seq"] > seq:
                yield event.message
