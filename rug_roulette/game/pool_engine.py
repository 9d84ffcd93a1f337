import logging
import random
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Protocol

import anyio
from anyio.abc import TaskGroup
from pydantic import BaseModel

from .. import config
from ..models import (
    Player,
    Pool,
    PoolStatus,
    RugEvent,
    ServerStats,
    SpinResult,
    WalletSession,
)
from .broadcaster import NEW_POOL, POOL_UPDATED, RUG_EVENT
from .errors import (
    AlreadyInPool,
    InsufficientBalance,
    InvalidStake,
    PoolFull,
    PoolNotAccepting,
)
from .ledger import SessionRegistry
from .spin import evaluate_spin

log = logging.getLogger(__name__)


class PoolPublisher(Protocol):
    async def publish(self, kind: str, pool: Pool) -> None: ...

    def snapshot(self, pool: Pool) -> dict: ...


class PoolSettings(BaseModel):
    min_stake: float = config.MIN_STAKE
    max_stake: float = config.MAX_STAKE
    max_players: int = config.MAX_PLAYERS
    first_pool_seconds: int = config.FIRST_POOL_SECONDS
    pool_seconds_min: int = config.POOL_SECONDS_MIN
    pool_seconds_span: int = config.POOL_SECONDS_SPAN
    tick_seconds: float = config.TICK_SECONDS
    new_pool_delay_seconds: float = config.NEW_POOL_DELAY_SECONDS
    starting_balance: float = config.STARTING_BALANCE

    @classmethod
    def from_env(cls) -> "PoolSettings":
        return cls()


class PoolEngine:
    """Owns the single current pool and every balance-changing operation.

    All mutations and all broadcasts happen while holding one lock, so pool
    events are published in the order they were produced and a session's
    balance is never read-modify-written by two operations at once.

    The countdown is a recurring task inside the engine's task group. It runs
    only between `start_new_pool` and either the rug event or the pool going
    empty; `join` resumes it when the first player arrives.
    """

    def __init__(
        self,
        settings: PoolSettings,
        broadcaster: PoolPublisher,
        registry: SessionRegistry | None = None,
        rng: random.Random | None = None,
    ):
        self.settings = settings
        self.broadcaster = broadcaster
        self.registry = registry or SessionRegistry(settings.starting_balance)
        self._rng = rng or random.Random()

        self._lock = anyio.Lock()
        self._task_group: TaskGroup | None = None
        self._countdown_scope: anyio.CancelScope | None = None
        self._started_at = time.monotonic()
        self._pool = self.create_pool(first=True)

    @property
    def pool(self) -> Pool:
        return self._pool

    @property
    def countdown_running(self) -> bool:
        return self._countdown_scope is not None

    @asynccontextmanager
    async def running(self) -> AsyncIterator["PoolEngine"]:
        """Run the engine for the duration of the block.

        Leaving the block cancels the countdown and any pending new-pool timer.
        """
        async with anyio.create_task_group() as task_group:
            self._task_group = task_group
            self._started_at = time.monotonic()
            await self.start_new_pool(first=True)
            try:
                yield self
            finally:
                self._countdown_scope = None
                task_group.cancel_scope.cancel()
        self._task_group = None
        log.info("Pool engine stopped")

    # pool lifecycle

    def create_pool(self, first: bool = False) -> Pool:
        if first:
            seconds = self.settings.first_pool_seconds
        else:
            low = self.settings.pool_seconds_min
            seconds = self._rng.randrange(low, low + self.settings.pool_seconds_span)
        return Pool(
            time_remaining=seconds,
            max_players=self.settings.max_players,
            min_stake=self.settings.min_stake,
            max_stake=self.settings.max_stake,
        )

    async def start_new_pool(self, first: bool = False) -> Pool:
        async with self._lock:
            return await self._start_new_pool(first)

    async def tick(self) -> None:
        async with self._lock:
            await self._tick()

    async def resolve(self) -> None:
        async with self._lock:
            await self._resolve()

    async def _start_new_pool(self, first: bool = False) -> Pool:
        self._pool = self.create_pool(first)
        log.info(f"New pool {self._pool.id} ({self._pool.time_remaining}s)")
        await self.broadcaster.publish(NEW_POOL, self._pool)
        self._start_countdown()
        return self._pool

    async def _tick(self) -> None:
        pool = self._pool
        if pool.status != PoolStatus.WAITING or pool.time_remaining <= 0:
            return

        pool.time_remaining -= 1
        log.debug(f"Pool {pool.id}: {pool.time_remaining}s left")
        await self.broadcaster.publish(POOL_UPDATED, pool)

        if pool.time_remaining == 0:
            await self._resolve()

    async def _resolve(self) -> None:
        pool = self._pool
        if pool.status != PoolStatus.WAITING:
            return

        if pool.is_empty:
            log.info(f"Pool {pool.id} expired with no players")
            await self._start_new_pool()
            return

        winner = pool.players[self._rng.randrange(len(pool.players))]
        pool.winner = winner
        pool.rug_event = RugEvent(winner=winner, total_prize=pool.total_staked)
        pool.status = PoolStatus.ENDED
        self._stop_countdown()

        # departures from a waiting pool take the same lock, so the winner is
        # always still registered here
        self.registry.credit(winner.session_id, pool.total_staked)

        log.info(
            f"Rug event on pool {pool.id}: {winner.address} wins {pool.total_staked:g} "
            f"from {len(pool.players)} players"
        )
        await self.broadcaster.publish(RUG_EVENT, pool)
        self._spawn(self._supersede_after_delay, pool.id)

    async def _supersede_after_delay(self, pool_id: str) -> None:
        await anyio.sleep(self.settings.new_pool_delay_seconds)
        async with self._lock:
            if self._pool.id == pool_id:
                await self._start_new_pool()

    # countdown

    def _spawn(self, func, *args) -> None:
        if self._task_group is None:
            raise RuntimeError("Pool engine is not running")
        self._task_group.start_soon(func, *args)

    def _start_countdown(self) -> None:
        self._stop_countdown()
        scope = anyio.CancelScope()
        self._countdown_scope = scope
        self._spawn(self._run_countdown, scope)

    def _stop_countdown(self) -> None:
        if self._countdown_scope is not None:
            self._countdown_scope.cancel()
            self._countdown_scope = None

    async def _run_countdown(self, scope: anyio.CancelScope) -> None:
        with scope:
            while True:
                await anyio.sleep(self.settings.tick_seconds)
                # a tick that has started always finishes, even if it
                # supersedes the pool and so cancels this very countdown
                with anyio.CancelScope(shield=True):
                    async with self._lock:
                        if scope.cancel_called:
                            return
                        await self._tick()

    # player actions

    async def connect_wallet(
        self, session_id: str, address: str, balance: float | None = None
    ) -> WalletSession:
        async with self._lock:
            return self.registry.register(session_id, address, balance)

    async def join(self, session_id: str, stake: float) -> tuple[Player, float]:
        async with self._lock:
            pool = self._pool
            session = self.registry.get(session_id)

            if stake < pool.min_stake or stake > pool.max_stake:
                raise InvalidStake(pool.min_stake, pool.max_stake)
            if stake > session.balance:
                raise InsufficientBalance()
            if pool.is_full:
                raise PoolFull()
            if pool.status != PoolStatus.WAITING:
                raise PoolNotAccepting()
            if pool.find_player(session_id) is not None:
                raise AlreadyInPool()

            player = Player.for_session(session_id, session.address, stake)
            balance = self.registry.debit(session_id, stake)
            pool.players.append(player)
            pool.recompute_total()
            log.info(
                f"{session.address} joined pool {pool.id} with {stake:g} "
                f"({len(pool.players)}/{pool.max_players})"
            )

            if len(pool.players) == 1 and not self.countdown_running:
                self._start_countdown()

            await self.broadcaster.publish(POOL_UPDATED, pool)
            return player, balance

    async def leave(self, session_id: str) -> Player | None:
        async with self._lock:
            return await self._leave(session_id)

    async def _leave(self, session_id: str) -> Player | None:
        pool = self._pool
        player = pool.find_player(session_id)
        if player is None or pool.status != PoolStatus.WAITING:
            return None

        pool.players.remove(player)
        pool.recompute_total()
        log.info(f"{player.address} left pool {pool.id}, stake {player.stake:g} withdrawn")
        await self.broadcaster.publish(POOL_UPDATED, pool)

        if pool.is_empty:
            log.info(f"Pool {pool.id} is empty, countdown suspended at {pool.time_remaining}s")
            self._stop_countdown()
        return player

    async def quick_spin(
        self, session_id: str, bet_amount: float, multiplier: float
    ) -> SpinResult:
        async with self._lock:
            session = self.registry.get(session_id)
            outcome = evaluate_spin(session.balance, bet_amount, multiplier, self._rng)
            session.balance = outcome.balance
            log.info(
                f"{session.address} spun {bet_amount:g} at {multiplier:g}x: "
                f"{'won' if outcome.won else 'lost'} {abs(outcome.amount):g}"
            )
            return SpinResult(won=outcome.won, amount=outcome.amount, balance=outcome.balance)

    async def disconnect(self, session_id: str) -> None:
        async with self._lock:
            await self._leave(session_id)
            self.registry.release(session_id)

    # inspection

    async def snapshot(self) -> dict:
        """Current pool as a `pool_updated` message, consistent with the event stream."""
        async with self._lock:
            return self.broadcaster.snapshot(self._pool)

    def stats(self) -> ServerStats:
        return ServerStats(
            connected_users=len(self.registry),
            current_pool=self._pool,
            uptime=time.monotonic() - self._started_at,
        )
