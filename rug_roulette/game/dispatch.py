import logging
from typing import Awaitable, Callable

from pydantic import ValidationError

from ..models import (
    ConnectWallet,
    ErrorReply,
    JoinedPool,
    JoinPool,
    QuickSpin,
    WalletConnected,
)
from .errors import GameError
from .pool_engine import PoolEngine

log = logging.getLogger(__name__)

Handler = Callable[[str, dict], Awaitable[dict]]


def reply(kind: str, payload) -> dict:
    return {"type": kind, **payload.to_wire()}


def error_reply(message: str) -> dict:
    return reply("error", ErrorReply(message=message))


class MessageDispatcher:
    """Routes inbound client messages to the engine by their `type`.

    Knows nothing about the transport: every call takes the session id and the
    decoded message and returns the reply meant for that session only.
    """

    def __init__(self, engine: PoolEngine):
        self.engine = engine
        self.handlers: dict[str, Handler] = {
            "connect_wallet": self._connect_wallet,
            "join_pool": self._join_pool,
            "quick_spin": self._quick_spin,
        }

    async def dispatch(self, session_id: str, message: dict) -> dict:
        msg_type = message.get("type")
        if not isinstance(msg_type, str):
            log.info(f"Message without a usable type from {session_id}")
            return error_reply("Invalid message format")

        handler = self.handlers.get(msg_type)
        if handler is None:
            log.info(f"Unknown message type {msg_type!r} from {session_id}")
            return error_reply(f"Unknown message type: {msg_type}")

        try:
            return await handler(session_id, message)
        except ValidationError as e:
            log.info(f"Invalid {msg_type} payload from {session_id}: {e.error_count()} errors")
            return error_reply("Invalid message format")
        except GameError as e:
            log.info(f"Rejected {msg_type} from {session_id}: {e.code}")
            return error_reply(e.message)

    async def _connect_wallet(self, session_id: str, message: dict) -> dict:
        data = ConnectWallet.model_validate(message)
        session = await self.engine.connect_wallet(session_id, data.address, data.balance)
        return reply(
            "wallet_connected",
            WalletConnected(address=session.address, balance=session.balance),
        )

    async def _join_pool(self, session_id: str, message: dict) -> dict:
        data = JoinPool.model_validate(message)
        player, balance = await self.engine.join(session_id, data.stake_amount)
        return reply("joined_pool", JoinedPool(player=player, balance=balance))

    async def _quick_spin(self, session_id: str, message: dict) -> dict:
        data = QuickSpin.model_validate(message)
        result = await self.engine.quick_spin(session_id, data.bet_amount, data.multiplier)
        return reply("spin_result", result)
