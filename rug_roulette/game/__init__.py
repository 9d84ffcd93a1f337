from .broadcaster import PoolBroadcaster
from .dispatch import MessageDispatcher
from .ledger import SessionRegistry
from .pool_engine import PoolEngine, PoolSettings

__all__ = [
    "PoolBroadcaster",
    "MessageDispatcher",
    "SessionRegistry",
    "PoolEngine",
    "PoolSettings",
]
