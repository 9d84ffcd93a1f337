from .pool import Player, Pool, PoolStatus, RugEvent, WireModel
from .session import WalletSession
from .messages import (
    ConnectWallet,
    ErrorReply,
    JoinedPool,
    JoinPool,
    QuickSpin,
    ServerStats,
    SpinResult,
    WalletConnected,
)

__all__ = [
    "Player",
    "Pool",
    "PoolStatus",
    "RugEvent",
    "WireModel",
    "WalletSession",
    "ConnectWallet",
    "ErrorReply",
    "JoinedPool",
    "JoinPool",
    "QuickSpin",
    "ServerStats",
    "SpinResult",
    "WalletConnected",
]
