from pydantic import Field

from .pool import Player, Pool, WireModel


# client -> server

class ConnectWallet(WireModel):
    address: str = Field(min_length=1)
    balance: float | None = Field(None, ge=0, allow_inf_nan=False)


class JoinPool(WireModel):
    stake_amount: float = Field(allow_inf_nan=False)


class QuickSpin(WireModel):
    bet_amount: float = Field(gt=0, allow_inf_nan=False)
    multiplier: float = Field(gt=0, allow_inf_nan=False)


# server -> requesting client

class WalletConnected(WireModel):
    address: str
    balance: float


class JoinedPool(WireModel):
    player: Player
    balance: float


class SpinResult(WireModel):
    won: bool
    amount: float
    balance: float


class ErrorReply(WireModel):
    message: str


# inspection

class ServerStats(WireModel):
    connected_users: int
    current_pool: Pool
    uptime: float
