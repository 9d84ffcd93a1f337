class GameError(Exception):
    """Base for every rejected request. Never fatal to the server."""

    code = "game_error"
    message = "Request rejected"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class NotRegistered(GameError):
    code = "not_registered"
    message = "Please connect wallet first"


class InvalidStake(GameError):
    code = "invalid_stake"

    def __init__(self, min_stake: float, max_stake: float):
        super().__init__(f"Stake must be between {min_stake:g}-{max_stake:g} SOL")
        self.min_stake = min_stake
        self.max_stake = max_stake


class InsufficientBalance(GameError):
    code = "insufficient_balance"
    message = "Insufficient balance"


class PoolFull(GameError):
    code = "pool_full"
    message = "Pool is full"


class PoolNotAccepting(GameError):
    code = "pool_not_accepting"
    message = "Pool is not accepting players"


class AlreadyInPool(GameError):
    code = "already_in_pool"
    message = "Already in pool"
