import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


AVATAR_URL = "https://api.dicebear.com/7.x/pixel-art/svg?seed={address}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WireModel(BaseModel):
    """Base for everything that goes over the wire in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class PoolStatus(str, Enum):
    WAITING = "waiting"
    # clients model an `active` state; the engine never enters it
    ACTIVE = "active"
    ENDED = "ended"


class Player(WireModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    session_id: str = Field(exclude=True)
    address: str
    stake: float = Field(gt=0)
    joined_at: datetime = Field(default_factory=utcnow)
    avatar: str = ""
    badges: list[str] = Field(default_factory=list)
    is_alive: bool = True

    @classmethod
    def for_session(cls, session_id: str, address: str, stake: float) -> "Player":
        return cls(
            session_id=session_id,
            address=address,
            stake=stake,
            avatar=AVATAR_URL.format(address=address),
        )


class RugEvent(WireModel):
    timestamp: datetime = Field(default_factory=utcnow)
    winner: Player
    total_prize: float


class Pool(WireModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    total_staked: float = 0
    players: list[Player] = Field(default_factory=list)
    time_remaining: int
    max_players: int
    min_stake: float
    max_stake: float
    status: PoolStatus = PoolStatus.WAITING
    winner: Player | None = None
    rug_event: RugEvent | None = None

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.max_players

    @property
    def is_empty(self) -> bool:
        return not self.players

    def find_player(self, session_id: str) -> Player | None:
        for player in self.players:
            if player.session_id == session_id:
                return player
        return None

    def recompute_total(self) -> None:
        self.total_staked = sum(player.stake for player in self.players)
