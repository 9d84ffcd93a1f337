from datetime import datetime

from pydantic import BaseModel, Field

from .pool import utcnow


class WalletSession(BaseModel):
    session_id: str
    address: str
    balance: float = Field(ge=0)
    connected_at: datetime = Field(default_factory=utcnow)
