import logging

from ..config import STARTING_BALANCE
from ..models import WalletSession
from .errors import InsufficientBalance, NotRegistered

log = logging.getLogger(__name__)


class SessionRegistry:
    """Connection-scoped sessions and their virtual balances. In memory only."""

    def __init__(self, starting_balance: float = STARTING_BALANCE):
        self.starting_balance = starting_balance
        self._sessions: dict[str, WalletSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def register(
        self, session_id: str, address: str, balance: float | None = None
    ) -> WalletSession:
        """Create the session for a connection, or re-label an existing one.

        A connection keeps its balance for its whole lifetime, so a second
        register call only updates the declared address.
        """
        session = self._sessions.get(session_id)
        if session is not None:
            session.address = address
            return session

        session = WalletSession(
            session_id=session_id,
            address=address,
            balance=balance or self.starting_balance,
        )
        self._sessions[session_id] = session
        log.info(f"Registered wallet {address} for session {session_id}")
        return session

    def get(self, session_id: str) -> WalletSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise NotRegistered()
        return session

    def debit(self, session_id: str, amount: float) -> float:
        session = self.get(session_id)
        if amount > session.balance:
            raise InsufficientBalance()
        session.balance -= amount
        return session.balance

    def credit(self, session_id: str, amount: float) -> float:
        session = self.get(session_id)
        session.balance += amount
        return session.balance

    def release(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is not None:
            log.info(f"Released session {session_id} ({session.address})")
