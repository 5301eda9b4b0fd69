"""Realtime connection abstraction."""

import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict


class Connection(ABC):
    """
    A live bidirectional connection owned by one authenticated account.

    Transport adapters (e.g. the WebSocket endpoint) subclass this so the
    registry and dispatcher never depend on a concrete transport.
    """

    def __init__(self, account_id: int) -> None:
        self.account_id = account_id
        self.connection_id = uuid.uuid4().hex

    @abstractmethod
    async def send(self, event: str, data: Dict[str, Any]) -> None:
        """
        Push one event frame to the peer.

        Raises:
            Exception: Transport-specific error if the peer is gone
        """
        pass

    @abstractmethod
    async def close(self, code: int = 1000) -> None:
        """Close the connection from the server side."""
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(account_id={self.account_id}, id='{self.connection_id}')>"
