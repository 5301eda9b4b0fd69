"""Connection registry mapping accounts to live connections."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .connection import Connection

logger = logging.getLogger(__name__)


class ConnectionRegistry(ABC):
    """Interface for the account to connection mapping."""

    @abstractmethod
    async def register(self, connection: Connection) -> None:
        """
        Register connection for its account.

        If the account already has a registered connection, the new one
        replaces it for delivery purposes.
        """
        pass

    @abstractmethod
    async def unregister(self, connection: Connection) -> None:
        """Remove the mapping for the connection's account."""
        pass

    @abstractmethod
    async def get(self, account_id: int) -> Optional[Connection]:
        """Get the live connection of an account, if any."""
        pass

    @abstractmethod
    async def is_connected(self, account_id: int) -> bool:
        pass

    @abstractmethod
    async def connected_account_ids(self) -> List[int]:
        pass

    @abstractmethod
    async def close_all(self) -> None:
        """Close every registered connection and clear the mapping."""
        pass


class InMemoryConnectionRegistry(ConnectionRegistry):
    """
    Process-local registry.

    Mutated only from the event loop thread, so no locking is needed. A
    multi-process deployment needs a shared implementation instead.
    """

    def __init__(self) -> None:
        self._connections: Dict[int, Connection] = {}

    async def register(self, connection: Connection) -> None:
        previous = self._connections.get(connection.account_id)
        self._connections[connection.account_id] = connection

        if previous is not None and previous is not connection:
            logger.info(
                "Account %s opened another connection, replacing %s",
                connection.account_id,
                previous.connection_id,
            )
        logger.info("Realtime connection registered for account %s", connection.account_id)

    async def unregister(self, connection: Connection) -> None:
        # Last registration wins, so an older connection closing still drops the mapping.
        self._connections.pop(connection.account_id, None)
        logger.info("Realtime connection removed for account %s", connection.account_id)

    async def get(self, account_id: int) -> Optional[Connection]:
        return self._connections.get(account_id)

    async def is_connected(self, account_id: int) -> bool:
        return account_id in self._connections

    async def connected_account_ids(self) -> List[int]:
        return list(self._connections)

    async def close_all(self) -> None:
        connections = list(self._connections.values())
        self._connections.clear()

        for connection in connections:
            try:
                await connection.close(code=1001)
            except Exception:
                logger.warning("Failed to close connection %s", connection.connection_id, exc_info=True)

        if connections:
            logger.info("Closed %d realtime connections", len(connections))

    def __len__(self) -> int:
        return len(self._connections)
