"""WebSocket transport for realtime connections."""

from typing import Any, Dict

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from socialhub.core.realtime.connection import Connection


class WebSocketConnection(Connection):
    """Connection that writes ``{"event", "data"}`` JSON frames to a WebSocket."""

    def __init__(self, account_id: int, websocket: WebSocket) -> None:
        super().__init__(account_id)
        self._websocket = websocket

    async def send(self, event: str, data: Dict[str, Any]) -> None:
        await self._websocket.send_json({"event": event, "data": data})

    async def close(self, code: int = 1000) -> None:
        if self._websocket.application_state != WebSocketState.DISCONNECTED:
            await self._websocket.close(code=code)
