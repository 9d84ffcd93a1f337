import json
import logging

import anyio
from fastapi import WebSocket
from fastapi.websockets import WebSocketState

from ..game import MessageDispatcher, PoolBroadcaster
from ..game.dispatch import error_reply

log = logging.getLogger(__name__)


class WebSocketHandler:
    """Handles WebSocket message processing and communication"""

    @staticmethod
    async def send_snapshot(websocket: WebSocket, dispatcher: MessageDispatcher) -> int:
        """Send the current pool to a newly connected client, return its seq"""
        snapshot = await dispatcher.engine.snapshot()
        await websocket.send_json(snapshot)
        return snapshot["seq"]

    @staticmethod
    def parse_message(message: dict) -> dict:
        """Decode one inbound ASGI message into a JSON object"""
        text = message.get("text")
        if text is None:
            raise ValueError("binary frames are not supported")
        msg_data = json.loads(text)
        if not isinstance(msg_data, dict):
            raise ValueError("message must be a JSON object")
        return msg_data

    @staticmethod
    async def handle_messages(
            websocket: WebSocket,
            session_id: str,
            dispatcher: MessageDispatcher,
    ) -> None:
        """Main message handling loop; replies go to this connection only"""
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break

                try:
                    msg_data = WebSocketHandler.parse_message(message)
                except ValueError as e:
                    log.error(f"Error processing message from {session_id}: {e}")
                    await websocket.send_json(error_reply("Invalid message format"))
                    continue

                await websocket.send_json(await dispatcher.dispatch(session_id, msg_data))
        finally:
            # runs even when the connection task group is being cancelled
            with anyio.CancelScope(shield=True):
                await dispatcher.engine.disconnect(session_id)

    @staticmethod
    async def broadcast_to_client(websocket: WebSocket, subscriber, after_seq: int) -> None:
        """Forward pool events newer than the snapshot to this client"""
        async for message in PoolBroadcaster.newer_than(subscriber, after_seq):
            if websocket.client_state == WebSocketState.CONNECTED:
                await websocket.send_text(message)
