import logging
import uuid

import anyio
from fastapi import APIRouter, WebSocket

from ..dependencies import DispatcherDep
from .websocket_handler import WebSocketHandler

log = logging.getLogger(__name__)
router = APIRouter()


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, dispatcher: DispatcherDep) -> None:
    """Main WebSocket endpoint; one session per connection"""
    session_id = str(uuid.uuid4())
    await websocket.accept()
    log.info(f"Connection {session_id} opened")

    try:
        # subscribe before taking the snapshot so no later event is missed;
        # events the snapshot already reflects are skipped by seq
        async with dispatcher.engine.broadcaster.subscribe() as subscriber:
            snapshot_seq = await WebSocketHandler.send_snapshot(websocket, dispatcher)

            async with anyio.create_task_group() as task_group:

                async def run_message_handler() -> None:
                    """Task to handle incoming WebSocket messages"""
                    await WebSocketHandler.handle_messages(
                        websocket=websocket,
                        session_id=session_id,
                        dispatcher=dispatcher,
                    )
                    task_group.cancel_scope.cancel()

                task_group.start_soon(run_message_handler)

                # Handle outgoing broadcasts to this client
                await WebSocketHandler.broadcast_to_client(websocket, subscriber, snapshot_seq)

    except Exception as e:
        log.error(f"WebSocket error for session {session_id}: {e}")
        raise
    finally:
        log.info(f"Connection {session_id} closed")
