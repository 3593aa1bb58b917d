"""Color relay WebSocket: served at / (next to the UI) and /ws."""
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..services.messages import decode_frame

logger = logging.getLogger(__name__)
router = APIRouter()


async def _receive_payload(websocket: WebSocket) -> str | None:
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(code=message.get("code", 1000), reason=message.get("reason"))
    return decode_frame(message)


@router.websocket("/")
@router.websocket("/ws")
async def color_socket(websocket: WebSocket):
    relay = websocket.app.state.relay
    await websocket.accept()
    entry = await relay.coordinator.join(websocket)

    try:
        while True:
            payload = await _receive_payload(websocket)
            entry.mark_alive()
            if payload is None:
                continue
            try:
                await relay.coordinator.handle_message(payload)
            except Exception as e:
                logger.exception("Error processing message: %s", e)
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.exception("WebSocket error: %s", e)
    finally:
        relay.registry.discard(websocket)
        logger.info("Client disconnected (%d remaining)", len(relay.registry))
