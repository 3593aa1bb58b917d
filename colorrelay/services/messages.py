"""Wire format.

Outbound, the server sends exactly one message type:
``{"type": "color", "data": <value>}``. Liveness uses protocol-level
ping/pong frames handled by the ASGI server, never application messages.
Inbound, every text or binary frame is an observation.
"""
import json


def encode_color(value: str) -> str:
    """Serialize a state update as sent to every client."""
    return json.dumps({"type": "color", "data": value})


def decode_frame(message: dict) -> str | None:
    """Extract the payload from an ASGI ``websocket.receive`` message.

    Binary frames are decoded as UTF-8 with replacement so they behave like text.
    Returns None when the message carries neither.
    """
    text = message.get("text")
    if text is not None:
        return text
    data = message.get("bytes")
    if data is not None:
        return data.decode("utf-8", errors="replace")
    return None
