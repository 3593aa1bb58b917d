"""Set of open client sockets, each carrying a liveness flag."""
import asyncio
import logging

from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

logger = logging.getLogger(__name__)

CLOSE_GOING_AWAY = 1001
DEFAULT_SEND_TIMEOUT = 2.0


class ConnectionEntry:
    """One accepted socket plus the flag the liveness monitor flips.

    Every write is bounded by ``send_timeout`` so a peer that stops reading
    cannot stall the caller.
    """

    def __init__(self, websocket: WebSocket, send_timeout: float = DEFAULT_SEND_TIMEOUT):
        self.websocket = websocket
        self.send_timeout = send_timeout
        self.is_alive = True

    def mark_alive(self) -> None:
        self.is_alive = True

    @property
    def is_open(self) -> bool:
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    async def send(self, text: str) -> None:
        await asyncio.wait_for(self.websocket.send_text(text), timeout=self.send_timeout)

    async def close(self, code: int = CLOSE_GOING_AWAY) -> None:
        """Best-effort close; a socket that is already gone or stalled is left alone."""
        try:
            await asyncio.wait_for(self.websocket.close(code=code), timeout=self.send_timeout)
        except asyncio.TimeoutError:
            logger.debug("Close timed out after %.1fs", self.send_timeout)
        except (RuntimeError, ConnectionError, WebSocketDisconnect) as e:
            logger.debug("Close on dead socket ignored: %s", e)


class ConnectionRegistry:
    """Registered sockets keyed by handle, in join order.

    ``lock`` serializes every multi-step sequence that reads the set and
    writes to its members (join, broadcast, liveness sweep). Writes under it
    are time-bounded, so the lock is never held longer than one send timeout
    per sequence.
    """

    def __init__(self, send_timeout: float = DEFAULT_SEND_TIMEOUT):
        if send_timeout <= 0:
            raise ValueError(f"send_timeout must be positive, got {send_timeout}")
        self._entries: dict[WebSocket, ConnectionEntry] = {}
        self.send_timeout = send_timeout
        self.lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, websocket) -> bool:
        return websocket in self._entries

    def add(self, websocket: WebSocket) -> ConnectionEntry:
        entry = self._entries.get(websocket)
        if entry is None:
            entry = ConnectionEntry(websocket, self.send_timeout)
            self._entries[websocket] = entry
        return entry

    def get(self, websocket: WebSocket) -> ConnectionEntry | None:
        return self._entries.get(websocket)

    def discard(self, websocket: WebSocket) -> ConnectionEntry | None:
        return self._entries.pop(websocket, None)

    def snapshot(self) -> list[ConnectionEntry]:
        return list(self._entries.values())

    async def terminate(self, websocket: WebSocket, code: int = CLOSE_GOING_AWAY) -> None:
        """Drop a socket from the registry, then close it."""
        entry = self.discard(websocket)
        if entry is not None:
            await entry.close(code)

    async def close_all(self, code: int = CLOSE_GOING_AWAY) -> int:
        entries = self.snapshot()
        self._entries.clear()
        await asyncio.gather(*(entry.close(code) for entry in entries))
        return len(entries)
