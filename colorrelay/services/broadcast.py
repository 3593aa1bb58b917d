"""Feeds observations to the smoothing engine and pushes accepted colors to every client."""
import asyncio
import logging

from fastapi import WebSocket

from .messages import encode_color
from .registry import ConnectionEntry, ConnectionRegistry
from .smoothing import SmoothingEngine, VoteResult

logger = logging.getLogger(__name__)

INITIAL_COLOR = "none"


class BroadcastCoordinator:
    """Single writer of the shared color.

    ``current_color`` is read by the join handshake and the health endpoint;
    only ``handle_message`` changes it.
    """

    def __init__(self, engine: SmoothingEngine, registry: ConnectionRegistry, initial_color: str = INITIAL_COLOR):
        self.engine = engine
        self.registry = registry
        self.current_color = initial_color

    async def join(self, websocket: WebSocket) -> ConnectionEntry:
        """Register an accepted socket and send it the current color before anything else."""
        async with self.registry.lock:
            entry = self.registry.add(websocket)
            logger.info("New client connected (%d total)", len(self.registry))
            await self._deliver(entry, encode_color(self.current_color))
        return entry

    async def handle_message(self, raw: str) -> VoteResult:
        """Vote on one inbound payload; broadcast when the consensus color changes."""
        value = raw.strip()
        async with self.registry.lock:
            result = self.engine.observe(value)
            if not result.has_winner:
                logger.debug(
                    "No confident winner: %r at %.2f (window %d)",
                    result.candidate, result.confidence, result.window_size,
                )
                return result
            if result.winner == self.current_color:
                logger.debug("Color confirmed: %r at %.2f", result.winner, result.confidence)
                return result

            payload = encode_color(result.winner)
            self.current_color = result.winner
            logger.info("Color update accepted: %s (confidence %.2f)", result.winner, result.confidence)
            delivered = await self._fan_out(payload)
            logger.debug("Color %r delivered to %d of %d clients", result.winner, delivered, len(self.registry))
        return result

    async def _fan_out(self, payload: str) -> int:
        """Write to every registered socket at once; one slow peer cannot delay the rest."""
        results = await asyncio.gather(*(self._deliver(entry, payload) for entry in self.registry.snapshot()))
        return sum(results)

    async def _deliver(self, entry: ConnectionEntry, payload: str) -> bool:
        if not entry.is_open:
            return False
        try:
            await entry.send(payload)
        except asyncio.TimeoutError:
            logger.warning("Send timed out after %.1fs, dropping client", entry.send_timeout)
            await self.registry.terminate(entry.websocket)
            return False
        except Exception as e:
            logger.warning("Send failed, dropping client: %s", e)
            await self.registry.terminate(entry.websocket)
            return False
        return True
