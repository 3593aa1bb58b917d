"""Periodic sweep that drops clients which stopped answering transport pings."""
import asyncio
import logging
from contextlib import suppress

from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)

DEFAULT_PING_INTERVAL = 30.0


class LivenessMonitor:
    """One missed liveness check terminates a connection.

    The check itself is the WebSocket protocol ping: uvicorn sends one every
    ``interval`` seconds (``ws_ping_interval``) and closes the transport of a
    peer that has not answered within the same period (``ws_ping_timeout``).
    Each sweep sets a connection's flag to whether its transport is still
    open, i.e. whether it answered; any inbound frame also sets it. A flag
    still clear at the next sweep means no answer for a full interval.
    """

    def __init__(self, registry: ConnectionRegistry, interval: float = DEFAULT_PING_INTERVAL):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.registry = registry
        self.interval = interval
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info("Liveness monitor started (every %.0fs)", self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Liveness monitor stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.sweep()
            except Exception as e:
                logger.exception("Liveness sweep failed: %s", e)

    async def sweep(self) -> int:
        """Run one liveness cycle; returns how many connections were terminated."""
        stale = []
        async with self.registry.lock:
            for entry in self.registry.snapshot():
                if not entry.is_alive:
                    stale.append(entry)
                    self.registry.discard(entry.websocket)
                    continue
                entry.is_alive = entry.is_open

        if stale:
            logger.info("Terminating %d inactive client(s)", len(stale))
        await asyncio.gather(*(entry.close() for entry in stale))
        return len(stale)
