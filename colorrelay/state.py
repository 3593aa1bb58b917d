"""Process-scoped relay state, built once per app and kept on ``app.state.relay``."""
from dataclasses import dataclass

from .config import Settings
from .services.broadcast import BroadcastCoordinator
from .services.liveness import LivenessMonitor
from .services.registry import ConnectionRegistry
from .services.smoothing import SmoothingEngine


@dataclass
class RelayState:
    settings: Settings
    engine: SmoothingEngine
    registry: ConnectionRegistry
    coordinator: BroadcastCoordinator
    monitor: LivenessMonitor

    @classmethod
    def from_settings(cls, settings: Settings) -> "RelayState":
        engine = SmoothingEngine(settings.buffer_size, settings.confidence_threshold)
        registry = ConnectionRegistry(settings.send_timeout)
        return cls(
            settings=settings,
            engine=engine,
            registry=registry,
            coordinator=BroadcastCoordinator(engine, registry),
            monitor=LivenessMonitor(registry, settings.ping_interval),
        )

    @property
    def current_color(self) -> str:
        return self.coordinator.current_color
