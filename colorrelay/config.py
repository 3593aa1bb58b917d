"""Runtime settings from the environment (and .env at the project root)."""
import os
from dataclasses import dataclass, field, replace
from pathlib import Path

from dotenv import load_dotenv

from .services.liveness import DEFAULT_PING_INTERVAL
from .services.registry import DEFAULT_SEND_TIMEOUT
from .services.smoothing import DEFAULT_BUFFER_SIZE, DEFAULT_CONFIDENCE_THRESHOLD

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_STATIC_DIR = PACKAGE_DIR / "static"
DEFAULT_PORT = 8080
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _env_int(env, name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(env, name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    buffer_size: int = DEFAULT_BUFFER_SIZE
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    ping_interval: float = DEFAULT_PING_INTERVAL
    send_timeout: float = DEFAULT_SEND_TIMEOUT
    static_dir: Path = field(default=DEFAULT_STATIC_DIR)
    log_level: str = "INFO"

    def __post_init__(self):
        if not 1 <= self.port <= 65535:
            raise ValueError(f"PORT must be between 1 and 65535, got {self.port}")
        if self.buffer_size < 1:
            raise ValueError(f"BUFFER_SIZE must be at least 1, got {self.buffer_size}")
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ValueError(f"CONFIDENCE_THRESHOLD must be between 0 and 1, got {self.confidence_threshold}")
        if self.ping_interval <= 0:
            raise ValueError(f"PING_INTERVAL must be positive, got {self.ping_interval}")
        if self.send_timeout <= 0:
            raise ValueError(f"SEND_TIMEOUT must be positive, got {self.send_timeout}")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL is not a logging level: {self.log_level!r}")

    @classmethod
    def from_env(cls, env=None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            host=env.get("HOST") or "0.0.0.0",
            port=_env_int(env, "PORT", DEFAULT_PORT),
            buffer_size=_env_int(env, "BUFFER_SIZE", DEFAULT_BUFFER_SIZE),
            confidence_threshold=_env_float(env, "CONFIDENCE_THRESHOLD", DEFAULT_CONFIDENCE_THRESHOLD),
            ping_interval=_env_float(env, "PING_INTERVAL", DEFAULT_PING_INTERVAL),
            send_timeout=_env_float(env, "SEND_TIMEOUT", DEFAULT_SEND_TIMEOUT),
            static_dir=Path(env["STATIC_DIR"]) if env.get("STATIC_DIR") else DEFAULT_STATIC_DIR,
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )

    def without_smoothing(self) -> "Settings":
        """Window of one and no threshold: every observation becomes the color at once."""
        return replace(self, buffer_size=1, confidence_threshold=0.0)
