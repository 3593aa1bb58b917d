"""
Run the color relay: python -m colorrelay [--port 8080] [--buffer-size 20] [--threshold 0.6]
Environment variables (or .env) supply the defaults; flags override them.
"""
import argparse
import dataclasses
import logging
import sys
from pathlib import Path

import uvicorn

from .config import Settings
from .main import create_app

logger = logging.getLogger("colorrelay")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Broadcast a smoothed, shared color to WebSocket clients")
    parser.add_argument("--host", default=None, help="Listen address (HOST)")
    parser.add_argument("--port", type=int, default=None, help="Listen port (PORT, default 8080)")
    parser.add_argument("--buffer-size", type=int, default=None, help="Observation window size (BUFFER_SIZE)")
    parser.add_argument("--threshold", type=float, default=None, help="Winner share needed to switch color (CONFIDENCE_THRESHOLD)")
    parser.add_argument("--ping-interval", type=float, default=None, help="Seconds between transport pings and liveness sweeps (PING_INTERVAL)")
    parser.add_argument("--send-timeout", type=float, default=None, help="Seconds before a stalled client write is dropped (SEND_TIMEOUT)")
    parser.add_argument("--static-dir", type=Path, default=None, help="Directory with index.html (STATIC_DIR)")
    parser.add_argument("--log-level", default=None, help="Log level (LOG_LEVEL)")
    parser.add_argument("--no-smoothing", action="store_true", help="Relay every observation immediately")
    return parser


def settings_from_args(args: argparse.Namespace, base: Settings | None = None) -> Settings:
    """Overlay command line flags on environment settings."""
    base = base or Settings.from_env()
    overrides = {
        "host": args.host,
        "port": args.port,
        "buffer_size": args.buffer_size,
        "confidence_threshold": args.threshold,
        "ping_interval": args.ping_interval,
        "send_timeout": args.send_timeout,
        "static_dir": args.static_dir,
        "log_level": args.log_level.upper() if args.log_level else None,
    }
    settings = dataclasses.replace(base, **{k: v for k, v in overrides.items() if v is not None})
    if args.no_smoothing:
        settings = settings.without_smoothing()
    return settings


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        settings = settings_from_args(args)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(2)

    app = create_app(settings)
    shown_host = "localhost" if settings.host in ("0.0.0.0", "::") else settings.host
    logger.info("Server running on port %d", settings.port)
    logger.info("View the interface at: http://%s:%d", shown_host, settings.port)
    logger.info("WebSocket endpoint: ws://%s:%d", shown_host, settings.port)
    logger.info(
        "Smoothing: window %d, threshold %.2f; ping every %.0fs",
        settings.buffer_size, settings.confidence_threshold, settings.ping_interval,
    )

    # uvicorn pings every socket and closes ones that miss a pong within the
    # same interval; it also logs and exits 1 itself when the port cannot be bound.
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        ws_ping_interval=settings.ping_interval,
        ws_ping_timeout=settings.ping_interval,
    )


if __name__ == "__main__":
    main()
