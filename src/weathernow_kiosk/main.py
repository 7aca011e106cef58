"""
WeatherNow Kiosk - Main Entry Point

Starts the announcement kiosk service.
"""

import asyncio
import signal
import sys
from typing import Optional

from loguru import logger

from .config import load_config
from .kiosk import Kiosk


# Global kiosk instance for signal handling
_kiosk: Optional[Kiosk] = None
_loop: Optional[asyncio.AbstractEventLoop] = None


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def signal_handler(signum, frame):
    """Handle shutdown signals"""
    logger.info(f"Received signal {signum}, shutting down...")
    if _kiosk and _loop and _loop.is_running():
        _loop.call_soon_threadsafe(lambda: asyncio.create_task(_kiosk.stop()))


async def main(config_path: Optional[str] = None):
    """
    Main entry point.

    Args:
        config_path: Optional path to configuration file
    """
    global _kiosk, _loop

    # Store event loop for signal handler
    _loop = asyncio.get_running_loop()

    config = load_config(config_path)
    configure_logging(config.kiosk.log_level)

    logger.info("=" * 50)
    logger.info("  WeatherNow Announcement Kiosk")
    logger.info("=" * 50)
    logger.info(f"Kiosk ID: {config.kiosk.id}")
    logger.info(f"Server: {config.server.url or '(none)'}")
    logger.info(f"Poll interval: {config.polling.interval}s")
    logger.info(f"Narration: {'on' if config.tts.enabled else 'off'}")
    logger.info("=" * 50)

    _kiosk = Kiosk(config)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        await _kiosk.start()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception:
        logger.exception("Fatal error")
    finally:
        await _kiosk.stop()
        logger.info("Shutdown complete")


def run():
    """Entry point for console script"""
    config_path = None

    # Check for config path argument
    if len(sys.argv) > 1:
        config_path = sys.argv[1]

    asyncio.run(main(config_path))


if __name__ == "__main__":
    run()
