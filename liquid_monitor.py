#!/usr/bin/env python3
"""Liquid Three grow light monitor."""

import asyncio
import logging
import signal
import sys
from typing import Optional

from config_loader import load_config
from monitor_app import LiquidMonitor

logger = logging.getLogger(__name__)


async def main(config_path: Optional[str] = None) -> int:
    """Load configuration, then monitor until SIGINT/SIGTERM."""
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        return 1
    logging.getLogger().setLevel(config["logging"]["level"].upper())

    app = LiquidMonitor(config)
    monitor = asyncio.create_task(app.start(), name="monitor")

    def _shutdown(signame: str):
        if not monitor.done():
            logger.info(f"Received {signame}, shutting down...")
            monitor.cancel()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _shutdown, sig.name)
        except NotImplementedError:
            # no signal handlers on Windows event loops
            pass

    exit_code = 0
    try:
        await monitor
    except asyncio.CancelledError:
        pass
    except Exception as e:
        logger.error(f"Monitor failed: {e}", exc_info=True)
        exit_code = 1
    finally:
        await app.stop()
    return exit_code


def run():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
