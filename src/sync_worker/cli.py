import argparse
import asyncio
import logging
import signal
import sys
from dataclasses import replace

from pydantic import ValidationError

from sync_worker.app import SyncService
from sync_worker.config import Settings

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the worker process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def _serve(service: SyncService) -> None:
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # Windows event loops do not support signal handlers.
            pass

    await service.start()
    try:
        await stop_event.wait()
    finally:
        await service.close()


async def _once(service: SyncService) -> bool:
    try:
        result = await service.run_once()
    finally:
        await service.close()
    return result.succeeded


def main(argv=None):
    """Run the schema sync worker CLI."""
    parser = argparse.ArgumentParser(
        description="Mirror relational schemas into a Neo4j property graph"
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Run sync cycles on a fixed schedule")
    run_parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between cycle starts (default: SYNC_INTERVAL_SECONDS)",
    )
    subparsers.add_parser("once", help="Run a single sync cycle and exit")

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 2

    try:
        settings = Settings()
        config = settings.to_sync_config()
    except (ValidationError, ValueError) as e:
        configure_logging()
        logger.error(f"Invalid configuration: {e}")
        return 2

    configure_logging(args.log_level or settings.LOG_LEVEL)

    if args.command == "run" and args.interval is not None:
        if args.interval <= 0:
            logger.error("--interval must be positive")
            return 2
        config = replace(config, interval_seconds=args.interval)

    service = SyncService(config)

    if args.command == "run":
        logger.info(f"Starting schema sync worker (Interval: {config.interval_seconds}s)")
        try:
            asyncio.run(_serve(service))
        except Exception as e:
            logger.error(f"Schema sync worker failed: {e}", exc_info=True)
            return 1
        return 0

    try:
        succeeded = asyncio.run(_once(service))
    except Exception as e:
        logger.error(f"Schema sync failed: {e}", exc_info=True)
        return 1
    return 0 if succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
