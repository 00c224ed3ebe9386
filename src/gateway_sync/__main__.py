"""Entry point: one-shot synchronization of the admin API into the cache."""

import argparse
import asyncio
import logging
import sys
from typing import Any

from gateway_sync import __version__
from gateway_sync.apisix.cluster import Cluster
from gateway_sync.config import GatewaySyncConfig, LogLevel
from gateway_sync.metrics import InMemoryMetricsCollector
from gateway_sync.utils.errors import GatewaySyncError


def setup_logging(level: LogLevel) -> None:
    """Configure logging for the process."""
    logging.basicConfig(
        level=level.value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="gateway-sync",
        description="Synchronize the APISIX admin API into a local cache",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--admin-url",
        default=None,
        help="Admin API base URL (default: http://127.0.0.1:9180/apisix/admin)",
    )
    parser.add_argument(
        "--admin-key",
        default=None,
        help="Admin API key",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for the cache synchronization (default: 30)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)",
    )

    return parser.parse_args(argv)


async def run(config: GatewaySyncConfig) -> dict[str, int]:
    """Synchronize every collection once and return per-collection counts."""
    metrics = InMemoryMetricsCollector()
    async with Cluster.from_config(config, metrics=metrics) as cluster:
        counts = await cluster.sync_cache(timeout=config.cache_sync_timeout)
    logging.getLogger(__name__).debug(f"Admin API calls: {metrics.summary()}")
    return counts


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    config_kwargs: dict[str, Any] = {}
    if args.admin_url:
        config_kwargs["admin_base_url"] = args.admin_url
    if args.admin_key:
        config_kwargs["admin_key"] = args.admin_key
    if args.timeout:
        config_kwargs["cache_sync_timeout"] = args.timeout
    if args.log_level:
        config_kwargs["log_level"] = LogLevel(args.log_level)

    try:
        config = GatewaySyncConfig(**config_kwargs)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.log_level)
    logger = logging.getLogger(__name__)
    logger.info(f"Starting gateway-sync v{__version__} against {config.admin_base_url}")

    try:
        warnings = config.validate_auth_config()
        for warning in warnings:
            logger.warning(warning)
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    try:
        counts = asyncio.run(run(config))
    except GatewaySyncError as e:
        logger.error(f"Cache synchronization failed: {e}")
        return 1

    for collection, count in counts.items():
        logger.info(f"{collection}: {count} objects")
    return 0


if __name__ == "__main__":
    sys.exit(main())
