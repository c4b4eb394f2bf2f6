"""
Fork choice monitor CLI entry point.

Polls a set of beacon nodes and serves their heads and the fork choice
tree of a Lighthouse node to a browser dashboard.

Usage::

    python -m fork_mon --config-file config.yaml
    python -m fork_mon --config-file config.yaml --port 9090 -v

Options:
    --config-file  Path to the monitor YAML file (default: /config.yaml)
    --host         Address the dashboard binds to (overrides the config file)
    --port         Port the dashboard listens on (overrides the config file)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from fork_mon.api import ApiServer, ApiServerConfig
from fork_mon.config import ApiSettings, MonitorConfig
from fork_mon.monitor import MonitorService

DEFAULT_CONFIG_FILE = Path("/config.yaml")

logger = logging.getLogger(__name__)


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for better readability."""

    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    CYAN = "\x1b[38;5;51m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        timestamp = f"{self.CYAN}{self.formatTime(record, self.datefmt)}{self.RESET}"
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"
        return f"{timestamp} {levelname} {name}: {record.getMessage()}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure logging for the monitor with optional colors."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)

    if no_color:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = ColoredFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)

    # Per-request access lines drown the polling logs.
    if not verbose:
        logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)


def apply_overrides(config: MonitorConfig, host: str | None, port: int | None) -> MonitorConfig:
    """Return the config with command line listen options applied."""
    if host is None and port is None:
        return config
    api = ApiSettings(
        host=host if host is not None else config.api.host,
        port=port if port is not None else config.api.port,
    )
    return config.model_copy(update={"api": api})


async def run_monitor(config: MonitorConfig) -> None:
    """
    Register the nodes, then poll them and serve the dashboard.

    Runs until cancelled.
    """
    logger.info("Registering %d endpoints", len(config.endpoints))
    monitor = await MonitorService.from_config(config)
    for node in monitor.nodes:
        logger.info("%s", node)

    api_server = ApiServer(
        config=ApiServerConfig(
            host=config.api.host,
            port=config.api.port,
            static_dir=config.output_dir,
        ),
        monitor_getter=lambda: monitor,
    )

    try:
        async with asyncio.TaskGroup() as tg:
            tg.create_task(monitor.run())
            tg.create_task(api_server.run())
    finally:
        await api_server._async_stop()
        await monitor.aclose()


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Ethereum consensus fork choice monitor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config-file",
        type=Path,
        default=DEFAULT_CONFIG_FILE,
        help=f"Path to the monitor YAML file (default: {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Address the dashboard binds to",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port the dashboard listens on",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )

    args = parser.parse_args()

    setup_logging(args.verbose, args.no_color)

    try:
        config = MonitorConfig.from_yaml_file(args.config_file)
    except (OSError, yaml.YAMLError, ValidationError) as e:
        logger.error("Cannot load config from %s: %s", args.config_file, e)
        raise SystemExit(1) from e

    config = apply_overrides(config, args.host, args.port)

    try:
        asyncio.run(run_monitor(config))
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    main()
