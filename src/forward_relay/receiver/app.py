import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from loguru import logger

from forward_relay.common.config import RelayConfig
from forward_relay.common.logging import setup_logging
from forward_relay.forwarder.client import EventForwarder
from forward_relay.forwarder.scheduler import ForwardScheduler
from forward_relay.receiver.handler import ForwardActionCallback, ForwardActionsHandler
from forward_relay.receiver.server import run_server


_app_config: Optional[RelayConfig] = None
_scheduler: Optional[ForwardScheduler] = None
_handler: Optional[ForwardActionsHandler] = None


def get_app_config() -> RelayConfig:
    global _app_config
    if not _app_config:
        raise RuntimeError("Application config not initialized")
    return _app_config


def get_scheduler() -> ForwardScheduler:
    global _scheduler
    if not _scheduler:
        raise RuntimeError("Scheduler not initialized")
    return _scheduler


def get_handler() -> ForwardActionsHandler:
    global _handler
    if not _handler:
        raise RuntimeError("Forward actions handler not initialized")
    return _handler


def load_config_from_file(config_path: str) -> RelayConfig:
    """Load configuration from a YAML file."""
    file_path = Path(config_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(file_path, "r") as f:
        config_data = yaml.safe_load(f)

    return RelayConfig.model_validate(config_data or {})


def log_forward_action(json: str):
    """Default callback: report the event in the service log."""
    logger.info(f"Forward action received: {json}")


def setup_app(config: RelayConfig, callback: Optional[ForwardActionCallback] = None):
    """Initialize the application with the given config."""
    global _app_config, _scheduler, _handler

    setup_logging(config.log_level)

    _scheduler = ForwardScheduler(max_workers=config.max_workers)
    _handler = ForwardActionsHandler(
        scheduler=_scheduler,
        callback=callback or log_forward_action,
        forward_chain=config.forward_chain,
        forwarder=EventForwarder(timeout=config.timeout),
    )

    _app_config = config

    logger.info("Forward Relay initialized")
    logger.info(f"Forward chain: {config.forward_chain or '<empty>'}")


@click.group()
def cli():
    """Forward Relay CLI"""
    pass


@cli.command("serve")
@click.option(
    "--config",
    "-c",
    required=False,
    help="Path to configuration file (defaults to environment variables only)",
)
@click.option(
    "--forward-chain",
    "-f",
    required=False,
    help="Comma-separated URLs to relay events to, overrides the config",
)
def serve(config: Optional[str], forward_chain: Optional[str]):
    """Start the forward actions receiver."""
    try:
        config_obj = load_config_from_file(config) if config else RelayConfig()
        if forward_chain is not None:
            config_obj = config_obj.model_copy(update={"forward_chain": forward_chain})
        setup_app(config_obj)
        run_server(config_obj)
    except Exception as e:
        logger.error(f"Failed to start forward relay: {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
