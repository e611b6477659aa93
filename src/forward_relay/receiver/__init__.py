"""Receiver component: the hub-facing forward actions endpoint."""

from forward_relay.receiver.app import (
    cli,
    get_app_config,
    get_handler,
    get_scheduler,
    load_config_from_file,
    log_forward_action,
    setup_app,
)
from forward_relay.receiver.handler import ForwardActionCallback, ForwardActionsHandler
from forward_relay.receiver.server import create_app, run_server

__all__ = [
    "get_app_config",
    "get_handler",
    "get_scheduler",
    "load_config_from_file",
    "log_forward_action",
    "setup_app",
    "cli",
    "create_app",
    "run_server",
    "ForwardActionCallback",
    "ForwardActionsHandler",
]
