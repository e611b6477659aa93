"""Forwarder component: relays received events to the forward chain."""

from forward_relay.forwarder.client import EventForwarder, target_label
from forward_relay.forwarder.scheduler import ForwardScheduler

__all__ = [
    "EventForwarder",
    "ForwardScheduler",
    "target_label",
]
