"""Common utilities and models for the forward relay."""

from forward_relay.common.config import MetricsConfig, RelayConfig, parse_forward_chain
from forward_relay.common.logging import setup_logging
from forward_relay.common.metrics import (
    MetricsRegistry,
    measure_time,
    metrics,
    start_metrics_server,
)
from forward_relay.common.models import ForwardResult

__all__ = [
    # Config
    "MetricsConfig",
    "RelayConfig",
    "parse_forward_chain",
    # Logging
    "setup_logging",
    # Models
    "ForwardResult",
    # Metrics
    "MetricsRegistry",
    "metrics",
    "measure_time",
    "start_metrics_server",
]
