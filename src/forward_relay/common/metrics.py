import time
from functools import wraps
from typing import Callable, Dict, Optional, Union

from loguru import logger
from prometheus_client import REGISTRY, Counter, Gauge, Histogram, start_http_server


class MetricsRegistry:
    def __init__(self, registry=None):
        # Use a provided registry or the default one
        self.registry = registry or REGISTRY

        # Receiver metrics
        self.received_total = Counter(
            "forward_relay_received_total",
            "Total number of forward actions received from the hub",
            registry=self.registry,
        )
        self.processing_time = Histogram(
            "forward_relay_processing_seconds",
            "Time spent handling forward action requests",
            ["route"],
            registry=self.registry,
        )

        # Forwarder metrics
        self.jobs_scheduled_total = Counter(
            "forward_relay_jobs_scheduled_total",
            "Total number of forwarding jobs submitted to the scheduler",
            registry=self.registry,
        )
        self.forward_total = Counter(
            "forward_relay_forward_total",
            "Total number of events forwarded successfully",
            ["target"],
            registry=self.registry,
        )
        self.forward_errors = Counter(
            "forward_relay_forward_errors",
            "Total number of errors forwarding events",
            ["target", "status_code"],
            registry=self.registry,
        )
        self.forward_latency = Histogram(
            "forward_relay_forward_seconds",
            "Time spent forwarding an event to one target",
            ["target"],
            registry=self.registry,
        )

        # Common metrics
        self.up = Gauge(
            "forward_relay_up",
            "Whether the forward relay service is up",
            ["component"],
            registry=self.registry,
        )


# Global metrics registry
metrics = MetricsRegistry()


def start_metrics_server(port: int = 9090, host: str = "127.0.0.1"):
    """Start the Prometheus metrics server."""
    start_http_server(port, host)


def measure_time(
    metric: Histogram, labels: Optional[Union[Dict[str, str], Callable]] = None
) -> Callable:
    """Decorator to measure the execution time of a coroutine function.

    ``labels`` is either a static dict or a callable receiving the first
    positional argument (usually ``self``) and returning the label dict.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            labels_dict = {}
            if callable(labels) and args:
                try:
                    labels_dict = labels(args[0])
                except Exception as e:
                    logger.error(f"Error getting labels from function: {e}")
            elif isinstance(labels, dict):
                labels_dict = labels

            start_time = time.time()
            try:
                return await func(*args, **kwargs)
            finally:
                duration = time.time() - start_time
                try:
                    metric.labels(**labels_dict).observe(duration)
                except Exception as e:
                    logger.error(f"Error recording metric: {e}")

        return wrapper

    return decorator
