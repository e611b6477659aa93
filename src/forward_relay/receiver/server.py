from typing import Optional

import uvicorn
from fastapi import FastAPI
from loguru import logger

from forward_relay.common.config import RelayConfig
from forward_relay.common.logging import setup_logging
from forward_relay.common.metrics import metrics, start_metrics_server
from forward_relay.receiver.routes import create_forward_actions_router, router


def create_app(config: RelayConfig) -> FastAPI:
    app = FastAPI(
        title="Forward Relay",
        description="Receives hub forward actions and relays them to subscribers",
        version="0.1.0",
    )

    app.include_router(router)
    app.include_router(create_forward_actions_router(config.path))

    @app.on_event("startup")
    async def startup_event():
        setup_logging(config.log_level)

        # Start metrics server if enabled
        if config.metrics.enabled:
            start_metrics_server(config.metrics.port, config.metrics.host)
            logger.info(
                f"Metrics server started on {config.metrics.host}:{config.metrics.port}"
            )

        metrics.up.labels(component="receiver").set(1)

        logger.info(
            f"Forward Relay listening on {config.host}:{config.port}{config.path}"
        )
        for url in config.forward_targets():
            logger.info(f"Registered forward target: {url}")

    @app.on_event("shutdown")
    async def shutdown_event():
        from forward_relay.receiver.app import get_scheduler

        await get_scheduler().shutdown(timeout=config.shutdown_timeout)
        metrics.up.labels(component="receiver").set(0)
        logger.info("Forward Relay shutting down")

    return app


def run_server(config: Optional[RelayConfig] = None):
    if not config:
        from forward_relay.receiver.app import get_app_config

        config = get_app_config()

    app = create_app(config)

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level="info",
    )
