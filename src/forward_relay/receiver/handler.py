from typing import Callable, Optional

from fastapi import Request, Response
from loguru import logger

from forward_relay.common.config import parse_forward_chain
from forward_relay.common.metrics import metrics
from forward_relay.forwarder.client import EventForwarder
from forward_relay.forwarder.scheduler import ForwardScheduler


ForwardActionCallback = Callable[[str], None]


class ForwardActionsHandler:
    """Handles forward action events posted by the hub.

    Each event is handed to the callback and then, if a forward chain is
    configured, relayed unchanged to every URL of the chain from a
    background job. The hub always gets the default response, whatever
    happens to the relayed copies.
    """

    def __init__(
        self,
        scheduler: ForwardScheduler,
        callback: ForwardActionCallback,
        forward_chain: Optional[str] = None,
        forwarder: Optional[EventForwarder] = None,
    ):
        if scheduler is None:
            raise ValueError("scheduler cannot be None")
        if callback is None:
            raise ValueError("callback cannot be None")

        self.scheduler = scheduler
        self.callback = callback
        self.forward_chain = forward_chain
        self.forwarder = forwarder or EventForwarder()

    async def do_post(self, request: Optional[Request], response: Optional[Response]):
        if request is None or response is None:
            logger.warning(
                f"do_post called with request={request}, response={response}, both required"
            )
            return

        body = await request.body()
        json = body.decode("utf-8", errors="replace")
        logger.debug(f"Handling forward action {json}")
        metrics.received_total.inc()

        self.callback(json)

        targets = parse_forward_chain(self.forward_chain)
        if targets:
            self.scheduler.submit(lambda: self.forwarder.forward(body, targets))
