from typing import Callable, Iterable, List, Optional
from urllib.parse import urlparse

import aiohttp
from loguru import logger

from forward_relay.common.metrics import metrics
from forward_relay.common.models import ForwardResult


JSON_HEADERS = {"Content-Type": "application/json"}


def target_label(url: str) -> str:
    """Metrics label for a forward target: host and path, without query."""
    parsed_url = urlparse(url)
    return f"{parsed_url.netloc}{parsed_url.path}"


class EventForwarder:
    """Posts a received event, unchanged, to every URL of a forward chain.

    A client session is opened per :meth:`forward` call and closed when the
    whole chain has been walked. Failures are logged per target and never
    interrupt the chain; nothing is retried.
    """

    def __init__(
        self,
        session_factory: Optional[Callable[..., aiohttp.ClientSession]] = None,
        timeout: Optional[float] = None,
    ):
        self.session_factory = session_factory
        self.timeout = timeout

    def _open_session(self) -> aiohttp.ClientSession:
        factory = self.session_factory or aiohttp.ClientSession
        if self.timeout is None:
            return factory()
        return factory(timeout=aiohttp.ClientTimeout(total=self.timeout))

    async def send_post_json(
        self, session: aiohttp.ClientSession, url: str, body: bytes
    ) -> ForwardResult:
        """POST ``body`` to ``url`` as JSON. The response body is discarded."""
        label = url
        try:
            label = target_label(url)
            with metrics.forward_latency.labels(target=label).time():
                async with session.post(url, data=body, headers=JSON_HEADERS) as response:
                    status = response.status
        except Exception as e:
            metrics.forward_errors.labels(target=label, status_code="error").inc()
            logger.debug(f"Cannot forward event to {url}: {e}")
            return ForwardResult(target=url, error=str(e))

        if status != 200:
            metrics.forward_errors.labels(target=label, status_code=status).inc()
            logger.debug(
                f"Cannot forward event {body.decode('utf-8', errors='replace')} "
                f"to {url}: {status}"
            )
        else:
            metrics.forward_total.labels(target=label).inc()
            logger.debug(f"Event forwarded to {url}")

        return ForwardResult(target=url, status_code=status)

    async def forward(self, body: bytes, targets: Iterable[str]) -> List[ForwardResult]:
        """Forward ``body`` to each target in order."""
        results = []
        async with self._open_session() as session:
            for url in targets:
                if not url:
                    continue
                results.append(await self.send_post_json(session, url, body))

        delivered = sum(1 for r in results if r.succeeded)
        logger.debug(
            f"Forward job done: {delivered} delivered, {len(results) - delivered} failed"
        )
        return results
