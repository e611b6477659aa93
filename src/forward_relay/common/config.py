from typing import List, Optional

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class MetricsConfig(BaseModel):
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 9090
    path: str = "/metrics"


def parse_forward_chain(chain: Optional[str]) -> List[str]:
    """Split a comma-separated forward chain into target URLs.

    Blank segments are dropped; order and duplicates are kept.
    """
    if not chain:
        return []
    return [url.strip() for url in chain.split(",") if url.strip()]


class RelayConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_prefix="FORWARD_RELAY_",
        extra="ignore",
    )

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    path: str = "/forwardactions"
    forward_chain: Optional[str] = None
    max_workers: int = 4
    timeout: Optional[float] = None  # seconds, None keeps the client default
    shutdown_timeout: float = 10.0  # seconds
    metrics: MetricsConfig = MetricsConfig()

    def forward_targets(self) -> List[str]:
        return parse_forward_chain(self.forward_chain)
