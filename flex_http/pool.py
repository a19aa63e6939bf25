from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class PoolLimits:
    # httpx pools per client, so the per-host cap bounds the whole pool
    max_connections_per_host: int = 6
    keepalive_expiry: float = 10.0

    def to_httpx_limits(self) -> httpx.Limits:
        return httpx.Limits(
            max_connections=self.max_connections_per_host,
            max_keepalive_connections=self.max_connections_per_host,
            keepalive_expiry=self.keepalive_expiry,
        )
