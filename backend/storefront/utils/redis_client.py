"""Redis client factory for cart storage."""

from __future__ import annotations

import ssl
from typing import Any

from redis import Redis

TLS_HOST_MARKERS = (".upstash.io",)


def create_redis_client(url: str, **kwargs: Any) -> Redis:
    """Build a client from ``url``; hosted providers that require TLS get ``rediss://``.

    Certificate verification is disabled for TLS connections.
    """
    needs_tls = any(marker in url for marker in TLS_HOST_MARKERS)
    if needs_tls and url.startswith("redis://"):
        url = "rediss://" + url[len("redis://") :]

    client = Redis.from_url(url, **kwargs)

    if url.startswith("rediss://"):
        pool_kwargs = getattr(client.connection_pool, "connection_kwargs", None)
        if pool_kwargs is not None:
            pool_kwargs["ssl_cert_reqs"] = ssl.CERT_NONE

    return client
