"""Outbound HTTP integrations: Gravatar, Instagram and Google Places."""

import httpx

DEFAULT_TIMEOUT = httpx.Timeout(10.0, connect=5.0)


class IntegrationError(Exception):
    """An upstream service failed or answered with something unusable."""


def http_client(**kwargs) -> httpx.AsyncClient:
    kwargs.setdefault('timeout', DEFAULT_TIMEOUT)
    return httpx.AsyncClient(**kwargs)
