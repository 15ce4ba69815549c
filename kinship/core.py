"""
Shared connections and Prometheus metrics
REDIS stays None when no Redis is configured or reachable; callers treat that as "no cache"
"""
import os
import asyncio
from prometheus_client import Counter, Histogram, start_http_server
import logging

logger = logging.getLogger(__name__)

REDIS = None

REDIS_CONNECT_ATTEMPTS = 3
REDIS_RETRY_DELAY = 3  # seconds

HTTP_REQUESTS = Counter(
    'kinship_http_requests_total',
    'HTTP requests handled',
    ['method', 'status'],
)
HTTP_LATENCY = Histogram(
    'kinship_http_request_duration_seconds',
    'HTTP request latency',
    ['method'],
)
CONTACT_IMPORTS = Counter(
    'kinship_contact_imports_total',
    'Contact drafts extracted by import source',
    ['source'],
)


def init_metrics(port: int = None):
    """Expose metrics on METRICS_PORT; 0 disables the exporter"""
    if port is None:
        port = int(os.getenv('METRICS_PORT', '8001'))
    if not port:
        logger.info("Prometheus metrics server disabled")
        return
    try:
        start_http_server(port)
        logger.info(f"Prometheus metrics server started on port {port}")
    except OSError as e:
        logger.warning(f'Prometheus start failed: {e}')


async def _open_redis(url: str):
    from redis import asyncio as aioredis

    conn = aioredis.from_url(
        url,
        decode_responses=False,
        max_connections=20,
        health_check_interval=30,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    try:
        await conn.ping()
    except Exception:
        await conn.aclose()
        raise
    return conn


async def redis_startup(url: str = None):
    """Connect to REDIS_URL, retrying a few times before running without Redis"""
    global REDIS
    REDIS = None

    url = url or os.getenv('REDIS_URL')
    if not url:
        logger.info("REDIS_URL not set, caching and rate limiting disabled")
        return

    for attempt in range(1, REDIS_CONNECT_ATTEMPTS + 1):
        try:
            REDIS = await _open_redis(url)
            logger.info(f"Redis connected on attempt {attempt}")
            return
        except Exception as e:
            logger.warning(f'Redis connect attempt {attempt}/{REDIS_CONNECT_ATTEMPTS} failed: {e}')
            if attempt < REDIS_CONNECT_ATTEMPTS:
                await asyncio.sleep(REDIS_RETRY_DELAY)

    logger.error("Redis unavailable, continuing without cache")


async def shutdown_connections():
    global REDIS
    if not REDIS:
        return
    try:
        await REDIS.aclose()
        logger.info("Redis connection closed")
    except Exception as e:
        logger.error(f"Error closing Redis connection: {e}")
    REDIS = None
