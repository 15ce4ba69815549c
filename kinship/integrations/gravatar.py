import hashlib
import logging
import httpx
from . import http_client

logger = logging.getLogger(__name__)

GRAVATAR_BASE = 'https://www.gravatar.com/avatar'

def gravatar_hash(email: str) -> str:
    return hashlib.md5(email.strip().lower().encode('utf-8')).hexdigest()

def avatar_url(email: str, size: int = 80) -> str:
    return f"{GRAVATAR_BASE}/{gravatar_hash(email)}?s={size}"

async def lookup_gravatar(email: str) -> dict | None:
    """Return avatar URLs when the email has a Gravatar, else None"""
    digest = gravatar_hash(email)
    try:
        async with http_client() as client:
            # d=404 makes Gravatar answer 404 instead of serving a default image
            response = await client.head(f"{GRAVATAR_BASE}/{digest}", params={'d': '404'})
    except httpx.HTTPError as e:
        logger.warning(f"Gravatar lookup failed: {e}")
        return None
    if response.status_code != 200:
        return None
    return {'url': avatar_url(email, 80), 'high_res_url': avatar_url(email, 400)}
