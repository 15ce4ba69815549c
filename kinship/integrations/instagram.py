"""
Instagram Integration
Public profile-photo lookup plus the Basic Display OAuth flow
"""

import os
import re
import logging
from urllib.parse import urlencode
import httpx
from . import IntegrationError, http_client

logger = logging.getLogger(__name__)

INSTAGRAM_APP_ID = os.getenv('INSTAGRAM_APP_ID')
INSTAGRAM_APP_SECRET = os.getenv('INSTAGRAM_APP_SECRET')
REDIRECT_URI = os.getenv('INSTAGRAM_REDIRECT_URI', 'http://localhost:8000/api/instagram/callback')

AUTHORIZE_URL = 'https://api.instagram.com/oauth/authorize'
TOKEN_URL = 'https://api.instagram.com/oauth/access_token'
GRAPH_URL = 'https://graph.instagram.com'

USERNAME_PATTERN = re.compile(r'^[a-zA-Z0-9_.]+$')
_PROFILE_PIC_HD = re.compile(r'"profile_pic_url_hd":"([^"]+)"')
_PROFILE_PIC = re.compile(r'"profile_pic_url":"([^"]+)"')

BROWSER_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
                  '(KHTML, like Gecko) Chrome/124.0 Safari/537.36'
}

def clean_username(username: str) -> str:
    return username.strip().lstrip('@')

def extract_profile_pic(html: str) -> str | None:
    """Pull the profile picture URL out of a public profile page"""
    match = _PROFILE_PIC_HD.search(html) or _PROFILE_PIC.search(html)
    if not match:
        return None
    return match.group(1).replace('\\u0026', '&')

async def fetch_profile_photo(username: str) -> str | None:
    """Scrape the public profile page; None when the profile is missing or private"""
    try:
        async with http_client(headers=BROWSER_HEADERS, follow_redirects=True) as client:
            response = await client.get(f"https://www.instagram.com/{username}/")
    except httpx.HTTPError as e:
        logger.warning(f"Instagram profile fetch failed for {username}: {e}")
        return None
    if response.status_code != 200:
        return None
    return extract_profile_pic(response.text)

def build_auth_url() -> str:
    params = {
        'client_id': INSTAGRAM_APP_ID,
        'redirect_uri': REDIRECT_URI,
        'scope': 'user_profile,user_media',
        'response_type': 'code',
    }
    return f"{AUTHORIZE_URL}?{urlencode(params)}"

async def exchange_code(code: str) -> str:
    """Exchange an OAuth authorization code for an access token"""
    data = {
        'client_id': INSTAGRAM_APP_ID,
        'client_secret': INSTAGRAM_APP_SECRET,
        'grant_type': 'authorization_code',
        'redirect_uri': REDIRECT_URI,
        'code': code,
    }
    try:
        async with http_client() as client:
            response = await client.post(TOKEN_URL, data=data)
    except httpx.HTTPError as e:
        raise IntegrationError(f"Instagram token exchange failed: {e}") from e
    payload = response.json() if response.content else {}
    if response.status_code != 200 or 'access_token' not in payload:
        raise IntegrationError(payload.get('error_message') or 'Failed to get access token')
    return payload['access_token']

async def _graph_get(path: str, access_token: str, fields: str, **params) -> dict:
    query = {'fields': fields, 'access_token': access_token, **params}
    try:
        async with http_client() as client:
            response = await client.get(f"{GRAPH_URL}/{path}", params=query)
    except httpx.HTTPError as e:
        raise IntegrationError(f"Instagram Graph request failed: {e}") from e
    payload = response.json() if response.content else {}
    if response.status_code != 200:
        message = (payload.get('error') or {}).get('message') or f"Graph API returned {response.status_code}"
        raise IntegrationError(message)
    return payload

async def fetch_profile(access_token: str) -> dict:
    return await _graph_get('me', access_token, 'id,username,account_type,media_count')

async def fetch_media(access_token: str, limit: int = 25) -> dict:
    return await _graph_get('me/media', access_token, 'id,media_type,media_url,thumbnail_url,caption,timestamp', limit=limit)
