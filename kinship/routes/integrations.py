"""
Integration Routes
Gravatar lookup, Instagram photo and account linking, Google Places search
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from ..schemas.integrations import (
    GravatarLookupIn,
    GravatarLookupOut,
    InstagramPhotoIn,
    InstagramPhotoOut,
    InstagramAuthOut,
    PlacesSearchIn,
    PlacesSearchOut,
    MapsKeyOut,
    OptionsOut,
)
from ..schemas.users import ActionOkOut
from ..crud import get_user_by_id, set_instagram_token
from ..auth import get_current_user
from ..integrations import IntegrationError
from ..integrations import gravatar, instagram, places
from ..constants import (
    FRIEND_CATEGORIES,
    RELATIONSHIP_LEVELS,
    RELATIONSHIP_TYPES,
    ACTIVITY_TYPES,
    INTERESTS,
    LIFESTYLE_OPTIONS,
)
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

# ==================== GRAVATAR ====================

@router.post('/gravatar/lookup', response_model=GravatarLookupOut)
async def gravatar_lookup(payload: GravatarLookupIn, current_user: dict = Depends(get_current_user)):
    found = await gravatar.lookup_gravatar(payload.email)
    if not found:
        return {'success': False}
    return {'success': True, **found}

# ==================== INSTAGRAM ====================

@router.post('/instagram/profile-photo', response_model=InstagramPhotoOut)
async def instagram_profile_photo(payload: InstagramPhotoIn, current_user: dict = Depends(get_current_user)):
    if not payload.username or not payload.username.strip():
        raise HTTPException(400, 'Username is required')
    username = instagram.clean_username(payload.username)
    if not instagram.USERNAME_PATTERN.match(username):
        raise HTTPException(400, 'Invalid Instagram username format')

    photo_url = await instagram.fetch_profile_photo(username)
    if not photo_url:
        raise HTTPException(404, 'Instagram profile not found or is private')
    return {'username': username, 'profile_photo_url': photo_url, 'success': True}


@router.get('/instagram/auth', response_model=InstagramAuthOut)
async def instagram_auth(current_user: dict = Depends(get_current_user)):
    if not instagram.INSTAGRAM_APP_ID:
        raise HTTPException(400, 'Instagram integration is not configured')
    return {'auth_url': instagram.build_auth_url()}


@router.get('/instagram/callback', response_model=ActionOkOut)
async def instagram_callback(code: str = Query(...), current_user: dict = Depends(get_current_user)):
    try:
        access_token = await instagram.exchange_code(code)
    except IntegrationError as e:
        logger.warning(f"Instagram auth failed for user {current_user['id']}: {e}")
        raise HTTPException(502, str(e))
    await set_instagram_token(current_user['id'], access_token)
    return {'ok': True, 'message': 'Instagram connected'}


async def _instagram_token(user_id: int) -> str:
    user = await get_user_by_id(user_id)
    if not user or not user.instagram_access_token:
        raise HTTPException(401, 'Instagram not connected')
    return user.instagram_access_token


@router.get('/instagram/profile')
async def instagram_profile(current_user: dict = Depends(get_current_user)):
    token = await _instagram_token(current_user['id'])
    try:
        return await instagram.fetch_profile(token)
    except IntegrationError as e:
        raise HTTPException(502, str(e))


@router.get('/instagram/media')
async def instagram_media(current_user: dict = Depends(get_current_user)):
    token = await _instagram_token(current_user['id'])
    try:
        return await instagram.fetch_media(token)
    except IntegrationError as e:
        raise HTTPException(502, str(e))


@router.post('/instagram/disconnect', response_model=ActionOkOut)
async def instagram_disconnect(current_user: dict = Depends(get_current_user)):
    await set_instagram_token(current_user['id'], None)
    return {'ok': True, 'message': 'Instagram disconnected'}

# ==================== GOOGLE PLACES ====================

@router.post('/places/search', response_model=PlacesSearchOut)
async def places_search(payload: PlacesSearchIn, current_user: dict = Depends(get_current_user)):
    query = (payload.query or '').strip()
    if len(query) < 2:
        return {'suggestions': []}

    api_key = places.google_maps_key()
    if not api_key:
        raise HTTPException(500, 'Google Maps API key not configured')
    try:
        suggestions = await places.search_places(query, api_key)
    except IntegrationError as e:
        raise HTTPException(502, str(e))
    return {'suggestions': suggestions}


@router.get('/config/google-maps-key', response_model=MapsKeyOut)
async def google_maps_key(current_user: dict = Depends(get_current_user)):
    api_key = places.google_maps_key()
    if not api_key:
        raise HTTPException(404, 'Google Maps API key not configured')
    return {'api_key': api_key}


@router.get('/config/options', response_model=OptionsOut)
async def form_options():
    """Choices offered by the friend form and filters"""
    return {
        'categories': FRIEND_CATEGORIES,
        'relationship_levels': RELATIONSHIP_LEVELS,
        'relationship_types': RELATIONSHIP_TYPES,
        'activity_types': ACTIVITY_TYPES,
        'interests': INTERESTS,
        'lifestyles': LIFESTYLE_OPTIONS,
    }
