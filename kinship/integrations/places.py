import os
import logging
import httpx
from . import IntegrationError, http_client

logger = logging.getLogger(__name__)

AUTOCOMPLETE_URL = 'https://maps.googleapis.com/maps/api/place/autocomplete/json'
NEIGHBORHOOD_TYPES = {'neighborhood', 'sublocality', 'sublocality_level_1', 'sublocality_level_2'}

def google_maps_key() -> str | None:
    return os.getenv('GOOGLE_MAPS_API_KEY')

def classify_place(types: list[str]) -> str:
    if NEIGHBORHOOD_TYPES.intersection(types):
        return 'neighborhood'
    if 'administrative_area_level_3' in types:
        return 'administrative_area_level_3'
    return 'locality'

def to_suggestion(prediction: dict) -> dict:
    formatting = prediction.get('structured_formatting') or {}
    return {
        'id': prediction['place_id'],
        'name': formatting.get('main_text') or prediction.get('description', ''),
        'type': classify_place(prediction.get('types') or []),
        'full_location': prediction.get('description', ''),
        'place_id': prediction['place_id'],
    }

async def search_places(query: str, api_key: str) -> list[dict]:
    """Autocomplete US places (establishments and geographic areas)"""
    params = {
        'input': query,
        'key': api_key,
        'components': 'country:us',
        'types': 'establishment|geocode',
        'language': 'en',
    }
    try:
        async with http_client() as client:
            response = await client.get(AUTOCOMPLETE_URL, params=params)
            data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        raise IntegrationError(f"Places search failed: {e}") from e

    status = data.get('status')
    if status not in ('OK', 'ZERO_RESULTS'):
        logger.error(f"Google Places API error: {status} {data.get('error_message', '')}")
        raise IntegrationError(f"Places search failed: {status}")
    return [to_suggestion(p) for p in data.get('predictions') or []]
