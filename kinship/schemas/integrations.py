from typing import Dict, List, Optional
from pydantic import BaseModel, Field

class GravatarLookupIn(BaseModel):
    email: str = Field(min_length=3)

class GravatarLookupOut(BaseModel):
    success: bool
    url: Optional[str] = None
    high_res_url: Optional[str] = None

class InstagramPhotoIn(BaseModel):
    username: Optional[str] = None

class InstagramPhotoOut(BaseModel):
    username: str
    profile_photo_url: str
    success: bool = True

class InstagramAuthOut(BaseModel):
    auth_url: str

class PlacesSearchIn(BaseModel):
    query: Optional[str] = None

class PlaceSuggestion(BaseModel):
    id: str
    name: str
    type: str
    full_location: str
    place_id: str

class PlacesSearchOut(BaseModel):
    suggestions: List[PlaceSuggestion]

class MapsKeyOut(BaseModel):
    api_key: str

class OptionsOut(BaseModel):
    categories: Dict[str, str]
    relationship_levels: Dict[str, str]
    relationship_types: Dict[str, str]
    activity_types: Dict[str, str]
    interests: List[str]
    lifestyles: List[str]
