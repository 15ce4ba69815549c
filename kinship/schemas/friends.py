from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator
from ..constants import FRIEND_CATEGORIES, RELATIONSHIP_LEVELS, RELATIONSHIP_TYPES


def _check_choice(value, choices, label):
    if value is not None and value not in choices:
        raise ValueError(f"{label} must be one of: {', '.join(choices)}")
    return value


class FriendFields(BaseModel):
    last_name: Optional[str] = None
    photo: Optional[str] = None
    location: Optional[str] = None
    neighborhood: Optional[str] = None
    lifestyle: Optional[str] = None
    has_kids: Optional[bool] = None
    partner: Optional[str] = None
    introduced_by: Optional[int] = None
    how_we_met: Optional[str] = None
    notes: Optional[str] = None
    contact_info: Optional[Dict[str, Any]] = None

    @field_validator('category', check_fields=False)
    @classmethod
    def check_category(cls, v):
        return _check_choice(v, FRIEND_CATEGORIES, 'category')

    @field_validator('relationship_level', check_fields=False)
    @classmethod
    def check_level(cls, v):
        return _check_choice(v, RELATIONSHIP_LEVELS, 'relationship_level')


class FriendIn(FriendFields):
    first_name: str = Field(min_length=1, max_length=150)
    category: str = 'friends'
    relationship_level: str = 'acquaintance'
    interests: List[str] = Field(default_factory=list)
    has_kids: bool = False


class FriendUpdateIn(FriendFields):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    category: Optional[str] = None
    relationship_level: Optional[str] = None
    interests: Optional[List[str]] = None

    # omitted means unchanged; these columns can never be cleared
    @field_validator('first_name', 'category', 'relationship_level', 'interests')
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f'{info.field_name} cannot be null')
        return v


class FriendOut(BaseModel):
    id: int
    first_name: str
    last_name: Optional[str] = None
    photo: Optional[str] = None
    location: Optional[str] = None
    neighborhood: Optional[str] = None
    category: str
    relationship_level: str
    interests: List[str] = Field(default_factory=list)
    lifestyle: Optional[str] = None
    has_kids: Optional[bool] = None
    partner: Optional[str] = None
    introduced_by: Optional[int] = None
    how_we_met: Optional[str] = None
    notes: Optional[str] = None
    contact_info: Optional[Dict[str, Any]] = None
    last_interaction: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InteractionIn(BaseModel):
    note: Optional[str] = None


class RelationshipIn(BaseModel):
    friend_id: int
    related_friend_id: int
    relationship_type: str

    @field_validator('relationship_type')
    @classmethod
    def check_type(cls, v):
        return _check_choice(v, RELATIONSHIP_TYPES, 'relationship_type')


class RelationshipOut(BaseModel):
    id: int
    friend_id: int
    related_friend_id: int
    relationship_type: str

    class Config:
        from_attributes = True


class ActivityOut(BaseModel):
    id: int
    friend_id: int
    activity_type: str
    description: str
    timestamp: Optional[datetime] = None

    class Config:
        from_attributes = True


class ActivityWithFriendOut(ActivityOut):
    friend: Optional[FriendOut] = None


class StatsOut(BaseModel):
    total_friends: int
    close_friends: int
    new_connections: int
    category_breakdown: Dict[str, int]
    relationship_level_breakdown: Dict[str, int]
