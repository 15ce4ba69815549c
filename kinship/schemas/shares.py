from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, EmailStr
from .friends import FriendOut

class ShareIn(BaseModel):
    friend_id: int
    recipient_email: EmailStr
    message: Optional[str] = None

class ShareOut(BaseModel):
    id: int
    from_user_id: int
    to_user_id: int
    friend_id: Optional[int] = None
    payload: Dict[str, Any]
    message: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ShareAcceptOut(BaseModel):
    share: ShareOut
    friend: FriendOut
