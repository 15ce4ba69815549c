from pydantic import BaseModel, EmailStr, Field
from typing import Optional

class RegisterIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    first_name: Optional[str] = None
    last_name: Optional[str] = None

class TokenOut(BaseModel):
    access_token: str
    token_type: str = 'bearer'
    refresh_token: str | None = None

class UserOut(BaseModel):
    id: int
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    instagram_connected: bool = False

    class Config:
        from_attributes = True

class UserUpdateIn(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None

class RefreshIn(BaseModel):
    refresh_token: str

class ActionOkOut(BaseModel):
    ok: bool = True
    message: Optional[str] = None
