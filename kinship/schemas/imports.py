from typing import Optional
from pydantic import BaseModel, Field

class TextImportIn(BaseModel):
    text: str

class InstagramImportIn(BaseModel):
    username: str

class ContactDraftOut(BaseModel):
    first_name: str = ''
    last_name: str = ''
    phone: str = ''
    email: str = ''
    instagram: Optional[str] = None
    source: str

    class Config:
        from_attributes = True

class ScreenshotImportOut(BaseModel):
    contact: ContactDraftOut
    raw_text: str

class FaceRegionOut(BaseModel):
    id: str
    x: float
    y: float
    width: float
    height: float
    confidence: float

    class Config:
        from_attributes = True

class FaceCropOut(BaseModel):
    data_url: str
    width: int = Field(description='Pixel width of the crop')
    height: int = Field(description='Pixel height of the crop')
