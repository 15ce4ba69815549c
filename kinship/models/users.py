from sqlalchemy import Column, Integer, String, DateTime, func
from . import Base

class User(Base):
    __tablename__ = 'users'
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    first_name = Column(String(150), nullable=True)
    last_name = Column(String(150), nullable=True)
    hashed_password = Column(String, nullable=False)
    profile_image_url = Column(String, nullable=True)
    instagram_access_token = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def instagram_connected(self) -> bool:
        return bool(self.instagram_access_token)
