from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON, func
from . import Base

class Friend(Base):
    __tablename__ = 'friends'
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), index=True, nullable=False)
    first_name = Column(String(150), nullable=False)
    last_name = Column(String(150), nullable=True)
    photo = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)  # City, State
    neighborhood = Column(String(255), nullable=True)
    category = Column(String(50), nullable=False, default='friends')
    relationship_level = Column(String(50), nullable=False, default='acquaintance')
    interests = Column(JSON, nullable=False, default=list)
    lifestyle = Column(String(100), nullable=True)
    has_kids = Column(Boolean, default=False)
    partner = Column(String(150), nullable=True)
    introduced_by = Column(Integer, ForeignKey('friends.id', ondelete='SET NULL'), nullable=True)
    how_we_met = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    contact_info = Column(JSON, nullable=True)  # phone, email, instagram, ...
    last_interaction = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name or ''}".strip()
