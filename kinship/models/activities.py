from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from . import Base

class Activity(Base):
    __tablename__ = 'activities'
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), index=True, nullable=False)
    friend_id = Column(Integer, ForeignKey('friends.id', ondelete='CASCADE'), index=True, nullable=False)
    activity_type = Column(String(50), nullable=False)  # added, updated, moved, interacted, imported, shared
    description = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), index=True)
