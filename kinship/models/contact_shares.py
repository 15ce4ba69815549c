from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, func
from . import Base

class ContactShare(Base):
    __tablename__ = 'contact_shares'
    id = Column(Integer, primary_key=True)
    from_user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), index=True, nullable=False)
    to_user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), index=True, nullable=False)
    friend_id = Column(Integer, ForeignKey('friends.id', ondelete='SET NULL'), nullable=True)
    payload = Column(JSON, nullable=False)  # snapshot of the shared friend
    message = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default='pending')  # pending, accepted, declined
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    responded_at = Column(DateTime(timezone=True), nullable=True)
