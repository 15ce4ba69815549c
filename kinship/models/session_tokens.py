from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from . import Base

class SessionToken(Base):
    """A device login; only the SHA-256 of the refresh token is stored"""
    __tablename__ = 'session_tokens'
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), index=True, nullable=False)
    token_hash = Column(String(64), unique=True, nullable=False, index=True)
    device_id = Column(String(255), nullable=True)
    user_agent = Column(String(255), nullable=True)
    ip = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_used_at = Column(DateTime(timezone=True), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)
