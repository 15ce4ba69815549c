from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from . import Base

class Relationship(Base):
    __tablename__ = 'relationships'
    id = Column(Integer, primary_key=True)
    friend_id = Column(Integer, ForeignKey('friends.id', ondelete='CASCADE'), index=True, nullable=False)
    related_friend_id = Column(Integer, ForeignKey('friends.id', ondelete='CASCADE'), index=True, nullable=False)
    relationship_type = Column(String(50), nullable=False)  # introduced_by, partner, friend_of, colleague, family
    __table_args__ = (
        UniqueConstraint('friend_id', 'related_friend_id', 'relationship_type', name='uix_relationship_edge'),
    )
