"""initial

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(150), nullable=True),
        sa.Column('last_name', sa.String(150), nullable=True),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('profile_image_url', sa.String(), nullable=True),
        sa.Column('instagram_access_token', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now())
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_table('session_tokens',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token_hash', sa.String(64), nullable=False),
        sa.Column('device_id', sa.String(255), nullable=True),
        sa.Column('user_agent', sa.String(255), nullable=True),
        sa.Column('ip', sa.String(64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True)
    )
    op.create_index('ix_session_tokens_user_id', 'session_tokens', ['user_id'])
    op.create_index('ix_session_tokens_token_hash', 'session_tokens', ['token_hash'], unique=True)
    op.create_table('friends',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('first_name', sa.String(150), nullable=False),
        sa.Column('last_name', sa.String(150), nullable=True),
        sa.Column('photo', sa.Text(), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('neighborhood', sa.String(255), nullable=True),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('relationship_level', sa.String(50), nullable=False),
        sa.Column('interests', sa.JSON(), nullable=False),
        sa.Column('lifestyle', sa.String(100), nullable=True),
        sa.Column('has_kids', sa.Boolean(), nullable=True),
        sa.Column('partner', sa.String(150), nullable=True),
        sa.Column('introduced_by', sa.Integer, sa.ForeignKey('friends.id', ondelete='SET NULL'), nullable=True),
        sa.Column('how_we_met', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('contact_info', sa.JSON(), nullable=True),
        sa.Column('last_interaction', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now())
    )
    op.create_index('ix_friends_id', 'friends', ['id'])
    op.create_index('ix_friends_user_id', 'friends', ['user_id'])
    op.create_table('relationships',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('friend_id', sa.Integer, sa.ForeignKey('friends.id', ondelete='CASCADE'), nullable=False),
        sa.Column('related_friend_id', sa.Integer, sa.ForeignKey('friends.id', ondelete='CASCADE'), nullable=False),
        sa.Column('relationship_type', sa.String(50), nullable=False),
        sa.UniqueConstraint('friend_id', 'related_friend_id', 'relationship_type', name='uix_relationship_edge')
    )
    op.create_index('ix_relationships_friend_id', 'relationships', ['friend_id'])
    op.create_index('ix_relationships_related_friend_id', 'relationships', ['related_friend_id'])
    op.create_table('activities',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('friend_id', sa.Integer, sa.ForeignKey('friends.id', ondelete='CASCADE'), nullable=False),
        sa.Column('activity_type', sa.String(50), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), server_default=sa.func.now())
    )
    op.create_index('ix_activities_user_id', 'activities', ['user_id'])
    op.create_index('ix_activities_friend_id', 'activities', ['friend_id'])
    op.create_index('ix_activities_timestamp', 'activities', ['timestamp'])
    op.create_table('contact_shares',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('from_user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('to_user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('friend_id', sa.Integer, sa.ForeignKey('friends.id', ondelete='SET NULL'), nullable=True),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True)
    )
    op.create_index('ix_contact_shares_from_user_id', 'contact_shares', ['from_user_id'])
    op.create_index('ix_contact_shares_to_user_id', 'contact_shares', ['to_user_id'])

def downgrade():
    op.drop_table('contact_shares')
    op.drop_table('activities')
    op.drop_table('relationships')
    op.drop_table('friends')
    op.drop_table('session_tokens')
    op.drop_table('users')
