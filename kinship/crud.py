from .models import AsyncSessionLocal
from .models.users import User
from .models.session_tokens import SessionToken
from .models.friends import Friend
from .models.relationships import Relationship
from .models.activities import Activity
from .models.contact_shares import ContactShare
from .constants import NEW_CONNECTION_TYPES, NEW_CONNECTION_WINDOW_DAYS
from .auth import hash_password, verify_password, issue_access_token, issue_refresh_token, hash_token
from fastapi import HTTPException
from sqlalchemy import select, delete, update, or_, func
from sqlalchemy.exc import IntegrityError
from datetime import datetime, timedelta
from collections import Counter
import logging

logger = logging.getLogger(__name__)

# fields copied into a contact share snapshot
SHARE_FIELDS = (
    'first_name', 'last_name', 'photo', 'location', 'neighborhood', 'relationship_level',
    'interests', 'lifestyle', 'has_kids', 'partner', 'how_we_met', 'notes', 'contact_info',
)

# users

async def create_user(payload):
    async with AsyncSessionLocal() as session:
        user = User(
            email=payload.email.lower(),
            first_name=payload.first_name,
            last_name=payload.last_name,
            hashed_password=hash_password(payload.password),
        )
        session.add(user)
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            # email already registered
            return None
        await session.refresh(user)
        return user

async def authenticate_user(email, password, device_id: str | None = None, user_agent: str | None = None, ip: str | None = None):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(User).where(User.email == email.lower()))
        user = q.scalars().first()
        if not user or not verify_password(password, user.hashed_password):
            return None
        access = issue_access_token(user)
        refresh, refresh_hash, expires_at = issue_refresh_token()
        st = SessionToken(user_id=user.id, device_id=device_id, token_hash=refresh_hash, user_agent=user_agent, ip=ip, expires_at=expires_at)
        session.add(st)
        await session.commit()
        return {'access_token': access, 'token_type': 'bearer', 'refresh_token': refresh}

async def refresh_access_token(refresh_token: str):
    async with AsyncSessionLocal() as session:
        token_hash = hash_token(refresh_token)
        q = await session.execute(select(SessionToken).where(SessionToken.token_hash == token_hash, SessionToken.revoked_at.is_(None), SessionToken.expires_at > datetime.utcnow()))
        st = q.scalars().first()
        if not st:
            return None
        uq = await session.execute(select(User).where(User.id == st.user_id))
        user = uq.scalars().first()
        if not user:
            return None
        st.last_used_at = datetime.utcnow()
        await session.commit()
        return {'access_token': issue_access_token(user), 'token_type': 'bearer'}

async def revoke_refresh_token(refresh_token: str):
    async with AsyncSessionLocal() as session:
        token_hash = hash_token(refresh_token)
        q = await session.execute(select(SessionToken).where(SessionToken.token_hash == token_hash, SessionToken.revoked_at.is_(None)))
        st = q.scalars().first()
        if not st:
            return False
        st.revoked_at = datetime.utcnow()
        await session.commit()
        return True

async def get_user_by_id(user_id: int):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(User).where(User.id == user_id))
        return q.scalars().first()

async def get_user_by_email(email: str):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(User).where(User.email == email.lower()))
        return q.scalars().first()

async def update_user(user_id: int, data: dict):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(User).where(User.id == user_id))
        user = q.scalars().first()
        if not user:
            return None
        for key, value in data.items():
            setattr(user, key, value)
        await session.commit()
        await session.refresh(user)
        return user

async def set_instagram_token(user_id: int, access_token: str | None):
    """Store (or clear) the Instagram access token on the user"""
    return await update_user(user_id, {'instagram_access_token': access_token})

# friends

def _add_activity(session, user_id: int, friend_id: int, activity_type: str, description: str):
    session.add(Activity(user_id=user_id, friend_id=friend_id, activity_type=activity_type, description=description))

async def _owned_friend(session, user_id: int, friend_id: int):
    q = await session.execute(select(Friend).where(Friend.id == friend_id, Friend.user_id == user_id))
    return q.scalars().first()

async def _check_introducer(session, user_id: int, introduced_by, friend_id: int | None = None):
    if introduced_by is None:
        return
    if friend_id is not None and introduced_by == friend_id:
        raise HTTPException(400, 'A friend cannot introduce themselves')
    if not await _owned_friend(session, user_id, introduced_by):
        raise HTTPException(400, 'introduced_by must reference one of your friends')

async def list_friends(user_id: int, category: str | None = None, location: str | None = None,
                       relationship_level: str | None = None, search: str | None = None):
    async with AsyncSessionLocal() as session:
        q = select(Friend).where(Friend.user_id == user_id)
        if category:
            q = q.where(Friend.category == category)
        if location:
            q = q.where(Friend.location.ilike(f'%{location}%'))
        if relationship_level:
            q = q.where(Friend.relationship_level == relationship_level)
        if search:
            pattern = f'%{search}%'
            q = q.where(or_(Friend.first_name.ilike(pattern), Friend.last_name.ilike(pattern), Friend.notes.ilike(pattern)))
        res = await session.execute(q.order_by(Friend.first_name.asc(), Friend.id.asc()))
        return res.scalars().all()

async def get_friend(user_id: int, friend_id: int):
    async with AsyncSessionLocal() as session:
        return await _owned_friend(session, user_id, friend_id)

async def create_friend(user_id: int, data: dict):
    async with AsyncSessionLocal() as session:
        await _check_introducer(session, user_id, data.get('introduced_by'))
        friend = Friend(user_id=user_id, **data)
        session.add(friend)
        await session.flush()
        _add_activity(session, user_id, friend.id, 'added', f'Added {friend.full_name} to your friends')
        await session.commit()
        await session.refresh(friend)
        return friend

async def create_friends_bulk(user_id: int, items: list[dict]):
    async with AsyncSessionLocal() as session:
        friends = []
        for data in items:
            await _check_introducer(session, user_id, data.get('introduced_by'))
            friend = Friend(user_id=user_id, **data)
            session.add(friend)
            await session.flush()
            _add_activity(session, user_id, friend.id, 'imported', f'Imported {friend.full_name} from a photo')
            friends.append(friend)
        await session.commit()
        for friend in friends:
            await session.refresh(friend)
        return friends

async def update_friend(user_id: int, friend_id: int, data: dict):
    async with AsyncSessionLocal() as session:
        friend = await _owned_friend(session, user_id, friend_id)
        if not friend:
            return None
        if 'introduced_by' in data:
            await _check_introducer(session, user_id, data['introduced_by'], friend_id)
        name = friend.full_name
        moved_to = data.get('location')
        moved = bool(moved_to) and moved_to != friend.location
        for key, value in data.items():
            setattr(friend, key, value)
        if moved:
            _add_activity(session, user_id, friend.id, 'moved', f'{name} moved to {moved_to}')
        else:
            _add_activity(session, user_id, friend.id, 'updated', f"Updated {name}'s information")
        await session.commit()
        await session.refresh(friend)
        return friend

async def delete_friend(user_id: int, friend_id: int) -> bool:
    async with AsyncSessionLocal() as session:
        friend = await _owned_friend(session, user_id, friend_id)
        if not friend:
            return False
        # sqlite does not enforce FK actions, so clean up explicitly
        await session.execute(delete(Relationship).where(or_(Relationship.friend_id == friend_id, Relationship.related_friend_id == friend_id)))
        await session.execute(delete(Activity).where(Activity.friend_id == friend_id))
        await session.execute(update(Friend).where(Friend.user_id == user_id, Friend.introduced_by == friend_id).values(introduced_by=None))
        await session.execute(update(ContactShare).where(ContactShare.friend_id == friend_id).values(friend_id=None))
        await session.delete(friend)
        await session.commit()
        return True

async def record_interaction(user_id: int, friend_id: int, note: str | None = None):
    async with AsyncSessionLocal() as session:
        friend = await _owned_friend(session, user_id, friend_id)
        if not friend:
            return None
        friend.last_interaction = datetime.utcnow()
        description = f'Caught up with {friend.full_name}'
        if note:
            description = f'{description}: {note}'
        _add_activity(session, user_id, friend.id, 'interacted', description)
        await session.commit()
        await session.refresh(friend)
        return friend

async def photo_in_use(photo_url: str) -> bool:
    """True while any friend, of any user, still points at photo_url"""
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(func.count(Friend.id)).where(Friend.photo == photo_url))
        return q.scalar_one() > 0

async def set_friend_photo(user_id: int, friend_id: int, photo_url: str):
    async with AsyncSessionLocal() as session:
        friend = await _owned_friend(session, user_id, friend_id)
        if not friend:
            return None
        old_photo = friend.photo
        friend.photo = photo_url
        _add_activity(session, user_id, friend.id, 'updated', f"Updated {friend.full_name}'s photo")
        await session.commit()
        await session.refresh(friend)
        return friend, old_photo

# relationships

async def list_friend_relationships(user_id: int, friend_id: int):
    async with AsyncSessionLocal() as session:
        if not await _owned_friend(session, user_id, friend_id):
            return None
        res = await session.execute(
            select(Relationship)
            .where(or_(Relationship.friend_id == friend_id, Relationship.related_friend_id == friend_id))
            .order_by(Relationship.id.asc())
        )
        return res.scalars().all()

async def create_relationship(user_id: int, friend_id: int, related_friend_id: int, relationship_type: str):
    if friend_id == related_friend_id:
        raise HTTPException(400, 'A friend cannot be related to themselves')
    async with AsyncSessionLocal() as session:
        if not await _owned_friend(session, user_id, friend_id) or not await _owned_friend(session, user_id, related_friend_id):
            return None
        rel = Relationship(friend_id=friend_id, related_friend_id=related_friend_id, relationship_type=relationship_type)
        session.add(rel)
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            raise HTTPException(409, 'Relationship already exists')
        await session.refresh(rel)
        return rel

async def delete_relationship(user_id: int, relationship_id: int) -> bool:
    async with AsyncSessionLocal() as session:
        res = await session.execute(
            select(Relationship)
            .join(Friend, Friend.id == Relationship.friend_id)
            .where(Relationship.id == relationship_id, Friend.user_id == user_id)
        )
        rel = res.scalars().first()
        if not rel:
            return False
        await session.delete(rel)
        await session.commit()
        return True

# activities

async def list_recent_activities(user_id: int, limit: int = 10):
    """Most recent activities paired with their friend (or None)"""
    async with AsyncSessionLocal() as session:
        res = await session.execute(
            select(Activity, Friend)
            .outerjoin(Friend, Friend.id == Activity.friend_id)
            .where(Activity.user_id == user_id)
            .order_by(Activity.timestamp.desc(), Activity.id.desc())
            .limit(limit)
        )
        return res.all()

async def list_friend_activities(user_id: int, friend_id: int):
    async with AsyncSessionLocal() as session:
        if not await _owned_friend(session, user_id, friend_id):
            return None
        res = await session.execute(
            select(Activity)
            .where(Activity.friend_id == friend_id, Activity.user_id == user_id)
            .order_by(Activity.timestamp.desc(), Activity.id.desc())
        )
        return res.scalars().all()

async def get_friend_stats(user_id: int) -> dict:
    async with AsyncSessionLocal() as session:
        res = await session.execute(select(Friend.category, Friend.relationship_level).where(Friend.user_id == user_id))
        rows = res.all()
        since = datetime.utcnow() - timedelta(days=NEW_CONNECTION_WINDOW_DAYS)
        new_q = await session.execute(
            select(func.count(Activity.id)).where(
                Activity.user_id == user_id,
                Activity.activity_type.in_(NEW_CONNECTION_TYPES),
                Activity.timestamp > since,
            )
        )
        categories = Counter(category for category, _ in rows)
        levels = Counter(level for _, level in rows)
        return {
            'total_friends': len(rows),
            'close_friends': categories.get('close_friends', 0),
            'new_connections': new_q.scalar_one(),
            'category_breakdown': dict(categories),
            'relationship_level_breakdown': dict(levels),
        }

# contact shares

async def create_share(user_id: int, friend_id: int, recipient_email: str, message: str | None = None):
    async with AsyncSessionLocal() as session:
        friend = await _owned_friend(session, user_id, friend_id)
        if not friend:
            raise HTTPException(404, 'Friend not found')
        rq = await session.execute(select(User).where(User.email == recipient_email.lower()))
        recipient = rq.scalars().first()
        if not recipient:
            raise HTTPException(404, 'Recipient not found')
        if recipient.id == user_id:
            raise HTTPException(400, 'Cannot share a contact with yourself')
        payload = {field: getattr(friend, field) for field in SHARE_FIELDS}
        share = ContactShare(from_user_id=user_id, to_user_id=recipient.id, friend_id=friend.id, payload=payload, message=message, status='pending')
        session.add(share)
        await session.commit()
        await session.refresh(share)
        return share

async def list_incoming_shares(user_id: int):
    async with AsyncSessionLocal() as session:
        res = await session.execute(
            select(ContactShare)
            .where(ContactShare.to_user_id == user_id, ContactShare.status == 'pending')
            .order_by(ContactShare.id.desc())
        )
        return res.scalars().all()

async def list_outgoing_shares(user_id: int):
    async with AsyncSessionLocal() as session:
        res = await session.execute(
            select(ContactShare).where(ContactShare.from_user_id == user_id).order_by(ContactShare.id.desc())
        )
        return res.scalars().all()

async def _pending_share_for(session, user_id: int, share_id: int):
    q = await session.execute(select(ContactShare).where(ContactShare.id == share_id, ContactShare.to_user_id == user_id))
    share = q.scalars().first()
    if not share:
        raise HTTPException(404, 'Share not found')
    if share.status != 'pending':
        raise HTTPException(409, f'Share already {share.status}')
    return share

async def accept_share(user_id: int, share_id: int):
    """Copy the shared snapshot into the recipient's friends; returns (share, friend)"""
    async with AsyncSessionLocal() as session:
        share = await _pending_share_for(session, user_id, share_id)
        sender_q = await session.execute(select(User.email).where(User.id == share.from_user_id))
        sender_email = sender_q.scalar_one_or_none() or 'another user'
        data = {field: share.payload.get(field) for field in SHARE_FIELDS if share.payload.get(field) is not None}
        data['category'] = 'new_friends'
        friend = Friend(user_id=user_id, **data)
        session.add(friend)
        await session.flush()
        _add_activity(session, user_id, friend.id, 'shared', f'Received {friend.full_name} from {sender_email}')
        share.status = 'accepted'
        share.responded_at = datetime.utcnow()
        await session.commit()
        await session.refresh(friend)
        await session.refresh(share)
        return share, friend

async def decline_share(user_id: int, share_id: int):
    async with AsyncSessionLocal() as session:
        share = await _pending_share_for(session, user_id, share_id)
        share.status = 'declined'
        share.responded_at = datetime.utcnow()
        await session.commit()
        await session.refresh(share)
        return share
