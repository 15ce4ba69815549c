from fastapi import APIRouter, Depends, Query
from typing import List
from ..schemas.friends import ActivityOut, ActivityWithFriendOut, FriendOut, StatsOut
from ..crud import list_recent_activities, get_friend_stats
from ..auth import get_current_user
from ..cache import cache_user_stats, get_cached_user_stats

router = APIRouter()


@router.get('/activities', response_model=List[ActivityWithFriendOut])
async def recent_activities(
    limit: int = Query(10, ge=1, le=100),
    current_user: dict = Depends(get_current_user)
):
    rows = await list_recent_activities(current_user['id'], limit=limit)
    return [
        ActivityWithFriendOut(
            **ActivityOut.model_validate(activity).model_dump(),
            friend=FriendOut.model_validate(friend) if friend else None,
        )
        for activity, friend in rows
    ]


@router.get('/stats', response_model=StatsOut)
async def stats(current_user: dict = Depends(get_current_user)):
    # Try to get from cache first
    cached = await get_cached_user_stats(current_user['id'])
    if cached:
        return cached

    result = await get_friend_stats(current_user['id'])
    await cache_user_stats(current_user['id'], result)
    return result
