"""
Friend Routes
CRUD over the caller's friends plus interactions, photos and per-friend history
"""

from fastapi import APIRouter, Depends, HTTPException, File, UploadFile, Response
from typing import List, Optional
from ..schemas.friends import (
    FriendIn,
    FriendUpdateIn,
    FriendOut,
    InteractionIn,
    RelationshipOut,
    ActivityOut,
)
from ..crud import (
    list_friends,
    get_friend,
    create_friend,
    create_friends_bulk,
    update_friend,
    delete_friend,
    record_interaction,
    set_friend_photo,
    photo_in_use,
    list_friend_relationships,
    list_friend_activities,
)
from ..auth import get_current_user
from ..cache import invalidate_user_stats
from ..file_storage import file_storage

router = APIRouter()


async def _release_photo(photo_url: str):
    # accepted shares copy the photo URL, so a file can back several friends
    if photo_url and not await photo_in_use(photo_url):
        await file_storage.delete_friend_photo(photo_url)


@router.get('', response_model=List[FriendOut])
async def friends_list(
    category: Optional[str] = None,
    location: Optional[str] = None,
    relationship_level: Optional[str] = None,
    search: Optional[str] = None,
    current_user: dict = Depends(get_current_user)
):
    return await list_friends(
        current_user['id'],
        category=category,
        location=location,
        relationship_level=relationship_level,
        search=search,
    )


@router.post('', response_model=FriendOut, status_code=201)
async def friend_create(payload: FriendIn, current_user: dict = Depends(get_current_user)):
    friend = await create_friend(current_user['id'], payload.model_dump())
    await invalidate_user_stats(current_user['id'])
    return friend


@router.post('/bulk', response_model=List[FriendOut], status_code=201)
async def friend_bulk_create(payload: List[FriendIn], current_user: dict = Depends(get_current_user)):
    """Create several friends at once, e.g. everyone tagged in a group photo"""
    if not payload:
        raise HTTPException(400, 'No friends to import')
    friends = await create_friends_bulk(current_user['id'], [item.model_dump() for item in payload])
    await invalidate_user_stats(current_user['id'])
    return friends


@router.get('/{friend_id}', response_model=FriendOut)
async def friend_detail(friend_id: int, current_user: dict = Depends(get_current_user)):
    friend = await get_friend(current_user['id'], friend_id)
    if not friend:
        raise HTTPException(404, 'Friend not found')
    return friend


async def _update(friend_id: int, payload: FriendUpdateIn, user_id: int):
    friend = await update_friend(user_id, friend_id, payload.model_dump(exclude_unset=True))
    if not friend:
        raise HTTPException(404, 'Friend not found')
    await invalidate_user_stats(user_id)
    return friend


@router.put('/{friend_id}', response_model=FriendOut)
async def friend_replace(friend_id: int, payload: FriendUpdateIn, current_user: dict = Depends(get_current_user)):
    return await _update(friend_id, payload, current_user['id'])


@router.patch('/{friend_id}', response_model=FriendOut)
async def friend_update(friend_id: int, payload: FriendUpdateIn, current_user: dict = Depends(get_current_user)):
    return await _update(friend_id, payload, current_user['id'])


@router.delete('/{friend_id}', status_code=204)
async def friend_delete(friend_id: int, current_user: dict = Depends(get_current_user)):
    friend = await get_friend(current_user['id'], friend_id)
    if not friend or not await delete_friend(current_user['id'], friend_id):
        raise HTTPException(404, 'Friend not found')
    await _release_photo(friend.photo)
    await invalidate_user_stats(current_user['id'])
    return Response(status_code=204)


@router.post('/{friend_id}/interactions', response_model=FriendOut)
async def friend_interaction(
    friend_id: int,
    payload: Optional[InteractionIn] = None,
    current_user: dict = Depends(get_current_user)
):
    friend = await record_interaction(current_user['id'], friend_id, payload.note if payload else None)
    if not friend:
        raise HTTPException(404, 'Friend not found')
    await invalidate_user_stats(current_user['id'])
    return friend


@router.post('/{friend_id}/photo', response_model=FriendOut)
async def friend_photo_upload(
    friend_id: int,
    file: UploadFile = File(...),
    current_user: dict = Depends(get_current_user)
):
    if not await get_friend(current_user['id'], friend_id):
        raise HTTPException(404, 'Friend not found')

    photo_url = await file_storage.save_friend_photo(friend_id, file)
    result = await set_friend_photo(current_user['id'], friend_id, photo_url)
    if not result:
        # friend vanished between the check and the update
        await file_storage.delete_friend_photo(photo_url)
        raise HTTPException(404, 'Friend not found')

    friend, old_photo = result
    if old_photo and old_photo != photo_url:
        await _release_photo(old_photo)
    return friend


@router.get('/{friend_id}/relationships', response_model=List[RelationshipOut])
async def friend_relationships(friend_id: int, current_user: dict = Depends(get_current_user)):
    relationships = await list_friend_relationships(current_user['id'], friend_id)
    if relationships is None:
        raise HTTPException(404, 'Friend not found')
    return relationships


@router.get('/{friend_id}/activities', response_model=List[ActivityOut])
async def friend_activities(friend_id: int, current_user: dict = Depends(get_current_user)):
    activities = await list_friend_activities(current_user['id'], friend_id)
    if activities is None:
        raise HTTPException(404, 'Friend not found')
    return activities
