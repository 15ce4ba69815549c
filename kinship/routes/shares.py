"""
Contact Share Routes
One user offers a friend record to another; the recipient accepts or declines
"""

from fastapi import APIRouter, Depends
from typing import List
from ..schemas.shares import ShareIn, ShareOut, ShareAcceptOut
from ..crud import (
    create_share,
    list_incoming_shares,
    list_outgoing_shares,
    accept_share,
    decline_share,
)
from ..auth import get_current_user
from ..cache import invalidate_user_stats
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post('', response_model=ShareOut, status_code=201)
async def share_create(payload: ShareIn, current_user: dict = Depends(get_current_user)):
    share = await create_share(current_user['id'], payload.friend_id, payload.recipient_email, payload.message)
    logger.info(f"User {current_user['id']} shared friend {payload.friend_id} with user {share.to_user_id}")
    return share


@router.get('/incoming', response_model=List[ShareOut])
async def shares_incoming(current_user: dict = Depends(get_current_user)):
    return await list_incoming_shares(current_user['id'])


@router.get('/outgoing', response_model=List[ShareOut])
async def shares_outgoing(current_user: dict = Depends(get_current_user)):
    return await list_outgoing_shares(current_user['id'])


@router.post('/{share_id}/accept', response_model=ShareAcceptOut)
async def share_accept(share_id: int, current_user: dict = Depends(get_current_user)):
    share, friend = await accept_share(current_user['id'], share_id)
    await invalidate_user_stats(current_user['id'])
    return {'share': share, 'friend': friend}


@router.post('/{share_id}/decline', response_model=ShareOut)
async def share_decline(share_id: int, current_user: dict = Depends(get_current_user)):
    return await decline_share(current_user['id'], share_id)
