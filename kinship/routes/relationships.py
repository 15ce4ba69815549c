from fastapi import APIRouter, Depends, HTTPException, Response
from ..schemas.friends import RelationshipIn, RelationshipOut
from ..crud import create_relationship, delete_relationship
from ..auth import get_current_user

router = APIRouter()


@router.post('', response_model=RelationshipOut, status_code=201)
async def relationship_create(payload: RelationshipIn, current_user: dict = Depends(get_current_user)):
    rel = await create_relationship(
        current_user['id'],
        payload.friend_id,
        payload.related_friend_id,
        payload.relationship_type,
    )
    if not rel:
        raise HTTPException(404, 'Friend not found')
    return rel


@router.delete('/{relationship_id}', status_code=204)
async def relationship_delete(relationship_id: int, current_user: dict = Depends(get_current_user)):
    if not await delete_relationship(current_user['id'], relationship_id):
        raise HTTPException(404, 'Relationship not found')
    return Response(status_code=204)
