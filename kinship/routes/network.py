from fastapi import APIRouter, Depends, HTTPException
from ..schemas.network import NetworkOut, NameGameRoundOut
from ..crud import list_friends
from ..network import build_network, name_game_round, NotEnoughPhotos
from ..auth import get_current_user

router = APIRouter()


@router.get('/network', response_model=NetworkOut)
async def network(current_user: dict = Depends(get_current_user)):
    friends = await list_friends(current_user['id'])
    return build_network(friends)


@router.get('/name-game', response_model=NameGameRoundOut)
async def name_game(current_user: dict = Depends(get_current_user)):
    friends = await list_friends(current_user['id'])
    try:
        return name_game_round(friends)
    except NotEnoughPhotos as e:
        raise HTTPException(409, str(e))
