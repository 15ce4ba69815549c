from fastapi import APIRouter, Depends, HTTPException, Form, Request, Response
from ..schemas.users import RegisterIn, TokenOut, UserOut, UserUpdateIn, RefreshIn, ActionOkOut
from ..crud import (
    create_user,
    authenticate_user,
    get_user_by_id,
    update_user,
    refresh_access_token,
    revoke_refresh_token,
)
from ..auth import get_current_user, SESSION_COOKIE, ACCESS_TOKEN_EXPIRE_MINUTES
from ..cache import check_rate_limit
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post('/register', response_model=UserOut, status_code=201)
async def register(payload: RegisterIn):
    user = await create_user(payload)
    if not user:
        raise HTTPException(409, 'Email already registered')
    logger.info(f"Registered user {user.id}")
    return user


@router.post('/login', response_model=TokenOut)
async def login(
    request: Request,
    response: Response,
    username: str = Form(...),
    password: str = Form(...),
    device_id: str = Form(None)
):
    ip = request.client.host if request.client else None
    # Rate limiting - max 20 login attempts per hour per address
    if not await check_rate_limit(ip or username, "login", limit=20, window=3600):
        raise HTTPException(429, "Rate limit exceeded. Too many login attempts.")

    token = await authenticate_user(
        username,
        password,
        device_id=device_id,
        user_agent=request.headers.get('user-agent'),
        ip=ip,
    )
    if not token:
        raise HTTPException(status_code=401, detail='Invalid credentials')

    response.set_cookie(
        SESSION_COOKIE,
        token['access_token'],
        httponly=True,
        samesite='lax',
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    return token


@router.post('/refresh', response_model=TokenOut)
async def refresh(payload: RefreshIn):
    token = await refresh_access_token(payload.refresh_token)
    if not token:
        raise HTTPException(status_code=401, detail='Invalid refresh token')
    return token


@router.post('/logout', response_model=ActionOkOut)
async def logout(response: Response, refresh_token: str = Form(None)):
    if refresh_token:
        await revoke_refresh_token(refresh_token)
    response.delete_cookie(SESSION_COOKIE)
    return {'ok': True}


@router.get('/user', response_model=UserOut)
async def me(current_user: dict = Depends(get_current_user)):
    user = await get_user_by_id(current_user['id'])
    if not user:
        raise HTTPException(404, 'User not found')
    return user


@router.patch('/user', response_model=UserOut)
async def update_me(payload: UserUpdateIn, current_user: dict = Depends(get_current_user)):
    user = await update_user(current_user['id'], payload.model_dump(exclude_unset=True))
    if not user:
        raise HTTPException(404, 'User not found')
    return user
