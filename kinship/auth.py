"""
Authentication helpers
Password hashing, signed access tokens and opaque refresh tokens for kinship sessions
"""
import os
import secrets
import hashlib
from datetime import datetime, timedelta
from typing import Optional
from fastapi import Depends, HTTPException, Request
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from passlib.context import CryptContext

SECRET = os.getenv('JWT_SECRET', 'devsecret')
ALGORITHM = os.getenv('JWT_ALGORITHM', 'HS256')
# sessions last a week, matching the session cookie lifetime
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv('ACCESS_TOKEN_EXPIRE_MINUTES', str(60 * 24 * 7)))
REFRESH_TOKEN_TTL_DAYS = int(os.getenv('REFRESH_TOKEN_TTL_DAYS', '30'))

SESSION_COOKIE = 'access_token'

pwd_ctx = CryptContext(schemes=['bcrypt'], deprecated='auto')
oauth2_scheme = OAuth2PasswordBearer(tokenUrl='/api/auth/login', auto_error=False)


def hash_password(password: str) -> str:
    return pwd_ctx.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_ctx.verify(password, hashed)


def issue_access_token(user, ttl: timedelta = None) -> str:
    """Sign a token carrying the user's id and email"""
    expires = datetime.utcnow() + (ttl or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {'id': user.id, 'email': user.email, 'exp': expires}
    return jwt.encode(claims, SECRET, algorithm=ALGORITHM)


def issue_refresh_token() -> tuple:
    """Return (token, sha256 digest, expiry); only the digest is persisted"""
    token = secrets.token_urlsafe(48)
    return token, hash_token(token), datetime.utcnow() + timedelta(days=REFRESH_TOKEN_TTL_DAYS)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def decode_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, SECRET, algorithms=[ALGORITHM])
    except JWTError:
        return None


async def get_current_user(request: Request, token: Optional[str] = Depends(oauth2_scheme)) -> dict:
    """Resolve the caller from a bearer token, falling back to the session cookie."""
    token = token or request.cookies.get(SESSION_COOKIE)
    claims = decode_token(token) if token else None
    if not claims or 'id' not in claims:
        raise HTTPException(
            status_code=401,
            detail='Could not validate credentials',
            headers={'WWW-Authenticate': 'Bearer'},
        )
    return claims
