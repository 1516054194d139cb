from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from ..config import settings

ACCESS = "access"
REFRESH = "refresh"


def get_password_hash(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def _secret_for(token_type: str) -> str:
    return settings.JWT_ACCESS_SECRET if token_type == ACCESS else settings.JWT_REFRESH_SECRET


def create_token(user_id: int, token_type: str = ACCESS, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a token for the given user id.

    Access and refresh tokens use different secrets, so one can never be
    replayed as the other.
    """
    if expires_delta is None:
        if token_type == ACCESS:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        else:
            expires_delta = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"sub": str(user_id), "type": token_type, "exp": expire}
    return jwt.encode(to_encode, _secret_for(token_type), algorithm=settings.ALGORITHM)


def decode_token(token: str, token_type: str = ACCESS) -> dict:
    """
    Decode and verify a token. Raises ``jose.JWTError`` when the signature,
    expiry or token type does not check out.
    """
    payload = jwt.decode(token, _secret_for(token_type), algorithms=[settings.ALGORITHM])
    if payload.get("type") != token_type:
        raise JWTError("Unexpected token type")
    return payload
