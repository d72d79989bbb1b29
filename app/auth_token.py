import logging
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt

from app.errors import Unauthorized

load_dotenv()

SECRET_KEY = os.getenv("JWT_SECRET", "dev-secret-change-me")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
EXPIRY_MINUTES = int(os.getenv("JWT_EXPIRY_MINUTES", "1440"))

logger = logging.getLogger("auth")

# auto_error=False so a missing header gets our own 401 message.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


@dataclass(slots=True, frozen=True)
class CurrentUser:
    """Caller identity taken from verified token claims."""

    id: str
    email: Optional[str] = None


def create_access_token(user_id: str, email: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=EXPIRY_MINUTES))
    to_encode = {"userId": str(user_id), "email": email, "exp": expire}
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


async def get_current_user(token: Optional[str] = Depends(oauth2_scheme)) -> CurrentUser:
    # None means no Bearer header at all; a bare "Bearer" arrives as "".
    if token is None:
        raise Unauthorized("Not authorized, no token")
    if not token:
        raise Unauthorized("Not authorized, token failed")
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise Unauthorized("Not authorized, token expired")
    except JWTError as exc:
        logger.warning("Token verification error: %s", exc)
        raise Unauthorized("Not authorized, token failed")

    user_id = payload.get("userId")
    if not user_id:
        raise Unauthorized("Not authorized, token failed")
    return CurrentUser(id=str(user_id), email=payload.get("email"))
