"""Bearer tokens carried in the ``x-auth-token`` header."""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, Header

from .config import JWT_ALGORITHM, JWT_EXPIRES_DAYS, JWT_SECRET
from .database import Database, get_db
from .errors import InvalidIdentifierError, UnauthorizedError


def create_token(user: Dict[str, Any]) -> str:
    payload = {
        "userId": user["id"],
        "username": user.get("username"),
        "exp": datetime.now(timezone.utc) + timedelta(days=JWT_EXPIRES_DAYS),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Token is not valid")


async def current_user(
    x_auth_token: Optional[str] = Header(None),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    """Resolve the caller from ``x-auth-token``; every failure is the same 401."""
    if not x_auth_token:
        raise UnauthorizedError("No token, authorization denied")

    user_id = decode_token(x_auth_token).get("userId")
    if not user_id:
        raise UnauthorizedError("Token is not valid")

    try:
        user = await db.users.find_by_id(user_id)
    except InvalidIdentifierError:
        user = None

    if not user or not user["isActive"]:
        raise UnauthorizedError("Token is not valid")
    return user
