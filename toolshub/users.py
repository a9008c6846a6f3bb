"""Accounts: registration, login, preferences and favorite tools."""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import bcrypt

from .auth import create_token
from .database import Database
from .errors import ConflictError, InvalidInputError, NotFoundError, UnauthorizedError

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def check_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """User fields safe to return to clients (no password hash)."""
    return {
        "id": user["id"],
        "username": user.get("username"),
        "email": user.get("email"),
        "createdAt": user.get("createdAt"),
        "lastLogin": user.get("lastLogin"),
        "preferences": user.get("preferences") or {},
    }


async def register(db: Database, username: str, email: str, password: str) -> Tuple[Dict[str, Any], str]:
    if not username or not email or not password:
        raise InvalidInputError("Username, email, and password are required")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise InvalidInputError("Password is too long")

    if await db.users.find_one(username=username) or await db.users.find_one(email=email):
        raise ConflictError("User already exists")

    user = await db.users.create({
        "username": username,
        "email": email,
        "password": hash_password(password),
        "lastLogin": datetime.now(timezone.utc),
    })
    logger.info("[USERS] Registered user %s", user["id"])
    return user, create_token(user)


async def login(db: Database, username: str, password: str) -> Tuple[Dict[str, Any], str]:
    """Log in with a username or an email address."""
    user = await db.users.find_one(username=username) or await db.users.find_one(email=username)
    if not user or not check_password(password or "", user.get("password")):
        raise UnauthorizedError("Invalid credentials")

    user = await db.users.update_by_id(user["id"], {"lastLogin": datetime.now(timezone.utc)})
    return user, create_token(user)


async def get_user(db: Database, user_id: str) -> Dict[str, Any]:
    user = await db.users.find_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


async def get_profile(db: Database, user_id: str) -> Dict[str, Any]:
    return public_user(await get_user(db, user_id))


async def update_preferences(
    db: Database,
    user_id: str,
    theme: Optional[str] = None,
    language: Optional[str] = None,
) -> Dict[str, Any]:
    user = await get_user(db, user_id)
    preferences = dict(user.get("preferences") or {})
    if theme:
        preferences["theme"] = theme
    if language:
        preferences["language"] = language

    await db.users.update_by_id(user_id, {"preferences": preferences})
    return preferences


async def list_favorites(db: Database, user_id: str) -> List[Dict[str, Any]]:
    user = await get_user(db, user_id)
    return user.get("favorites") or []


async def add_favorite(db: Database, user_id: str, tool_id: str) -> List[Dict[str, Any]]:
    user = await get_user(db, user_id)
    if not await db.tools.find_by_id(tool_id):
        raise NotFoundError("Tool not found")

    favorites = user.get("favorites") or []
    if any(favorite["toolId"] == tool_id for favorite in favorites):
        raise ConflictError("Tool already in favorites")

    favorites.append({"toolId": tool_id, "addedAt": datetime.now(timezone.utc)})
    await db.users.update_by_id(user_id, {"favorites": favorites})
    return favorites


async def remove_favorite(db: Database, user_id: str, tool_id: str) -> List[Dict[str, Any]]:
    user = await get_user(db, user_id)
    favorites = [favorite for favorite in user.get("favorites") or [] if favorite["toolId"] != tool_id]
    await db.users.update_by_id(user_id, {"favorites": favorites})
    return favorites
