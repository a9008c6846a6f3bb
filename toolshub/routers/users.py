from typing import Any, Dict

from fastapi import APIRouter, Depends

from .. import users
from ..auth import current_user
from ..database import Database, get_db
from ..schemas import (
    AuthResponse,
    FavoritesResponse,
    LoginRequest,
    Preferences,
    PreferencesUpdate,
    RegisterRequest,
    UserResponse,
)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(payload: RegisterRequest, db: Database = Depends(get_db)):
    user, token = await users.register(db, payload.username, payload.email, payload.password)
    return {"message": "User created successfully", "user": users.public_user(user), "token": token}


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, db: Database = Depends(get_db)):
    user, token = await users.login(db, payload.username, payload.password)
    return {"message": "Login successful", "user": users.public_user(user), "token": token}


@router.get("/me", response_model=UserResponse)
async def me(user: Dict[str, Any] = Depends(current_user)):
    return users.public_user(user)


@router.get("/profile/{user_id}", response_model=UserResponse)
async def profile(user_id: str, db: Database = Depends(get_db)):
    return await users.get_profile(db, user_id)


@router.put("/preferences/{user_id}", response_model=Preferences)
async def update_preferences(user_id: str, payload: PreferencesUpdate, db: Database = Depends(get_db)):
    return await users.update_preferences(db, user_id, theme=payload.theme, language=payload.language)


@router.get("/favorites/{user_id}", response_model=FavoritesResponse)
async def list_favorites(user_id: str, db: Database = Depends(get_db)):
    return {"favorites": await users.list_favorites(db, user_id)}


@router.post("/favorites/{user_id}/{tool_id}", response_model=FavoritesResponse)
async def add_favorite(user_id: str, tool_id: str, db: Database = Depends(get_db)):
    favorites = await users.add_favorite(db, user_id, tool_id)
    return {"message": "Tool added to favorites", "favorites": favorites}


@router.delete("/favorites/{user_id}/{tool_id}", response_model=FavoritesResponse)
async def remove_favorite(user_id: str, tool_id: str, db: Database = Depends(get_db)):
    favorites = await users.remove_favorite(db, user_id, tool_id)
    return {"message": "Tool removed from favorites", "favorites": favorites}
