from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class ToolResponse(BaseModel):
    id: str
    name: str
    description: str
    category: str
    url: str
    icon: str
    popularity: int
    isActive: bool
    createdAt: datetime


class ToolListResponse(BaseModel):
    tools: List[ToolResponse]
    total: int
    totalPages: int
    currentPage: int


class UsageResponse(BaseModel):
    message: str
    tool: ToolResponse


class ShortenRequest(BaseModel):
    longUrl: str
    customCode: Optional[str] = None
    expiresAt: Optional[datetime] = None


class ShortenResponse(BaseModel):
    originalUrl: str
    shortUrl: str
    shortCode: str
    createdAt: datetime


class UrlStatsResponse(BaseModel):
    shortCode: str
    originalUrl: str
    shortUrl: str
    clicks: int
    createdAt: datetime
    createdBy: str
    expiresAt: Optional[datetime] = None


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str


class LoginRequest(BaseModel):
    username: str
    password: str


class Preferences(BaseModel):
    theme: str = "light"
    language: str = "en"


class PreferencesUpdate(BaseModel):
    theme: Optional[str] = None
    language: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    createdAt: Optional[datetime] = None
    lastLogin: Optional[datetime] = None
    preferences: Preferences


class AuthResponse(BaseModel):
    message: str
    user: UserResponse
    token: str


class Favorite(BaseModel):
    toolId: str
    addedAt: datetime


class FavoritesResponse(BaseModel):
    message: Optional[str] = None
    favorites: List[Favorite]


class TrackRequest(BaseModel):
    ip: Optional[str] = None
    toolId: Optional[str] = None
    userId: Optional[str] = None
    action: Optional[str] = None
    userAgent: Optional[str] = None
    page: Optional[str] = None
    referrer: Optional[str] = None


class TrackResponse(BaseModel):
    message: str
    totalVisits: int
    recordId: str


class AnalyzeRequest(BaseModel):
    url: str


class MessageResponse(BaseModel):
    message: str
