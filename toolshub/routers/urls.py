from typing import Any, Dict, Literal

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from .. import url_shortener
from ..auth import current_user
from ..config import BASE_URL
from ..database import Database, get_db
from ..schemas import MessageResponse, ShortenRequest, ShortenResponse, UrlStatsResponse

router = APIRouter(prefix="/api/urls", tags=["urls"])


@router.post("", response_model=ShortenResponse)
@router.post("/shorten", response_model=ShortenResponse)
async def shorten_url(payload: ShortenRequest, request: Request, db: Database = Depends(get_db)):
    """Create a short URL"""
    record = await url_shortener.shorten(
        db,
        payload.longUrl,
        base_url=BASE_URL or str(request.base_url),
        custom_code=payload.customCode,
        created_by=request.client.host if request.client else "anonymous",
        expires_at=payload.expiresAt,
    )
    return {
        "originalUrl": record["longUrl"],
        "shortUrl": record["shortUrl"],
        "shortCode": record["shortCode"],
        "createdAt": record["createdAt"],
    }


@router.get("/stats/{code}", response_model=UrlStatsResponse)
async def url_stats(code: str, db: Database = Depends(get_db)):
    return await url_shortener.get_stats(db, code)


@router.get("/qr/{code}")
async def url_qr_code(
    code: str,
    size: Literal["small", "medium", "large"] = "medium",
    db: Database = Depends(get_db),
):
    """QR code PNG for the short URL"""
    png = await url_shortener.qr_code(db, code, size)
    return Response(content=png, media_type="image/png")


@router.post("/{code}/deactivate", response_model=MessageResponse)
async def deactivate_url(
    code: str,
    db: Database = Depends(get_db),
    user: Dict[str, Any] = Depends(current_user),
):
    await url_shortener.deactivate(db, code)
    return {"message": "Short URL deactivated"}
