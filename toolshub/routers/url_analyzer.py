from fastapi import APIRouter, Depends

from ..schemas import AnalyzeRequest
from ..website_analyzer import WebsiteAnalyzer

router = APIRouter(prefix="/api/url-analyzer", tags=["url-analyzer"])


def get_analyzer() -> WebsiteAnalyzer:
    return WebsiteAnalyzer()


@router.post("/analyze")
async def analyze(payload: AnalyzeRequest, analyzer: WebsiteAnalyzer = Depends(get_analyzer)):
    """Trace redirects and inspect the final page"""
    return await analyzer.analyze(payload.url)


@router.post("/quick-check")
async def quick_check(payload: AnalyzeRequest, analyzer: WebsiteAnalyzer = Depends(get_analyzer)):
    """Single header-only probe"""
    return await analyzer.quick_check(payload.url)
