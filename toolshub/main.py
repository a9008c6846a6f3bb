import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from . import __version__, url_shortener
from .config import ENVIRONMENT, LOG_LEVEL, PORT
from .database import Database, get_db
from .errors import ToolsHubError
from .routers import analytics, tools, url_analyzer, urls, users

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    db = Database()
    await db.connect()
    if db.fallback_mode:
        logger.info("[STARTUP] Running in fallback mode with in-memory storage")
    app.state.db = db
    yield
    await db.disconnect()


app = FastAPI(lifespan=lifespan, title="ToolsHub API", version=__version__)

app.include_router(tools.router)
app.include_router(urls.router)
app.include_router(users.router)
app.include_router(analytics.router)
app.include_router(url_analyzer.router)


@app.exception_handler(ToolsHubError)
async def toolshub_error_handler(request: Request, exc: ToolsHubError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("[API] Unhandled error on %s %s", request.method, request.url.path)
    content = {"detail": "Internal server error"}
    if ENVIRONMENT == "development":
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


@app.get("/", response_class=HTMLResponse)
async def home():
    """Service landing page listing the API endpoints"""
    endpoints = [
        ("GET /api/tools", "List tools (category, search, page, limit)"),
        ("GET /api/tools/popular/{limit}", "Most popular tools"),
        ("POST /api/tools/record-usage/{toolId}", "Count one use of a tool"),
        ("POST /api/urls/shorten", "Create a short URL"),
        ("GET /s/{code}", "Redirect to the original URL"),
        ("POST /api/users/register", "Create an account"),
        ("POST /api/analytics/track", "Record an analytics event"),
        ("POST /api/url-analyzer/analyze", "Inspect a web page"),
        ("GET /health", "Health check"),
    ]
    rows = "\n".join(
        f'<div class="endpoint"><strong>{route}</strong> - {summary}</div>' for route, summary in endpoints
    )
    html_content = f"""
    <!DOCTYPE html>
    <html>
    <head>
        <title>ToolsHub API</title>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <style>
            body {{ font-family: Arial, sans-serif; margin: 40px; background-color: #f5f5f5; }}
            .container {{ max-width: 800px; margin: 0 auto; background: white; padding: 30px; border-radius: 10px; }}
            h1 {{ color: #333; text-align: center; }}
            .endpoint {{ background: #f8f9fa; padding: 10px; margin: 5px 0; border-radius: 5px; }}
        </style>
    </head>
    <body>
        <div class="container">
            <h1>ToolsHub API v{__version__}</h1>
            {rows}
        </div>
    </body>
    </html>
    """
    return HTMLResponse(content=html_content)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


@app.get("/s/{code}")
async def redirect_short_url(code: str, db: Database = Depends(get_db)):
    """Redirect to original URL"""
    long_url = await url_shortener.resolve(db, code)
    return RedirectResponse(url=long_url, status_code=302)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("toolshub.main:app", host="0.0.0.0", port=PORT, log_level=LOG_LEVEL.lower())
