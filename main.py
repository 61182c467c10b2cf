from config import get_settings
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging

from middleware import SessionCookieMiddleware

# Import routers
from routers import auth, pages

# Setup logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    logger.info("Starting %s...", get_settings().app_name)
    yield
    logger.info("Shutting down application...")

# Create FastAPI app
app = FastAPI(
    title=get_settings().app_name,
    description="Sign-up, sign-in and a session-protected dashboard backed by Supabase Auth",
    version="1.0.0",
    lifespan=lifespan
)

# Middleware added last runs first: the cookie check sits behind CORS
app.add_middleware(SessionCookieMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[get_settings().frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

def _wants_html(request: Request) -> bool:
    return not request.url.path.startswith("/api") and "text/html" in request.headers.get("accept", "")

# Exception handlers
@app.exception_handler(StarletteHTTPException)
async def unauthorized_page_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 401 and _wants_html(request):
        return pages.render_unauthorized(request)
    return await http_exception_handler(request, exc)

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    if _wants_html(request):
        return pages.render_error(request)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )

# Include routers
app.include_router(auth.router)
app.include_router(pages.router)

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
