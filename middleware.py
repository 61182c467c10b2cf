import logging
from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware
from config import get_settings
from dependencies import has_session_cookie

logger = logging.getLogger(__name__)

_STATIC_SUFFIXES = (
    ".css", ".js", ".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg",
    ".ico", ".ttf", ".woff", ".woff2", ".webmanifest",
)


class SessionCookieMiddleware(BaseHTTPMiddleware):
    """
    Optimistic edge check: requests with no session cookie at all are sent
    to /sign-in before any route runs.

    THIS IS NOT AN AUTH CHECK. A present cookie may be forged or expired;
    protected routes still resolve the session themselves (require_session).
    """

    def __init__(self, app, public_path_prefixes: list[str] | None = None, sign_in_path: str = "/sign-in"):
        super().__init__(app)
        self.public_path_prefixes = tuple(
            public_path_prefixes if public_path_prefixes is not None else get_settings().public_path_prefixes
        )
        self.sign_in_path = sign_in_path

    def is_public(self, path: str) -> bool:
        return path.startswith(self.public_path_prefixes) or path.lower().endswith(_STATIC_SUFFIXES)

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if self.is_public(path) or has_session_cookie(request):
            return await call_next(request)

        logger.debug("No session cookie on %s, redirecting to %s", path, self.sign_in_path)
        return RedirectResponse(url=self.sign_in_path, status_code=307)
