import asyncio
from fastapi import Depends, HTTPException, Request, Response, status
from supabase import Client
from config import Settings, get_settings
from models.auth import Session
from services.auth_service import AuthService
from services.supabase_client import SupabaseAuthProvider, UserRepository, get_supabase_client

_SESSION_STATE_ATTR = "server_session"


def get_client(settings: Settings = Depends(get_settings)) -> Client:
    return get_supabase_client(settings)


def get_user_repository(client: Client = Depends(get_client)) -> UserRepository:
    return UserRepository(client)


def get_auth_provider(
    request: Request,
    response: Response,
    client: Client = Depends(get_client),
    settings: Settings = Depends(get_settings)
) -> SupabaseAuthProvider:
    """Provider bound to this request's cookie and response so it can revoke and set the session"""
    return SupabaseAuthProvider(
        client,
        settings,
        response,
        access_token=request.cookies.get(settings.session_cookie_name)
    )


def get_auth_service(
    users: UserRepository = Depends(get_user_repository),
    provider: SupabaseAuthProvider = Depends(get_auth_provider)
) -> AuthService:
    return AuthService(users, provider)


def has_session_cookie(request: Request, settings: Settings | None = None) -> bool:
    """Presence only. Says nothing about whether the session is valid."""
    settings = settings or get_settings()
    return bool(request.cookies.get(settings.session_cookie_name))


async def get_server_session(
    request: Request,
    provider: SupabaseAuthProvider = Depends(get_auth_provider),
    settings: Settings = Depends(get_settings)
) -> Session | None:
    """Resolve the session once per request and reuse it for the rest of it"""
    if hasattr(request.state, _SESSION_STATE_ATTR):
        return getattr(request.state, _SESSION_STATE_ATTR)

    token = request.cookies.get(settings.session_cookie_name)
    session = await asyncio.to_thread(provider.get_session, token) if token else None
    setattr(request.state, _SESSION_STATE_ATTR, session)
    return session


async def require_session(session: Session | None = Depends(get_server_session)) -> Session:
    """Authoritative check for protected routes"""
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized"
        )
    return session


async def redirect_if_authenticated(session: Session | None = Depends(get_server_session)) -> None:
    """Signed-in users have no business on the sign-in/sign-up pages"""
    if session is not None:
        raise HTTPException(
            status_code=status.HTTP_303_SEE_OTHER,
            headers={"Location": "/"}
        )
