import logging
from typing import Any
from fastapi import APIRouter, Depends, Request
from models.auth import FormReply, Session, SessionResponse
from models.messages import ErrorMessage
from services.auth_service import AuthService, AuthServiceError
from services.form_actions import sign_in_action, sign_up_action
from dependencies import get_auth_service, require_session

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


async def read_form_fields(request: Request) -> dict[str, Any]:
    """Raw submitted fields from a form-encoded or JSON body"""
    if request.headers.get("content-type", "").startswith("application/json"):
        body = await request.json()
        return body if isinstance(body, dict) else {}
    form = await request.form()
    return {key: value for key, value in form.items()}


@router.post("/sign-up", response_model=FormReply, response_model_exclude_none=True)
async def sign_up(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Sign up with name/email/password. Always 200; the outcome is in `status`."""
    return await sign_up_action(await read_form_fields(request), auth_service)


@router.post("/sign-in", response_model=FormReply, response_model_exclude_none=True)
async def sign_in(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Sign in with email/password. Always 200; the outcome is in `status`."""
    return await sign_in_action(await read_form_fields(request), auth_service)


@router.post("/sign-out", response_model=FormReply, response_model_exclude_none=True)
async def sign_out(auth_service: AuthService = Depends(get_auth_service)):
    try:
        await auth_service.sign_out()
    except AuthServiceError as e:
        logging.warning("Sign-out failed: %s", e.cause)
        return FormReply(status="error", field_errors={"message": [ErrorMessage.FAILED_SIGN_OUT]})
    return FormReply(status="success")


@router.get("/session", response_model=SessionResponse)
async def get_session(session: Session = Depends(require_session)):
    """Current session, without the access token"""
    return SessionResponse(user=session.user, expires_at=session.expires_at)
