"""Server-rendered pages: sign-in, sign-up, sign-out and the dashboard shell."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from config import get_settings
from dependencies import get_auth_service, redirect_if_authenticated, require_session
from models.auth import Session, SignInSchema, SignUpSchema
from routers.auth import read_form_fields
from services.auth_service import AuthService
from services.form_hooks import FormHook, use_logout, use_sign_in, use_sign_up
from services.validation import schema_constraints

router = APIRouter(tags=["Pages"])

logger = logging.getLogger(__name__)

templates = Jinja2Templates(
    directory=str(Path(__file__).resolve().parent / "templates")
)


class FlashNotifier:
    """Collects the notification to carry over a redirect or show inline."""

    def __init__(self) -> None:
        self.level: Optional[str] = None
        self.text: Optional[str] = None

    def success(self, message: str) -> None:
        self.level, self.text = "message", message

    def error(self, message: str) -> None:
        self.level, self.text = "error", message


class RedirectNavigator:
    def __init__(self) -> None:
        self.location: Optional[str] = None

    def push(self, url: str) -> None:
        self.location = url


def _redirect(url: str, notifier: FlashNotifier, cookies_from: Optional[Response] = None) -> RedirectResponse:
    if notifier.level and notifier.text:
        url = f"{url}?{urlencode({notifier.level: notifier.text})}"
    redirect = RedirectResponse(url=url, status_code=303)
    # Cookies the auth provider set on the dependency-injected response
    if cookies_from is not None:
        for key, value in cookies_from.headers.raw:
            if key == b"set-cookie":
                redirect.raw_headers.append((key, value))
    return redirect


def _form_context(
    request: Request,
    schema,
    hook: Optional[FormHook] = None,
    values: Optional[Dict[str, Any]] = None,
    message: Optional[str] = None,
    error: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "request": request,
        "app_name": get_settings().app_name,
        "constraints": schema_constraints(schema),
        "field_errors": (hook.last_result.field_errors if hook and hook.last_result else None) or {},
        "values": values or {},
        "show_password": hook.show_password if hook else False,
        "message": message,
        "error": error,
    }


async def _submit_form(
    request: Request,
    response: Response,
    hook: FormHook,
    notifier: FlashNotifier,
    navigator: RedirectNavigator,
    template: str,
    schema,
):
    fields = await read_form_fields(request)
    if fields.get("show_password"):
        hook.toggle()
    await hook.submit(fields)

    if navigator.location:
        return _redirect(navigator.location, notifier, cookies_from=response)

    # Never echo the password back into the page
    values = {key: value for key, value in fields.items() if key in schema.model_fields and key != "password"}
    return templates.TemplateResponse(
        request,
        template,
        _form_context(request, schema, hook=hook, values=values, error=notifier.text),
        status_code=400,
    )


@router.get("/sign-in", response_class=HTMLResponse, dependencies=[Depends(redirect_if_authenticated)])
async def sign_in_page(request: Request, message: Optional[str] = None, error: Optional[str] = None):
    return templates.TemplateResponse(
        request,
        "sign_in.html",
        _form_context(request, SignInSchema, message=message, error=error),
    )


@router.post("/sign-in", response_class=HTMLResponse)
async def sign_in_submission(
    request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service)
):
    notifier, navigator = FlashNotifier(), RedirectNavigator()
    hook = use_sign_in(auth_service, notifier, navigator)
    return await _submit_form(request, response, hook, notifier, navigator, "sign_in.html", SignInSchema)


@router.get("/sign-up", response_class=HTMLResponse, dependencies=[Depends(redirect_if_authenticated)])
async def sign_up_page(request: Request, message: Optional[str] = None, error: Optional[str] = None):
    return templates.TemplateResponse(
        request,
        "sign_up.html",
        _form_context(request, SignUpSchema, message=message, error=error),
    )


@router.post("/sign-up", response_class=HTMLResponse)
async def sign_up_submission(
    request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service)
):
    notifier, navigator = FlashNotifier(), RedirectNavigator()
    hook = use_sign_up(auth_service, notifier, navigator)
    return await _submit_form(request, response, hook, notifier, navigator, "sign_up.html", SignUpSchema)


@router.post("/sign-out")
async def sign_out(
    response: Response,
    auth_service: AuthService = Depends(get_auth_service)
) -> RedirectResponse:
    notifier, navigator = FlashNotifier(), RedirectNavigator()
    hook = use_logout(auth_service, notifier, navigator)
    await hook.logout()
    return _redirect(navigator.location or "/", notifier, cookies_from=response)


@router.get("/", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    message: Optional[str] = None,
    error: Optional[str] = None,
    session: Session = Depends(require_session)
):
    """Protected dashboard shell"""
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "request": request,
            "app_name": get_settings().app_name,
            "user": session.user,
            "message": message,
            "error": error,
        },
    )


def render_unauthorized(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "unauthorized.html",
        {"request": request, "app_name": get_settings().app_name},
        status_code=401,
    )


def render_error(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "error.html",
        {"request": request, "app_name": get_settings().app_name},
        status_code=500,
    )
