"""
Form hooks bind a form action to UI state and turn its reply into
side effects.

A hook owns the last reply, a pending flag and a password-visibility
toggle. Success notifies and navigates; failure notifies with the first
field message and leaves the form where it is. Notifier and Navigator are
supplied by the caller (the pages bind them to flash messages and 303
redirects).
"""

import logging
from functools import partial
from typing import Any, Awaitable, Callable, Mapping, Protocol
from models.auth import FormReply
from models.messages import ErrorMessage, NotifyMessage
from services.auth_service import AuthService
from services.form_actions import sign_in_action, sign_up_action

logger = logging.getLogger(__name__)

FormAction = Callable[[Mapping[str, Any]], Awaitable[FormReply]]


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class Navigator(Protocol):
    def push(self, url: str) -> None: ...


class SubmissionInProgressError(RuntimeError):
    pass


class FormHook:
    def __init__(
        self,
        action: FormAction,
        *,
        notifier: Notifier,
        navigator: Navigator,
        success_message: str,
        fallback_error: str,
        redirect_to: str = "/",
    ):
        self.action = action
        self.notifier = notifier
        self.navigator = navigator
        self.success_message = success_message
        self.fallback_error = fallback_error
        self.redirect_to = redirect_to

        self.last_result: FormReply | None = None
        self.pending = False
        self.show_password = False

    def toggle(self) -> bool:
        self.show_password = not self.show_password
        return self.show_password

    async def submit(self, form_data: Mapping[str, Any]) -> FormReply:
        # The submit control is disabled while pending; this is the same gate.
        if self.pending:
            raise SubmissionInProgressError("A submission is already in flight")

        self.pending = True
        try:
            result = await self.action(form_data)
        finally:
            self.pending = False

        self.last_result = result
        if result.ok:
            self.notifier.success(self.success_message)
            self.navigator.push(self.redirect_to)
        else:
            self.notifier.error(result.first_error() or self.fallback_error)
        return result


class LogoutHook:
    def __init__(self, auth_service: AuthService, *, notifier: Notifier, navigator: Navigator):
        self.auth_service = auth_service
        self.notifier = notifier
        self.navigator = navigator
        self.pending = False

    async def logout(self) -> bool:
        self.pending = True
        try:
            await self.auth_service.sign_out()
        except Exception:
            logger.exception("Sign-out failed")
            self.notifier.error(ErrorMessage.FAILED_SIGN_OUT)
            return False
        finally:
            self.pending = False

        self.notifier.success(NotifyMessage.SIGN_OUT_SUCCEEDED)
        self.navigator.push("/sign-in")
        return True


def use_sign_in(auth_service: AuthService, notifier: Notifier, navigator: Navigator) -> FormHook:
    return FormHook(
        partial(sign_in_action, auth_service=auth_service),
        notifier=notifier,
        navigator=navigator,
        success_message=NotifyMessage.SIGN_IN_SUCCEEDED,
        fallback_error=ErrorMessage.FAILED_SIGN_IN,
    )


def use_sign_up(auth_service: AuthService, notifier: Notifier, navigator: Navigator) -> FormHook:
    return FormHook(
        partial(sign_up_action, auth_service=auth_service),
        notifier=notifier,
        navigator=navigator,
        success_message=NotifyMessage.SIGN_UP_SUCCEEDED,
        fallback_error=ErrorMessage.FAILED_SIGN_UP,
    )


def use_logout(auth_service: AuthService, notifier: Notifier, navigator: Navigator) -> LogoutHook:
    return LogoutHook(auth_service, notifier=notifier, navigator=navigator)
