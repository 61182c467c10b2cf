import asyncio
import logging
from enum import Enum
from models.messages import ErrorMessage
from services.supabase_client import SupabaseAuthProvider, UserRepository

logger = logging.getLogger(__name__)


class AuthErrorCode(str, Enum):
    ALREADY_EXISTS_USER = "ALREADY_EXISTS_USER"
    UNAUTHORIZED = "UNAUTHORIZED"
    FAILED_SIGN_UP = "FAILED_SIGN_UP"
    FAILED_SIGN_IN = "FAILED_SIGN_IN"
    FAILED_SIGN_OUT = "FAILED_SIGN_OUT"


class AuthServiceError(Exception):
    """
    Recoverable auth failure with a user-facing message.

    `code` is stable and meant for logs and callers that branch on the
    reason; pages only ever show `message`. `cause` keeps the provider error.
    """

    kind = "auth_service_error"

    def __init__(self, message: str, code: AuthErrorCode, cause: BaseException | None = None):
        if not message:
            raise ValueError("AuthServiceError needs a non-empty message")
        super().__init__(message)
        self.message = message
        self.code = code
        self.cause = cause


class AuthService:
    def __init__(self, users: UserRepository, provider: SupabaseAuthProvider):
        self.users = users
        self.provider = provider

    async def sign_up(self, email: str, name: str, password: str) -> None:
        existing_user = await asyncio.to_thread(self.users.find_first, match="any", email=email, name=name)

        if existing_user:
            raise AuthServiceError(ErrorMessage.ALREADY_EXISTS_USER, AuthErrorCode.ALREADY_EXISTS_USER)

        try:
            await asyncio.to_thread(self.provider.sign_up_email, name=name, email=email, password=password)
        except Exception as e:
            raise AuthServiceError(ErrorMessage.FAILED_SIGN_UP, AuthErrorCode.FAILED_SIGN_UP, e) from e

    async def sign_in(self, email: str, password: str) -> None:
        user = await asyncio.to_thread(self.users.find_first, email=email)

        # Same answer for unknown email and wrong password
        if not user:
            raise AuthServiceError(ErrorMessage.UNAUTHORIZED, AuthErrorCode.UNAUTHORIZED)

        try:
            await asyncio.to_thread(self.provider.sign_in_email, email=email, password=password)
        except Exception as e:
            raise AuthServiceError(ErrorMessage.FAILED_SIGN_IN, AuthErrorCode.FAILED_SIGN_IN, e) from e

    async def sign_out(self) -> None:
        try:
            await asyncio.to_thread(self.provider.sign_out)
        except Exception as e:
            raise AuthServiceError(ErrorMessage.FAILED_SIGN_OUT, AuthErrorCode.FAILED_SIGN_OUT, e) from e
