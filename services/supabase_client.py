import logging
import jwt
from fastapi import Response
from supabase import Client, create_client
from config import Settings
from models.auth import Session, SessionUser

logger = logging.getLogger(__name__)


class AuthProviderError(Exception):
    """Supabase Auth answered without raising but did not do what was asked."""


def get_supabase_client(settings: Settings) -> Client:
    """
    One client per request. The auth client keeps the signed-in session in
    memory, so sharing it across requests would leak sessions between users.
    """
    return create_client(settings.supabase_url, settings.supabase_anon_key)


def _quote(value: str) -> str:
    # PostgREST filter value; quoting keeps commas and dots in names intact.
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _token_expiry(access_token: str) -> int | None:
    # Read only: Supabase has already verified the token in get_user.
    try:
        claims = jwt.decode(access_token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        return None
    exp = claims.get("exp")
    return int(exp) if exp is not None else None


class UserRepository:
    """Read-only lookups over the profiles table (filled by a DB trigger on sign-up)."""

    def __init__(self, client: Client, table: str = "profiles"):
        self.client = client
        self.table = table

    def find_first(self, match: str = "all", **filters: str) -> dict | None:
        """
        Return the first row matching the filters, or None.

        match="all" ANDs the column filters, match="any" ORs them.
        """
        if not filters:
            raise ValueError("find_first needs at least one filter")

        query = self.client.table(self.table).select("*")
        if match == "any":
            query = query.or_(",".join(f"{column}.eq.{_quote(value)}" for column, value in filters.items()))
        elif match == "all":
            for column, value in filters.items():
                query = query.eq(column, value)
        else:
            raise ValueError(f"Unknown match mode: {match}")

        result = query.limit(1).execute()
        return result.data[0] if result.data else None


class SupabaseAuthProvider:
    """
    Thin adapter over Supabase Auth.

    Successful sign-in/sign-up writes the session cookie on `response`;
    sign-out revokes `access_token` (the cookie's token) and clears it.
    Password hashing and token minting stay in Supabase.
    """

    def __init__(
        self,
        client: Client,
        settings: Settings,
        response: Response | None = None,
        access_token: str | None = None
    ):
        self.client = client
        self.settings = settings
        self.response = response
        self.access_token = access_token

    def sign_up_email(self, *, name: str, email: str, password: str) -> None:
        auth_response = self.client.auth.sign_up({
            "email": email,
            "password": password,
            "options": {
                "data": {"name": name}
            }
        })

        if not auth_response.user:
            raise AuthProviderError("Failed to create user")

        # No session means email confirmation is pending
        if auth_response.session is not None:
            self._set_session_cookie(auth_response.session)

    def sign_in_email(self, *, email: str, password: str) -> None:
        auth_response = self.client.auth.sign_in_with_password({
            "email": email,
            "password": password
        })

        if not auth_response.session:
            raise AuthProviderError("Email not verified or invalid credentials")

        self._set_session_cookie(auth_response.session)

    def sign_out(self) -> None:
        # The per-request client holds no session, so auth.sign_out() would
        # revoke nothing. Revoke the cookie's token directly; errors propagate.
        if self.access_token:
            self.client.auth.admin.sign_out(self.access_token)
        if self.response is not None:
            self.response.delete_cookie(self.settings.session_cookie_name, path="/")

    def get_session(self, access_token: str | None) -> Session | None:
        """Resolve a session from the cookie token. Invalid or expired tokens give None."""
        if not access_token:
            return None

        try:
            user_response = self.client.auth.get_user(access_token)
        except Exception as e:
            logger.warning("Session lookup failed: %s", e)
            return None

        user = getattr(user_response, "user", None)
        if user is None:
            return None

        metadata = getattr(user, "user_metadata", None) or {}
        return Session(
            user=SessionUser(id=str(user.id), email=user.email or "", name=metadata.get("name")),
            access_token=access_token,
            expires_at=_token_expiry(access_token),
        )

    def _set_session_cookie(self, session) -> None:
        if self.response is None:
            return
        self.response.set_cookie(
            key=self.settings.session_cookie_name,
            value=session.access_token,
            max_age=session.expires_in or self.settings.session_cookie_max_age,
            httponly=True,
            secure=self.settings.session_cookie_secure,
            samesite="lax",
            path="/",
        )
