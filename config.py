from pydantic_settings import BaseSettings
from functools import lru_cache

class Settings(BaseSettings):
    app_name: str = "Auth Boilerplate"

    # Supabase
    supabase_url: str
    supabase_anon_key: str

    # Session cookie (issued after sign-in/sign-up, checked by the middleware).
    # Lives as long as the access token; the max age is used only when
    # Supabase does not say when the token expires.
    session_cookie_name: str = "sb-access-token"
    session_cookie_max_age: int = 60 * 60
    session_cookie_secure: bool = False

    # Paths reachable without a session cookie
    public_path_prefixes: list[str] = [
        "/sign-in",
        "/sign-up",
        "/api/auth/sign-in",
        "/api/auth/sign-up",
        "/health",
        "/static",
        "/docs",
        "/openapi.json",
    ]

    # Frontend URL
    frontend_url: str = "http://localhost:3000"

    log_level: str = "INFO"

    class Config:
        env_file = ".env"

@lru_cache()
def get_settings():
    return Settings()
