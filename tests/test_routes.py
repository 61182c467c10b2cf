"""
API and page route tests
"""

from unittest.mock import MagicMock
from dependencies import get_auth_provider, get_auth_service, get_client
from models.messages import ErrorMessage, NotifyMessage


class TestAuthApi:
    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_sign_up_success(self, client, provider):
        response = client.post("/api/auth/sign-up", json={
            "email": "user@test.com",
            "name": "テスト",
            "password": "securePassword123",
        })

        assert response.status_code == 200
        assert response.json() == {"status": "success"}
        provider.sign_up_email.assert_called_once_with(
            name="テスト", email="user@test.com", password="securePassword123"
        )

    def test_sign_up_accepts_form_encoding(self, client, provider):
        response = client.post("/api/auth/sign-up", data={
            "email": "user@test.com",
            "name": "テスト",
            "password": "securePassword123",
        })

        assert response.json() == {"status": "success"}
        provider.sign_up_email.assert_called_once()

    def test_sign_up_validation_error(self, client, provider):
        response = client.post("/api/auth/sign-up", json={
            "email": "invalid-email",
            "name": "テスト",
            "password": "securePassword123",
        })

        body = response.json()
        assert body["status"] == "error"
        assert body["fieldErrors"]["email"] == [ErrorMessage.INVALID_EMAIL]
        provider.sign_up_email.assert_not_called()

    def test_sign_up_duplicate_user(self, client, users):
        users.find_first.return_value = {"id": "1", "email": "user@test.com"}

        response = client.post("/api/auth/sign-up", json={
            "email": "user@test.com",
            "name": "テスト",
            "password": "securePassword123",
        })

        assert response.json()["fieldErrors"] == {"message": [ErrorMessage.ALREADY_EXISTS_USER]}

    def test_sign_in_unknown_user(self, client, provider):
        response = client.post("/api/auth/sign-in", json={
            "email": "ghost@test.com",
            "password": "securePassword123",
        })

        assert response.json()["fieldErrors"] == {"message": [ErrorMessage.UNAUTHORIZED]}
        provider.sign_in_email.assert_not_called()

    def test_sign_in_sets_cookie_from_provider(self, app, users, settings):
        from fastapi.testclient import TestClient

        supabase = MagicMock()
        supabase.auth.sign_in_with_password.return_value = MagicMock(
            session=MagicMock(access_token="token-123", expires_in=3600)
        )
        users.find_first.return_value = {"id": "1"}
        # Real provider and service on top of a fake Supabase client
        app.dependency_overrides.pop(get_auth_provider)
        app.dependency_overrides.pop(get_auth_service)
        app.dependency_overrides[get_client] = lambda: supabase

        with TestClient(app) as client:
            response = client.post("/api/auth/sign-in", json={
                "email": "user@test.com",
                "password": "securePassword123",
            })

        assert response.json() == {"status": "success"}
        assert response.cookies.get(settings.session_cookie_name) == "token-123"

    def test_session_requires_cookie(self, client):
        response = client.get("/api/auth/session", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "/sign-in"

    def test_session_with_invalid_cookie(self, client, settings):
        client.cookies.set(settings.session_cookie_name, "forged")

        response = client.get("/api/auth/session")

        assert response.status_code == 401
        assert response.json() == {"detail": "Unauthorized"}

    def test_session(self, signed_in_client):
        response = signed_in_client.get("/api/auth/session")

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["email"] == "user@test.com"
        assert "access_token" not in body

    def test_sign_out(self, signed_in_client, provider):
        response = signed_in_client.post("/api/auth/sign-out")

        assert response.json() == {"status": "success"}
        provider.sign_out.assert_called_once()

    def test_sign_out_failure(self, signed_in_client, provider):
        provider.sign_out.side_effect = RuntimeError("network")

        response = signed_in_client.post("/api/auth/sign-out")

        assert response.json()["fieldErrors"] == {"message": [ErrorMessage.FAILED_SIGN_OUT]}

    def test_sign_out_revokes_cookie_token(self, app, settings):
        from fastapi.testclient import TestClient

        supabase = MagicMock()
        app.dependency_overrides.pop(get_auth_provider)
        app.dependency_overrides.pop(get_auth_service)
        app.dependency_overrides[get_client] = lambda: supabase

        with TestClient(app) as client:
            client.cookies.set(settings.session_cookie_name, "token-123")
            response = client.post("/api/auth/sign-out")

        assert response.json() == {"status": "success"}
        supabase.auth.admin.sign_out.assert_called_once_with("token-123")
        assert 'Max-Age=0' in response.headers["set-cookie"]

    def test_sign_out_revocation_failure(self, app, settings):
        from fastapi.testclient import TestClient

        supabase = MagicMock()
        supabase.auth.admin.sign_out.side_effect = RuntimeError("invalid JWT")
        app.dependency_overrides.pop(get_auth_provider)
        app.dependency_overrides.pop(get_auth_service)
        app.dependency_overrides[get_client] = lambda: supabase

        with TestClient(app) as client:
            client.cookies.set(settings.session_cookie_name, "token-123")
            response = client.post("/api/auth/sign-out")

        assert response.json()["fieldErrors"] == {"message": [ErrorMessage.FAILED_SIGN_OUT]}

    def test_session_reports_expiry(self, signed_in_client, provider, session):
        provider.get_session.return_value = session.model_copy(update={"expires_at": 1900000000})

        response = signed_in_client.get("/api/auth/session")

        assert response.json()["expires_at"] == 1900000000


class TestPages:
    def test_dashboard_without_cookie_redirects_to_sign_in(self, client):
        response = client.get("/", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "/sign-in"

    def test_dashboard_with_invalid_cookie_is_unauthorized(self, client, settings):
        client.cookies.set(settings.session_cookie_name, "forged")

        response = client.get("/", headers={"accept": "text/html"})

        assert response.status_code == 401
        assert "Access denied" in response.text

    def test_dashboard(self, signed_in_client):
        response = signed_in_client.get("/")

        assert response.status_code == 200
        assert "Hello, テスト" in response.text

    def test_sign_in_page(self, client):
        response = client.get("/sign-in")

        assert response.status_code == 200
        assert 'name="email"' in response.text
        assert 'minlength="8"' in response.text

    def test_sign_in_page_redirects_signed_in_user(self, signed_in_client):
        response = signed_in_client.get("/sign-in", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/"

    def test_sign_in_submission_success(self, client, users):
        users.find_first.return_value = {"id": "1"}

        response = client.post(
            "/sign-in",
            data={"email": "user@test.com", "password": "securePassword123"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"].startswith("/?message=")

    def test_sign_in_submission_error_rerenders_form(self, client, provider):
        response = client.post(
            "/sign-in",
            data={"email": "invalid-email", "password": "securePassword123"},
            follow_redirects=False,
        )

        assert response.status_code == 400
        assert ErrorMessage.INVALID_EMAIL in response.text
        assert 'value="invalid-email"' in response.text
        assert "securePassword123" not in response.text
        provider.sign_in_email.assert_not_called()

    def test_sign_up_submission_duplicate(self, client, users):
        users.find_first.return_value = {"id": "1"}

        response = client.post(
            "/sign-up",
            data={"email": "user@test.com", "name": "テスト", "password": "securePassword123"},
        )

        assert response.status_code == 400
        assert ErrorMessage.ALREADY_EXISTS_USER in response.text

    def test_sign_up_submission_success_shows_flash(self, client, provider, session, settings):
        def sign_up(**kwargs):
            provider.get_session.return_value = session

        provider.sign_up_email.side_effect = sign_up
        client.cookies.set(settings.session_cookie_name, session.access_token)

        response = client.post(
            "/sign-up",
            data={"email": "user@test.com", "name": "テスト", "password": "securePassword123"},
        )

        assert response.status_code == 200
        assert NotifyMessage.SIGN_UP_SUCCEEDED in response.text

    def test_sign_out_redirects_to_sign_in(self, signed_in_client):
        response = signed_in_client.post("/sign-out", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"].startswith("/sign-in?message=")
