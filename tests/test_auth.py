# tests/test_auth.py

"""
Tests for authentication endpoints and the session profile bootstrap.
"""

from fastapi.testclient import TestClient
from unittest.mock import patch, Mock

from dependencies.auth import PROFILE_COLUMNS


AUTH_HEADER = {"Authorization": "Bearer test-token"}


def _auth_user(user_id="auth-1", email="ana@example.com", metadata=None):
    user = Mock()
    user.id = user_id
    user.email = email
    user.user_metadata = metadata or {}
    return user


# ============================================================
# LOGIN
# ============================================================
def test_login_success(client: TestClient):
    """Test successful login."""
    with patch("routers.auth.get_supabase_client") as mock_supabase:
        mock_client = Mock()
        mock_session = Mock()
        mock_session.access_token = "test-token"
        mock_session.refresh_token = "refresh-token"
        mock_session.expires_in = 3600
        mock_client.auth.sign_in_with_password.return_value = Mock(session=mock_session)
        mock_supabase.return_value = mock_client

        response = client.post(
            "/auth/login",
            json={"email": " Test@Example.com ", "password": "password123"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["access_token"] == "test-token"
        assert data["refresh_token"] == "refresh-token"
        assert data["token_type"] == "bearer"
        mock_client.auth.sign_in_with_password.assert_called_once_with(
            {"email": "test@example.com", "password": "password123"}
        )


def test_login_invalid_credentials(client: TestClient):
    """Test login with invalid credentials."""
    with patch("routers.auth.get_supabase_client") as mock_supabase:
        mock_client = Mock()
        mock_client.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")
        mock_supabase.return_value = mock_client

        response = client.post(
            "/auth/login",
            json={"email": "test@example.com", "password": "wrongpassword"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Correo o contraseña inválidos"


def test_login_without_session(client: TestClient):
    with patch("routers.auth.get_supabase_client") as mock_supabase:
        mock_client = Mock()
        mock_client.auth.sign_in_with_password.return_value = Mock(session=None)
        mock_supabase.return_value = mock_client

        response = client.post(
            "/auth/login",
            json={"email": "test@example.com", "password": "password123"}
        )

        assert response.status_code == 401


def test_login_without_supabase(client: TestClient):
    with patch("routers.auth.get_supabase_client", return_value=None):
        response = client.post(
            "/auth/login",
            json={"email": "test@example.com", "password": "password123"}
        )

        assert response.status_code == 500


# ============================================================
# REGISTER
# ============================================================
def test_register_creates_pending_profile(client: TestClient, fake_supabase):
    fake_supabase.client.auth.sign_up.return_value = Mock(user=_auth_user("new-auth-id"))
    profiles = fake_supabase.respond("profiles", [{"id": "p-1"}])

    response = client.post(
        "/auth/register",
        json={"email": "Nuevo@Example.com", "password": "secret123", "nombre": " Nuevo Usuario "},
    )

    assert response.status_code == 201
    assert response.json()["user_id"] == "new-auth-id"

    stored = profiles.upsert.call_args[0][0]
    assert stored["user_id"] == "new-auth-id"
    assert stored["email"] == "nuevo@example.com"
    assert stored["display_name"] == "Nuevo Usuario"
    assert stored["role"] == "pending"
    assert stored["is_active"] is False
    assert profiles.upsert.call_args[1] == {"on_conflict": "user_id"}


def test_register_sign_up_error(client: TestClient, fake_supabase):
    fake_supabase.client.auth.sign_up.side_effect = Exception("User already registered")

    response = client.post(
        "/auth/register",
        json={"email": "dup@example.com", "password": "secret123"},
    )

    assert response.status_code == 400
    assert "User already registered" in response.json()["detail"]


# ============================================================
# SESSION BOOTSTRAP (get_current_user)
# ============================================================
def test_me_creates_pending_profile_on_first_login(client: TestClient, fake_supabase):
    fake_supabase.client.auth.get_user.return_value = Mock(
        user=_auth_user(metadata={"full_name": "Ana Pérez"})
    )
    created = {
        "id": "p-9", "user_id": "auth-1", "email": "ana@example.com",
        "display_name": "Ana Pérez", "role": "pending", "is_active": False,
    }
    profiles = fake_supabase.respond("profiles", [], [created])

    response = client.get("/auth/me", headers=AUTH_HEADER)

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["role"] == "pending"
    assert body["user"]["full_name"] == "Ana Pérez"
    assert body["estado"] == "Pendiente"
    assert body["permissions"]["sections"] == []
    assert body["permissions"]["canCreateQuote"] is False

    fake_supabase.client.auth.get_user.assert_called_once_with("test-token")
    profiles.select.assert_called_with(PROFILE_COLUMNS)
    profiles.eq.assert_called_with("user_id", "auth-1")
    inserted = profiles.insert.call_args[0][0]
    assert inserted["role"] == "pending"
    assert inserted["is_active"] is False


def test_me_existing_profile_with_overrides(client: TestClient, fake_supabase):
    fake_supabase.client.auth.get_user.return_value = Mock(user=_auth_user())
    fake_supabase.respond("profiles", [{
        "id": "p-1", "user_id": "auth-1", "email": "ana@example.com",
        "full_name": "Ana", "role": "lector", "is_active": True,
        "permissions": {"logColumns": {"oferta_usd": True}},
    }])

    response = client.get("/auth/me", headers=AUTH_HEADER)

    assert response.status_code == 200
    body = response.json()
    assert body["estado"] == "Activo"
    assert "oferta_usd" in body["permissions"]["logColumns"]
    assert "moneda" not in body["permissions"]["logColumns"]
    fake_supabase.queries["profiles"].insert.assert_not_called()


def test_me_invalid_token(client: TestClient, fake_supabase):
    fake_supabase.client.auth.get_user.side_effect = Exception("invalid JWT")

    response = client.get("/auth/me", headers=AUTH_HEADER)

    assert response.status_code == 401


def test_me_without_token(client: TestClient):
    response = client.get("/auth/me")
    assert response.status_code in (401, 403)


def test_profile_creation_failure_is_forbidden(client: TestClient, fake_supabase):
    fake_supabase.client.auth.get_user.return_value = Mock(user=_auth_user())
    fake_supabase.respond("profiles", [], [])

    response = client.get("/auth/me", headers=AUTH_HEADER)

    assert response.status_code == 403
    assert "perfil no está configurado" in response.json()["detail"]


# ============================================================
# ACTIVE USER GATE
# ============================================================
def test_pending_user_is_blocked_from_data(client: TestClient, login_as, mock_pending_user):
    login_as(mock_pending_user)

    response = client.get("/cotizaciones")

    assert response.status_code == 403
    assert "en revisión o bloqueada" in response.json()["detail"]


def test_blocked_user_is_blocked_from_data(client: TestClient, login_as, mock_blocked_user):
    login_as(mock_blocked_user)

    response = client.get("/requerimientos")

    assert response.status_code == 403


def test_me_for_blocked_user(client: TestClient, login_as, mock_blocked_user):
    login_as(mock_blocked_user)

    response = client.get("/auth/me")

    assert response.status_code == 200
    assert response.json()["estado"] == "Bloqueado"
