from jose import jwt

from mams.core.config import settings
from mams.core.security import create_access_token
from mams.models import AuditLog, User
from tests.conftest import PASSWORD


def test_login_issues_token_with_identity_claims(client, seed, count):
    response = client.post("/api/auth/login", data={"username": "cmd_alpha", "password": PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["role"] == "commander"
    assert body["base_id"] == seed.alpha

    claims = jwt.decode(body["access_token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert claims["sub"] == str(seed.cmd_alpha)
    assert claims["role"] == "commander"
    assert claims["base_id"] == seed.alpha
    assert count(AuditLog, action="login") == 1


def test_login_with_wrong_password(client, seed, count):
    response = client.post("/api/auth/login", data={"username": "cmd_alpha", "password": "nope"})

    assert response.status_code == 401
    assert count(AuditLog, action="login_failed") == 1


def test_inactive_user_cannot_log_in(client, seed, session_factory):
    session = session_factory()
    session.query(User).filter(User.id == seed.log_alpha).update({User.is_active: False})
    session.commit()
    session.close()

    response = client.post("/api/auth/login", data={"username": "log_alpha", "password": PASSWORD})

    assert response.status_code == 400
    assert response.json()["detail"] == "Inactive user"


def test_me_returns_token_identity(client, seed, headers):
    response = client.get("/api/auth/me", headers=headers.log_alpha)

    assert response.status_code == 200
    assert response.json() == {"id": seed.log_alpha, "role": "logistics", "base_id": seed.alpha}


def test_requests_without_token_are_rejected(client, seed):
    response = client.get("/api/purchases/")
    assert response.status_code in (401, 403)


def test_tampered_token_is_rejected(client, seed):
    token = create_access_token(subject=seed.admin, role="admin")
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}x"})
    assert response.status_code == 401


def test_token_with_unknown_role_is_rejected(client, seed):
    token = create_access_token(subject=seed.admin, role="general")
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_root_and_timing_header(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "X-Process-Time" in response.headers
