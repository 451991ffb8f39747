from conftest import bearer, login

from feria.core.security import get_token_service


def test_login_sets_session_cookie(client, make_user):
    user = make_user("acme")

    resp = login(client, "acme")

    body = resp.json()
    assert body["user"] == {"id": user.id, "name": "acme", "role": "co"}
    assert "token" not in body

    set_cookie = resp.headers["set-cookie"]
    assert set_cookie.startswith("authToken=")
    assert "HttpOnly" in set_cookie
    assert "Secure" in set_cookie
    assert "samesite=none" in set_cookie.lower()
    assert "Max-Age=604800" in set_cookie


def test_login_by_email(client, make_user):
    make_user("acme")
    resp = client.post("/auth/login", json={"nameOrEmail": "acme@example.com", "password": "secret"})
    assert resp.status_code == 200


def test_login_name_wins_over_email(client, make_user):
    # "bob@example.com" is the *name* of one user and the email of another
    by_name = make_user("bob@example.com", role="visitor")
    make_user("bob")

    resp = client.post("/auth/login", json={"nameOrEmail": "bob@example.com", "password": "secret"})
    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == by_name.id


def test_wrong_password_is_rejected_without_cookie(client, make_user):
    make_user("acme")

    resp = client.post("/auth/login", json={"nameOrEmail": "acme", "password": "nope"})

    assert resp.status_code == 401
    assert resp.json()["error"] == "invalid_password"
    assert "set-cookie" not in resp.headers


def test_unknown_user(client):
    resp = client.post("/auth/login", json={"nameOrEmail": "ghost", "password": "secret"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "user_not_found"
    assert "set-cookie" not in resp.headers


def test_missing_credentials(client):
    resp = client.post("/auth/login", json={"nameOrEmail": "acme"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_request"


def test_token_login_returns_token_and_no_cookie(client, make_user):
    make_user("acme", design_complete=True, information_complete=True)

    resp = client.post("/auth/logging/unity", json={"nameOrEmail": "acme", "password": "secret"})

    assert resp.status_code == 200
    assert "set-cookie" not in resp.headers
    claims = get_token_service().verify(resp.json()["token"])
    assert claims.role == "co"
    assert claims.design_complete is True
    assert claims.information_complete is True


def test_me_requires_token(client):
    resp = client.get("/auth/me")
    assert resp.status_code == 401
    assert resp.json() == {"error": "No token provided"}


def test_me_rejects_invalid_token(client):
    resp = client.get("/auth/me", headers={"Authorization": "Bearer abc.def.ghi"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid or expired token"}


def test_me_with_cookie(client, make_user):
    user = make_user("acme")
    login(client, "acme")

    resp = client.get("/auth/me")

    assert resp.status_code == 200
    assert resp.json()["id"] == user.id


def test_bearer_takes_precedence_over_cookie(client, make_user):
    make_user("acme")
    visitor = make_user("vera", role="visitor")
    login(client, "acme")

    resp = client.get("/auth/me", headers=bearer(client, "vera"))

    assert resp.json()["id"] == visitor.id


def test_invalid_bearer_does_not_fall_back_to_cookie(client, make_user):
    make_user("acme")
    login(client, "acme")

    resp = client.get("/auth/me", headers={"Authorization": "Bearer broken"})

    assert resp.status_code == 401


def test_logout_clears_cookie(client, make_user):
    make_user("acme")
    login(client, "acme")

    resp = client.post("/auth/logout")

    assert resp.status_code == 200
    assert 'authToken=""' in resp.headers["set-cookie"]
    assert client.get("/auth/me").status_code == 401


def test_role_gate_admits_only_exact_role(client, make_user):
    make_user("root", role="admin")
    make_user("acme")

    login(client, "acme")
    resp = client.get("/design/allDesigns")
    assert resp.status_code == 403
    assert resp.json() == {"error": "Access denied: insufficient permissions"}

    login(client, "root")
    assert client.get("/design/allDesigns").status_code == 200


def test_role_gate_reads_cookie_only(client, make_user):
    make_user("root", role="admin")

    resp = client.get("/design/allDesigns", headers=bearer(client, "root"))

    assert resp.status_code == 401
    assert resp.json() == {"error": "No token provided"}


def test_token_without_role_is_treated_as_plain_user(client):
    from feria.schemas.auth import SessionClaims

    token = get_token_service().issue(SessionClaims(id="x", name="x", email="x@example.com"))

    resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.json()["role"] == "user"


def test_role_gate_matches_configured_role(client, make_user):
    from fastapi import Depends, FastAPI
    from fastapi.testclient import TestClient

    from feria.core.auth import require_role

    gate = FastAPI()

    @gate.get("/co-only")
    def co_only(identity=Depends(require_role("co"))):
        return {"id": identity.id}

    @gate.get("/admin-only")
    def admin_only(identity=Depends(require_role("admin"))):
        return {"id": identity.id}

    company = make_user("acme")
    token = login(client, "acme").cookies["authToken"]
    gate_client = TestClient(gate, base_url="https://testserver", cookies={"authToken": token})

    assert gate_client.get("/co-only").json() == {"id": company.id}
    assert gate_client.get("/admin-only").status_code == 403
