from conftest import bearer, login

from sqlmodel import select

from feria.models.user import Logo, User


def _register(client, **fields):
    data = {"name": "acme", "email": "acme@example.com", "password": "secret", "role": "co"}
    data.update(fields)
    return client.post("/users/register", data=data)


def test_register_company_with_logo(client, session, storage):
    resp = client.post(
        "/users/register",
        data={
            "name": "acme",
            "email": "acme@example.com",
            "password": "secret",
            "role": "co",
            "tax_id": "B12345678",
        },
        files={"logo": ("logo.png", b"png-bytes", "image/png")},
    )

    assert resp.status_code == 201
    assert "set-cookie" not in resp.headers

    user = session.get(User, resp.json()["id"])
    assert user.tax_id == "B12345678"
    assert user.password_hash != "secret"
    logo = session.get(Logo, user.logo_id)
    assert logo.company_id == user.id
    assert storage.id_from_url(logo.url) in storage.objects


def test_register_visitor_uploads_image_and_cv(client, session):
    resp = client.post(
        "/users/register",
        data={
            "name": "vera",
            "email": "vera@example.com",
            "password": "secret",
            "role": "visitor",
            "dni": "12345678Z",
            "studies": "CS",
        },
        files={
            "profile_image": ("me.jpg", b"jpg", "image/jpeg"),
            "cv": ("cv.pdf", b"pdf", "application/pdf"),
        },
    )

    assert resp.status_code == 201
    user = session.get(User, resp.json()["id"])
    assert "/profileImages/" in user.image_url
    assert "/cvFiles/" in user.cv_url
    assert user.dni == "12345678Z"


def test_register_duplicate_email(client):
    assert _register(client).status_code == 201

    resp = _register(client, name="other")

    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_email"


def test_register_duplicate_name(client):
    assert _register(client).status_code == 201

    resp = _register(client, email="other@example.com")

    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_name"


def test_register_unknown_role(client):
    resp = _register(client, role="superuser")
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_role"


def test_register_missing_field(client):
    resp = client.post("/users/register", data={"name": "acme", "password": "secret", "role": "co"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_request"


def test_registered_user_can_log_in(client):
    _register(client)
    login(client, "acme")


def test_lists_by_role_hide_password_hash(client, make_user):
    make_user("acme")
    make_user("vera", role="visitor")
    make_user("root", role="admin")
    headers = bearer(client, "vera")

    companies = client.get("/users/companies", headers=headers).json()
    assert [u["name"] for u in companies] == ["acme"]
    assert "password_hash" not in companies[0]

    assert [u["name"] for u in client.get("/users/visitors", headers=headers).json()] == ["vera"]
    assert [u["name"] for u in client.get("/users/admins", headers=headers).json()] == ["root"]
    assert len(client.get("/users/all", headers=headers).json()) == 3


def test_lists_require_authentication(client):
    assert client.get("/users/all").status_code == 401


def test_get_user_defaults_to_caller(client, make_user):
    me = make_user("acme")
    other = make_user("globex")
    headers = bearer(client, "acme")

    assert client.get("/users", headers=headers).json()["id"] == me.id
    assert client.get(f"/users/{other.id}", headers=headers).json()["id"] == other.id
    assert client.get("/users/missing", headers=headers).status_code == 404


def test_update_self(client, make_user, session):
    me = make_user("acme")

    resp = client.put(
        f"/users/{me.id}",
        json={"name": "acme-labs", "password": "new-secret"},
        headers=bearer(client, "acme"),
    )

    assert resp.status_code == 200
    assert resp.json()["name"] == "acme-labs"
    login(client, "acme-labs", "new-secret")


def test_update_other_user_is_denied(client, make_user):
    make_user("acme")
    other = make_user("globex")

    resp = client.put(f"/users/{other.id}", json={"name": "x"}, headers=bearer(client, "acme"))

    assert resp.status_code == 403
    assert resp.json() == {"error": "Access denied"}


def test_only_admin_changes_roles(client, make_user):
    me = make_user("vera", role="visitor")
    make_user("root", role="admin")

    resp = client.put(
        f"/users/{me.id}",
        json={"role": "admin"},
        headers=bearer(client, "vera"),
    )
    assert resp.status_code == 403

    resp = client.put(
        f"/users/{me.id}",
        json={"role": "co", "tax_id": "B1"},
        headers=bearer(client, "root"),
    )
    assert resp.status_code == 200
    assert resp.json()["role"] == "co"


def test_switch_to_company_requires_tax_id(client, make_user):
    me = make_user("vera", role="visitor")
    make_user("root", role="admin")

    resp = client.put(f"/users/{me.id}", json={"role": "co"}, headers=bearer(client, "root"))

    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_tax_id"


def test_update_to_taken_email(client, make_user):
    me = make_user("acme")
    make_user("globex")

    resp = client.put(
        f"/users/{me.id}",
        json={"email": "globex@example.com"},
        headers=bearer(client, "acme"),
    )

    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_email"


def test_delete_self_and_admin(client, make_user, session):
    me = make_user("acme")
    other = make_user("globex")
    make_user("root", role="admin")

    assert client.delete(f"/users/{other.id}", headers=bearer(client, "acme")).status_code == 403
    assert client.delete(f"/users/{me.id}", headers=bearer(client, "acme")).status_code == 200
    assert client.delete(f"/users/{other.id}", headers=bearer(client, "root")).status_code == 200

    session.expire_all()
    assert session.get(User, me.id) is None
    assert session.get(User, other.id) is None


def test_update_logo_replaces_stored_object(client, make_user, storage, session):
    make_user("acme")
    headers = bearer(client, "acme")

    first = client.put("/users/logo", files={"logo": ("a.png", b"a", "image/png")}, headers=headers)
    assert first.status_code == 200
    first_url = first.json()["logo_url"]

    second = client.put("/users/logo", files={"logo": ("b.png", b"b", "image/png")}, headers=headers)
    second_url = second.json()["logo_url"]

    assert second_url != first_url
    assert storage.id_from_url(first_url) not in storage.objects
    assert storage.id_from_url(second_url) in storage.objects
    assert len(session.exec(select(Logo)).all()) == 1


def test_visitor_cannot_upload_logo(client, make_user):
    make_user("vera", role="visitor")

    resp = client.put(
        "/users/logo",
        files={"logo": ("a.png", b"a", "image/png")},
        headers=bearer(client, "vera"),
    )

    assert resp.status_code == 403


def test_company_overview_is_admin_only(client, make_user):
    make_user("acme")
    make_user("root", role="admin")

    login(client, "acme")
    assert client.get("/users/companies/unity").status_code == 403

    login(client, "root")
    resp = client.get("/users/companies/unity")
    assert resp.status_code == 200
    overview = resp.json()
    assert [c["user"]["name"] for c in overview] == ["acme"]
    assert overview[0]["design"] is None
    assert overview[0]["offers"] == []


def test_racing_registration_is_a_conflict(client, session, storage, monkeypatch):
    from feria.services.user_service import UserService

    assert _register(client).status_code == 201
    # both requests passed the lookup before either inserted
    monkeypatch.setattr(UserService, "_ensure_unique", lambda self, *args, **kwargs: None)

    resp = client.post(
        "/users/register",
        data={"name": "acme", "email": "acme@example.com", "password": "secret", "role": "co"},
        files={"logo": ("logo.png", b"png-bytes", "image/png")},
    )

    assert resp.status_code == 400
    assert resp.json()["error"] == "duplicate_user"
    assert len(session.exec(select(User)).all()) == 1
    assert storage.objects == {}


def test_racing_update_to_taken_email_is_a_conflict(client, make_user, session, monkeypatch):
    from feria.services.user_service import UserService

    me = make_user("acme")
    make_user("globex")
    headers = bearer(client, "acme")
    monkeypatch.setattr(UserService, "_ensure_unique", lambda self, *args, **kwargs: None)

    resp = client.put(f"/users/{me.id}", json={"email": "globex@example.com"}, headers=headers)

    assert resp.status_code == 400
    assert resp.json()["error"] == "duplicate_user"
    session.expire_all()
    assert session.get(User, me.id).email == "acme@example.com"
