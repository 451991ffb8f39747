from conftest import bearer, login

from sqlmodel import select

from feria.core.security import get_token_service
from feria.models.design import Design, DesignFiles
from feria.models.user import Logo, User

PNG = "image/png"


def _form(catalog):
    stand, model = catalog
    return {"stand_id": stand.id, "model_id": model.id}


def test_catalogs_are_public(client, catalog):
    stands = client.get("/design/stand").json()
    models = client.get("/design/model").json()
    assert [s["name"] for s in stands] == ["Corner"]
    assert [m["name"] for m in models] == ["Desk"]


def test_add_design_refreshes_callers_claims(client, make_user, catalog, session):
    company = make_user("acme")
    login(client, "acme")
    tokens = get_token_service()
    assert tokens.verify(client.cookies["authToken"]).design_complete is False

    resp = client.post(
        "/design/addDesign",
        data=_form(catalog),
        files={"banner": ("banner.png", b"b", PNG), "poster": ("poster.png", b"p", PNG)},
    )

    assert resp.status_code == 201
    assert "set-cookie" in resp.headers
    assert tokens.verify(client.cookies["authToken"]).design_complete is True

    session.expire_all()
    assert session.get(User, company.id).design_complete is True
    files = session.exec(select(DesignFiles)).one()
    assert "/banners/" in files.banner_url
    assert "/posters/" in files.poster_url


def test_admin_acts_for_company_and_keeps_own_session(client, make_user, catalog, session):
    company = make_user("acme")
    admin = make_user("root", role="admin")
    login(client, "root")

    resp = client.post(f"/design/addDesign/{company.id}", data=_form(catalog))

    assert resp.status_code == 201
    assert "set-cookie" not in resp.headers
    claims = get_token_service().verify(client.cookies["authToken"])
    assert claims.id == admin.id

    design = session.exec(select(Design)).one()
    assert design.company_id == company.id


def test_admin_without_target_id(client, make_user, catalog):
    make_user("root", role="admin")

    resp = client.post("/design/addDesign", data=_form(catalog), headers=bearer(client, "root"))

    assert resp.status_code == 400
    assert resp.json()["error"] == "missing_id"


def test_company_route_id_is_ignored(client, make_user, catalog, session):
    me = make_user("acme")
    other = make_user("globex")

    resp = client.post(f"/design/addDesign/{other.id}", data=_form(catalog), headers=bearer(client, "acme"))

    assert resp.status_code == 201
    assert session.exec(select(Design)).one().company_id == me.id


def test_visitor_cannot_add_design(client, make_user, catalog, session):
    make_user("vera", role="visitor")

    resp = client.post("/design/addDesign", data=_form(catalog), headers=bearer(client, "vera"))

    assert resp.status_code == 403
    assert resp.json()["error"].startswith("Access denied")
    assert session.exec(select(Design)).all() == []


def test_add_design_twice(client, make_user, catalog):
    make_user("acme")
    headers = bearer(client, "acme")
    assert client.post("/design/addDesign", data=_form(catalog), headers=headers).status_code == 201

    resp = client.post("/design/addDesign", data=_form(catalog), headers=headers)

    assert resp.status_code == 400
    assert resp.json()["error"] == "design_exists"


def test_add_design_unknown_stand(client, make_user, catalog):
    make_user("acme")
    _, model = catalog

    resp = client.post(
        "/design/addDesign",
        data={"stand_id": "nope", "model_id": model.id},
        headers=bearer(client, "acme"),
    )

    assert resp.status_code == 404


def test_add_design_missing_ids(client, make_user):
    make_user("acme")
    resp = client.post("/design/addDesign", data={}, headers=bearer(client, "acme"))
    assert resp.status_code == 400


def test_add_design_copies_company_logo(client, make_user, catalog, session):
    company = make_user("acme")
    session.add(Logo(company_id=company.id, url="https://cdn.example.com/acme.png"))
    session.commit()

    client.post("/design/addDesign", data=_form(catalog), headers=bearer(client, "acme"))

    assert session.exec(select(Design)).one().logo_url == "https://cdn.example.com/acme.png"


def test_get_design(client, make_user, catalog):
    company = make_user("acme")
    make_user("vera", role="visitor")
    client.post("/design/addDesign", data=_form(catalog), headers=bearer(client, "acme"))

    own = client.get("/design/getDesign", headers=bearer(client, "acme"))
    assert own.status_code == 200
    assert own.json()["stand"]["name"] == "Corner"
    assert own.json()["model"]["name"] == "Desk"

    public = client.get(f"/design/getDesign/{company.id}", headers=bearer(client, "vera"))
    assert public.json()["design"]["company_id"] == company.id

    missing = client.get("/design/getDesign", headers=bearer(client, "vera"))
    assert missing.status_code == 404


def test_update_design_replaces_only_sent_files(client, make_user, catalog, storage, session):
    make_user("acme")
    headers = bearer(client, "acme")
    client.post(
        "/design/addDesign",
        data=_form(catalog),
        files={"banner": ("b1.png", b"1", PNG), "poster": ("p1.png", b"1", PNG)},
        headers=headers,
    )
    before = session.exec(select(DesignFiles)).one()
    old_banner, old_poster = before.banner_url, before.poster_url

    resp = client.put(
        "/design/updateDesign",
        files={"banner": ("b2.png", b"2", PNG)},
        headers=headers,
    )

    assert resp.status_code == 200
    new_banner = resp.json()["files"]["banner_url"]
    assert new_banner != old_banner
    assert resp.json()["files"]["poster_url"] == old_poster
    assert storage.id_from_url(old_banner) not in storage.objects
    assert storage.id_from_url(old_poster) in storage.objects


def test_update_files_without_design(client, make_user):
    make_user("acme")

    resp = client.put(
        "/file/update",
        files={"banner": ("b.png", b"b", PNG)},
        headers=bearer(client, "acme"),
    )

    assert resp.status_code == 404


def test_delete_design_removes_files(client, make_user, catalog, storage, session):
    company = make_user("acme")
    headers = bearer(client, "acme")
    client.post(
        "/design/addDesign",
        data=_form(catalog),
        files={"banner": ("b.png", b"b", PNG)},
        headers=headers,
    )
    assert storage.objects

    resp = client.delete("/design/deleteDesign", headers=headers)

    assert resp.status_code == 200
    assert storage.objects == {}
    assert session.exec(select(Design)).all() == []
    assert session.exec(select(DesignFiles)).all() == []
    session.expire_all()
    assert session.get(User, company.id).design_complete is True


def test_all_designs_for_admin(client, make_user, catalog):
    make_user("acme")
    make_user("root", role="admin")
    client.post("/design/addDesign", data=_form(catalog), headers=bearer(client, "acme"))

    login(client, "root")
    resp = client.get("/design/allDesigns")

    assert resp.status_code == 200
    assert len(resp.json()) == 1
