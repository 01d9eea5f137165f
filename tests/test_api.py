from datetime import timedelta

from fastapi.testclient import TestClient

from recruitment_api.errors import ServerError
from recruitment_api.main import create_app
from recruitment_api.services import user_store


def register(client, name="Ann", email="ann@x.com", password="secret1"):
    return client.post("/api/auth/register", json={"name": name, "email": email, "password": password})


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


def test_root_and_health(client):
    root = client.get("/")
    assert root.status_code == 200
    assert root.text == "Recruitment Platform API is running"
    assert client.get("/health").json() == {"status": "ok"}


def test_register_me_and_update_profile(client):
    res = register(client)
    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    token = body["token"]

    me = client.get("/api/auth/me", headers=auth_header(token))
    assert me.status_code == 200
    assert me.json()["success"] is True
    assert me.json()["data"]["email"] == "ann@x.com"

    updated = client.put("/api/users/profile", json={"skills": ["Go"]}, headers=auth_header(token))
    assert updated.status_code == 200
    data = updated.json()["data"]
    assert data["skills"] == ["Go"]
    assert data["name"] == "Ann"

    profile = client.get("/api/users/profile", headers=auth_header(token))
    assert profile.status_code == 200
    assert profile.json()["data"]["skills"] == ["Go"]


def test_user_payload_shape_has_no_password(client):
    token = register(client).json()["token"]
    data = client.get("/api/auth/me", headers=auth_header(token)).json()["data"]
    assert set(data) == {
        "_id", "name", "email", "role", "skills", "experience", "education", "createdAt", "updatedAt",
    }
    assert data["role"] == "user"
    assert data["experience"] == 0
    assert data["education"] == ""
    assert "secret1" not in str(data)


def test_register_validation_errors(client):
    res = client.post("/api/auth/register", json={"name": "", "email": "nope", "password": "123"})
    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert {"msg": "Name is required", "param": "name", "location": "body"} in body["errors"]
    assert {"msg": "Please include a valid email", "param": "email", "location": "body"} in body["errors"]
    assert {"msg": "Password must be at least 6 characters", "param": "password", "location": "body"} in body["errors"]


def test_register_missing_fields(client):
    res = client.post("/api/auth/register", json={})
    assert res.status_code == 400
    assert [e["param"] for e in res.json()["errors"]] == ["name", "email", "password"]


def test_malformed_json_body(client):
    res = client.post(
        "/api/auth/register",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["success"] is False
    assert res.json()["errors"]


def test_register_duplicate(client):
    assert register(client).status_code == 201
    res = register(client, name="Ann Again")
    assert res.status_code == 400
    assert res.json() == {"success": False, "error": "User already exists"}


def test_login(client):
    register(client)
    res = client.post("/api/auth/login", json={"email": "ann@x.com", "password": "secret1"})
    assert res.status_code == 200
    token = res.json()["token"]
    assert client.get("/api/auth/me", headers=auth_header(token)).status_code == 200


def test_login_failures_share_message(client):
    register(client)
    wrong_password = client.post("/api/auth/login", json={"email": "ann@x.com", "password": "nope-nope"})
    unknown_email = client.post("/api/auth/login", json={"email": "bob@x.com", "password": "secret1"})
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"success": False, "error": "Invalid credentials"}


def test_protected_routes_require_token(client):
    unauthorized = {"success": False, "error": "Not authorized to access this route"}
    for method, path in (("get", "/api/auth/me"), ("get", "/api/users/profile"), ("put", "/api/users/profile")):
        res = getattr(client, method)(path)
        assert res.status_code == 401
        assert res.json() == unauthorized

    assert client.get("/api/auth/me", headers={"Authorization": "Token abc"}).json() == unauthorized
    assert client.get("/api/auth/me", headers=auth_header("abc.def.ghi")).json() == unauthorized


def test_expired_token_rejected(client):
    token = register(client).json()["token"]
    tokens = client.app.state.ctx.tokens
    expired = tokens.issue(tokens.verify(token), expires_delta=timedelta(seconds=-1))
    res = client.get("/api/users/profile", headers=auth_header(expired))
    assert res.status_code == 401


def test_update_profile_validation(client):
    token = register(client).json()["token"]
    res = client.put("/api/users/profile", json={"experience": "not-a-number"}, headers=auth_header(token))
    assert res.status_code == 400
    assert res.json()["errors"] == [
        {"msg": "Experience must be a number", "param": "experience", "location": "body"}
    ]
    profile = client.get("/api/users/profile", headers=auth_header(token)).json()["data"]
    assert profile["experience"] == 0


def test_update_profile_cannot_change_credentials(client):
    token = register(client).json()["token"]
    res = client.put(
        "/api/users/profile",
        json={"email": "evil@x.com", "password": "hijacked", "role": "admin", "experience": 2},
        headers=auth_header(token),
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["email"] == "ann@x.com"
    assert data["role"] == "user"
    assert data["experience"] == 2
    login = client.post("/api/auth/login", json={"email": "ann@x.com", "password": "secret1"})
    assert login.status_code == 200


def test_store_failure_is_generic_500(client, monkeypatch):
    async def broken(*args, **kwargs):
        raise ServerError() from RuntimeError("connection refused on 10.0.0.5")

    monkeypatch.setattr(user_store, "get_user_by_email", broken)
    res = client.post("/api/auth/login", json={"email": "ann@x.com", "password": "secret1"})
    assert res.status_code == 500
    assert res.json() == {"success": False, "error": "Server error"}


def test_unknown_route_uses_envelope(client):
    res = client.get("/api/nothing-here")
    assert res.status_code == 404
    assert res.json() == {"success": False, "error": "Not Found"}


def test_huge_integer_experience_is_rejected(client):
    token = register(client).json()["token"]
    res = client.put(
        "/api/users/profile",
        content='{"experience": 1' + "0" * 400 + "}",
        headers={**auth_header(token), "Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["errors"] == [
        {"msg": "Experience must be a number", "param": "experience", "location": "body"}
    ]


def test_unexpected_exception_is_generic_500(settings):
    app = create_app(settings)

    @app.get("/explode")
    async def explode():
        raise RuntimeError("password=hunter2 at db-primary:5432")

    with TestClient(app, raise_server_exceptions=False) as test_client:
        res = test_client.get("/explode")
    assert res.status_code == 500
    assert res.json() == {"success": False, "error": "Server error"}
