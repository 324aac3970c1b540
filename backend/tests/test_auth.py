from fastapi.testclient import TestClient
from app.main import app
import uuid

COOKIE = "session-token"

def unique_username():
    return f"u_{uuid.uuid4().hex[:10]}"

def register(c: TestClient, username=None, password="secret1", name="Ok"):
    username = username or unique_username()
    r = c.post("/auth/register", json={"username": username, "password": password, "name": name})
    return username, r

def test_register_sets_cookie_and_returns_user():
    c = TestClient(app)
    username, r = register(c, name="Reg")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["user"]["username"] == username
    assert body["user"]["name"] == "Reg"
    assert "password_hash" not in body["user"]

    set_cookie = r.headers["set-cookie"].lower()
    assert f"{COOKIE}=" in set_cookie
    assert "httponly" in set_cookie
    assert "samesite=lax" in set_cookie
    assert "max-age=31536000" in set_cookie
    assert "path=/" in set_cookie
    assert "secure" not in set_cookie

def test_register_duplicate_username_conflicts():
    c = TestClient(app)
    username, _ = register(c)
    _, r = register(TestClient(app), username=username)
    assert r.status_code == 409
    assert r.json()["error"] == "Username already exists"

def test_register_validation_errors_are_400_with_details():
    c = TestClient(app)
    r = c.post("/auth/register", json={"username": unique_username()})
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Validation failed"
    fields = {d["field"] for d in body["details"]}
    assert {"password", "name"} <= fields

    _, r = register(c, password="12345")
    assert r.status_code == 400
    assert any("at least 6 characters" in d["message"] for d in r.json()["details"])

def test_login_and_me():
    c = TestClient(app)
    username, _ = register(c, password="secret1", name="Me")
    fresh = TestClient(app)
    r = fresh.post("/auth/login", json={"username": username, "password": "secret1"})
    assert r.status_code == 200
    assert r.json()["user"]["username"] == username
    assert fresh.cookies.get(COOKIE)

    r = fresh.get("/auth/me")
    assert r.status_code == 200
    assert r.json() == {"user": {"id": r.json()["user"]["id"], "username": username, "name": "Me"}}

def test_login_wrong_password_or_unknown_user_is_401():
    c = TestClient(app)
    username, _ = register(c, password="secret1")
    r = TestClient(app).post("/auth/login", json={"username": username, "password": "secret2"})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid username or password"}

    r = TestClient(app).post("/auth/login", json={"username": unique_username(), "password": "secret1"})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid username or password"}

def test_login_missing_fields_is_400():
    r = TestClient(app).post("/auth/login", json={"username": "someone"})
    assert r.status_code == 400

def test_me_requires_session():
    r = TestClient(app).get("/auth/me")
    assert r.status_code == 401
    assert r.json() == {"error": "Authentication required"}

    r = TestClient(app).get("/auth/me", headers={"Cookie": f"{COOKIE}=not-a-real-token"})
    assert r.status_code == 401

def test_logout_clears_cookie_and_kills_session():
    c = TestClient(app)
    register(c)
    token = c.cookies.get(COOKIE)

    r = c.post("/auth/logout")
    assert r.status_code == 200
    assert r.json() == {"success": True}
    assert f'{COOKIE}=""' in r.headers["set-cookie"] or "max-age=0" in r.headers["set-cookie"].lower()

    # the old token no longer works even if replayed
    r = TestClient(app).get("/auth/me", headers={"Cookie": f"{COOKIE}={token}"})
    assert r.status_code == 401

def test_logout_is_idempotent():
    c = TestClient(app)
    register(c)
    token = c.cookies.get(COOKIE)
    replay = TestClient(app)
    for _ in range(3):
        r = replay.post("/auth/logout", headers={"Cookie": f"{COOKIE}={token}"})
        assert r.status_code == 200
        assert r.json()["success"] is True

    # no cookie at all still succeeds
    assert TestClient(app).post("/auth/logout").status_code == 200
