from models.user import User
from services.auth_service import AuthService
from tests.conftest import MockUser
from core.security import get_current_user
from main import app


def add_user(db, username="inspector1", password="secret123", role="INSPECTOR", is_active=True):
    user = User(
        username=username,
        name="Inspector One",
        hashed_password=AuthService.get_password_hash(password),
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    return user


def test_password_hash_round_trip():
    hashed = AuthService.get_password_hash("secret123")
    assert hashed != "secret123"
    assert AuthService.verify_password("secret123", hashed)
    assert not AuthService.verify_password("wrong", hashed)
    assert not AuthService.verify_password("secret123", "plaintext")


def test_login_returns_user_and_token(client, db_session):
    add_user(db_session)
    response = client.post("/auth/login", data={"username": "inspector1", "password": "secret123"})
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["user"]["username"] == "inspector1"
    assert "hashed_password" not in body["user"]
    assert AuthService.verify_token(body["access_token"])["sub"] == "inspector1"


def test_login_with_wrong_password_is_401(client, db_session):
    add_user(db_session)
    response = client.post("/auth/login", data={"username": "inspector1", "password": "nope"})
    assert response.status_code == 401


def test_login_unknown_user_is_401(client):
    response = client.post("/auth/login", data={"username": "ghost", "password": "secret123"})
    assert response.status_code == 401


def test_login_inactive_user_is_403(client, db_session):
    add_user(db_session, is_active=False)
    response = client.post("/auth/login", data={"username": "inspector1", "password": "secret123"})
    assert response.status_code == 403


def test_bearer_token_resolves_user(client, db_session):
    add_user(db_session)
    token = AuthService.create_access_token({"sub": "inspector1"})
    app.dependency_overrides.pop(get_current_user, None)

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["username"] == "inspector1"

    assert client.get("/auth/me").status_code == 401


def test_user_upsert_and_delete(client, db_session):
    created = client.post("/api/users/", json={
        "username": "cs1", "name": "CS One", "password": "secret123", "role": "cs",
    })
    assert created.status_code == 200, created.text
    user_id = created.json()["id"]
    assert created.json()["role"] == "CS"

    stored = db_session.query(User).filter(User.id == user_id).one()
    old_hash = stored.hashed_password

    updated = client.post("/api/users/", json={"id": user_id, "username": "cs1", "name": "Renamed"})
    assert updated.status_code == 200
    db_session.refresh(stored)
    assert stored.name == "Renamed"
    assert stored.hashed_password == old_hash

    assert client.delete(f"/api/users/{user_id}").status_code == 200
    assert client.delete(f"/api/users/{user_id}").status_code == 404


def test_new_user_needs_password_and_unique_username(client, db_session):
    add_user(db_session)
    assert client.post("/api/users/", json={"username": "newbie"}).status_code == 400
    clash = client.post("/api/users/", json={"username": "inspector1", "password": "secret123"})
    assert clash.status_code == 400


def test_unknown_role_is_rejected(client):
    response = client.post("/api/users/", json={"username": "x123", "password": "secret123", "role": "BOSS"})
    assert response.status_code == 422


def test_user_admin_requires_admin_role(client):
    app.dependency_overrides[get_current_user] = lambda: MockUser("INSPECTOR")
    assert client.get("/api/users/").status_code == 403
