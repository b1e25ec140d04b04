# tests/test_users_api.py
from datetime import timedelta

from app import auth

SIGNUP_BODY = {
    "firstName": "Demo",
    "lastName": "Lition",
    "email": "demo@user.io",
    "username": "Demo-lition",
    "password": "password",
}


def test_signup_returns_token_and_user(client):
    resp = client.post("/users/signup", json=SIGNUP_BODY)

    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["firstName"] == "Demo"
    assert body["user"]["email"] == "demo@user.io"
    assert "password" not in body["user"]

    me = client.get("/users/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.json()["user"]["id"] == body["user"]["id"]


def test_signup_duplicate(client):
    client.post("/users/signup", json=SIGNUP_BODY)

    resp = client.post("/users/signup", json=SIGNUP_BODY)

    assert resp.status_code == 403
    body = resp.json()
    assert body["message"] == "User already exists"
    assert set(body["errors"]) == {"email", "username"}


def test_signup_validation(client):
    resp = client.post("/users/signup", json={**SIGNUP_BODY, "email": "not-an-email"})
    assert resp.status_code == 400
    assert "email" in resp.json()["errors"]


def test_login(client, make_user):
    user = make_user(email="login@spots.io")

    resp = client.post("/users/login", json={"email": "login@spots.io", "password": "password123"})

    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == user.id
    assert auth.decode_access_token(resp.json()["access_token"]) == user.id


def test_login_bad_password(client, make_user):
    make_user(email="login@spots.io")

    resp = client.post("/users/login", json={"email": "login@spots.io", "password": "wrong"})

    assert resp.status_code == 401
    assert resp.json() == {"message": "Invalid credentials"}


def test_me_requires_authentication(client):
    resp = client.get("/users/me")
    assert resp.status_code == 401
    assert resp.json() == {"message": "Authentication required"}


def test_expired_token_is_rejected(client, make_user):
    user = make_user()
    token = auth.create_access_token({"sub": str(user.id)}, expires_delta=timedelta(minutes=-1))

    resp = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 401


def test_token_for_deleted_user_is_rejected(client):
    token = auth.create_access_token({"sub": "12345"})
    resp = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
