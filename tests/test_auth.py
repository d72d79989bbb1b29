"""Signup, login and the bearer-token gate."""

from datetime import timedelta

from app.auth_token import create_access_token


def test_signup_returns_token_and_user(client):
    response = client.post(
        "/api/auth/signup", json={"name": "Alice", "email": "Alice@Example.com", "password": "secret123"}
    )
    assert response.status_code == 201
    body = response.json()
    assert body["token"]
    assert body["user"]["name"] == "Alice"
    assert body["user"]["email"] == "alice@example.com"
    assert set(body["user"]) == {"id", "name", "email"}


def test_signup_validation(client, signup):
    signup("Alice", "alice@example.com")

    missing = client.post("/api/auth/signup", json={"email": "x@example.com", "password": "secret123"})
    assert missing.status_code == 400
    assert missing.json() == {"message": "Please provide name, email, and password"}

    short = client.post("/api/auth/signup", json={"name": "X", "email": "x@example.com", "password": "123"})
    assert short.status_code == 400
    assert short.json() == {"message": "Password must be at least 6 characters long"}

    taken = client.post("/api/auth/signup", json={"name": "A2", "email": "alice@example.com", "password": "secret123"})
    assert taken.status_code == 400
    assert taken.json() == {"message": "Email already exists"}


def test_login_with_wrong_then_correct_password(client, signup):
    user_id, _ = signup("Alice", "alice@example.com", password="right-password")

    wrong = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-password"})
    assert wrong.status_code == 401
    assert wrong.json() == {"message": "Invalid credentials"}

    right = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "right-password"})
    assert right.status_code == 200
    token = right.json()["token"]

    me = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json() == {"id": user_id, "name": "Alice", "email": "alice@example.com"}


def test_login_unknown_email(client):
    response = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "whatever"})
    assert response.status_code == 401
    assert response.json() == {"message": "Invalid credentials"}


def test_login_requires_both_fields(client):
    response = client.post("/api/auth/login", json={"email": "alice@example.com"})
    assert response.status_code == 400
    assert response.json() == {"message": "Please provide email and password"}


def test_expired_token_is_rejected(client, signup):
    user_id, _ = signup("Alice", "alice@example.com")
    token = create_access_token(user_id, "alice@example.com", expires_delta=timedelta(minutes=-5))

    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json() == {"message": "Not authorized, token expired"}


def test_tampered_token_is_rejected(client, signup):
    _, headers = signup("Alice", "alice@example.com")
    headers = {"Authorization": headers["Authorization"] + "tampered"}

    response = client.get("/api/users/me", headers=headers)

    assert response.status_code == 401
    assert response.json() == {"message": "Not authorized, token failed"}


def test_missing_token_is_rejected(client):
    response = client.get("/api/users/me")
    assert response.status_code == 401
    assert response.json() == {"message": "Not authorized, no token"}


def test_me_for_deleted_account(client):
    token = create_access_token("0b4f6a9e-1d7c-4a53-9a2e-6c1f0f3e8d21", "gone@example.com")
    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 404
    assert response.json() == {"message": "User not found"}


def test_bearer_without_token_is_rejected(client):
    response = client.get("/api/users/me", headers={"Authorization": "Bearer"})
    assert response.status_code == 401
    assert response.json() == {"message": "Not authorized, token failed"}
