from datetime import timedelta

from app.utils.token import create_access_token, decode_access_token


def test_register(client):
    response = client.post(
        "/auth/register",
        json={"email": "Reader@Example.com", "password": "secret123", "username": "reader"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User registered successfully"
    assert body["data"]["email"] == "reader@example.com"
    assert body["data"]["username"] == "reader"
    assert "password" not in body["data"]


def test_register_defaults_username_to_email_local_part(client):
    response = client.post(
        "/auth/register", json={"email": "ada@example.com", "password": "secret123"}
    )

    assert response.json()["data"]["username"] == "ada"


def test_register_duplicate_email(client, db, make_user):
    make_user(db, email="reader@example.com")

    response = client.post(
        "/auth/register", json={"email": "READER@example.com", "password": "secret123"}
    )

    assert response.status_code == 409
    assert response.json()["message"] == "Email already registered"


def test_register_short_password(client):
    response = client.post(
        "/auth/register", json={"email": "reader@example.com", "password": "123"}
    )

    assert response.status_code == 400
    assert response.json()["message"].startswith("password:")


def test_register_invalid_email(client):
    response = client.post(
        "/auth/register", json={"email": "not-an-email", "password": "secret123"}
    )

    assert response.status_code == 400
    assert response.json()["message"].startswith("email:")


def test_login_returns_usable_token(client, db, make_user):
    user = make_user(db, email="reader@example.com", password="secret123")

    response = client.post(
        "/auth/login", json={"email": "reader@example.com", "password": "secret123"}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["token_type"] == "bearer"
    assert decode_access_token(data["access_token"])["sub"] == user.id

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json()["data"]["id"] == user.id
    assert me.json()["data"]["email"] == "reader@example.com"


def test_login_wrong_password(client, db, make_user):
    make_user(db, email="reader@example.com", password="secret123")

    response = client.post(
        "/auth/login", json={"email": "reader@example.com", "password": "wrong-one"}
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_login_unknown_email(client):
    response = client.post(
        "/auth/login", json={"email": "nobody@example.com", "password": "secret123"}
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_me_without_token(client):
    response = client.get("/auth/me")

    assert response.status_code == 401
    assert response.json()["message"] == "Missing or invalid token"


def test_expired_token_is_rejected(client, auth_user):
    token = create_access_token({"sub": auth_user.id}, expires_delta=timedelta(minutes=-5))

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized or invalid token"


def test_token_without_subject_is_rejected(client):
    token = create_access_token({"email": "reader@example.com"})

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token payload"
