from datetime import timedelta

from app.core.security import create_access_token, create_refresh_token
from tests.conftest import TEST_PASSWORD

REGISTRATION = {
    "email": "demo@example.com",
    "username": "demo-lition",
    "firstName": "Demo",
    "lastName": "Lition",
    "password": "password123",
}


async def test_register_then_fetch_profile(client):
    response = await client.post("/api/auth/register", json=REGISTRATION)

    assert response.status_code == 201
    tokens = response.json()
    assert tokens["token_type"] == "bearer"

    response = await client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "demo@example.com"
    assert body["firstName"] == "Demo"
    assert "passwordHash" not in body


async def test_register_duplicate_email(client, seed):
    user = await seed.user()

    response = await client.post(
        "/api/auth/register", json={**REGISTRATION, "email": user.email}
    )

    assert response.status_code == 400
    assert response.json()["errors"] == {"email": "User with that email already exists"}


async def test_register_rejects_email_as_username(client):
    response = await client.post(
        "/api/auth/register", json={**REGISTRATION, "username": "me@example.com"}
    )

    assert response.status_code == 400
    assert response.json()["errors"]["username"] == "Username cannot be an email"


async def test_login_with_username_or_email(client, seed):
    user = await seed.user()

    for credential in (user.username, user.email):
        response = await client.post(
            "/api/auth/login", json={"credential": credential, "password": TEST_PASSWORD}
        )
        assert response.status_code == 200
        assert response.json()["access_token"]


async def test_login_with_wrong_password(client, seed):
    user = await seed.user()

    response = await client.post(
        "/api/auth/login", json={"credential": user.email, "password": "nope"}
    )

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid credentials", "statusCode": 401}


async def test_refresh_issues_new_tokens(client, seed):
    user = await seed.user()
    refresh = create_refresh_token({"sub": str(user.id)})

    response = await client.post("/api/auth/refresh", json={"refreshToken": refresh})

    assert response.status_code == 200
    assert response.json()["refresh_token"]


async def test_refresh_token_is_not_an_access_token(client, seed):
    user = await seed.user()
    refresh = create_refresh_token({"sub": str(user.id)})

    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {refresh}"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token type"


async def test_expired_token_is_rejected(client, seed):
    user = await seed.user()
    token = create_access_token({"sub": str(user.id)}, expires_delta=timedelta(seconds=-1))

    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["message"].startswith("Token validation failed")


async def test_token_for_deleted_user_is_rejected(client, seed):
    await seed.user()
    token = create_access_token({"sub": "9999"})

    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["message"] == "User not found"
