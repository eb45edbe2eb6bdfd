"""
TrailMix Backend: /api/users Endpoint Tests
=============================================

What:  Register, login and profile endpoints against a real SQLite database.
"""

import os

import jwt
import pytest

from trailmix.config import settings
from trailmix.services.auth_service import auth_service
from trailmix.services.file_service import file_service


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_then_duplicate_email(self, test_client):
        payload = {"username": "ana", "email": "ana@example.com", "password": "pw12345"}

        first = await test_client.post("/api/users/register", json=payload)
        assert first.status_code == 201
        assert first.json() == {"message": "User registered successfully"}

        again = await test_client.post(
            "/api/users/register",
            json={**payload, "username": "ana2"},
        )
        assert again.status_code == 400
        assert again.json()["message"] == "Username or email already exists"
        assert again.json()["error"] == "conflict"

    @pytest.mark.asyncio
    async def test_register_duplicate_username(self, test_client):
        await test_client.post(
            "/api/users/register",
            json={"username": "ana", "email": "a1@example.com", "password": "pw"},
        )
        response = await test_client.post(
            "/api/users/register",
            json={"username": "ana", "email": "a2@example.com", "password": "pw"},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_register_missing_field_is_400(self, test_client):
        response = await test_client.post(
            "/api/users/register",
            json={"username": "ana", "password": "pw"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert any(d["field"].endswith("email") for d in body["details"])


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_returns_token_with_id_and_role(self, test_client, create_user):
        user = await create_user("ana")

        claims = jwt.decode(user["token"], settings.jwt_secret, algorithms=["HS256"])
        assert claims["id"] == user["id"]
        assert claims["role"] == "user"
        assert user["user"] == {
            "id": user["id"],
            "username": "ana",
            "email": "ana@example.com",
            "role": "user",
        }

    @pytest.mark.asyncio
    async def test_wrong_password(self, test_client, create_user):
        await create_user("ana", password="right-password")
        response = await test_client.post(
            "/api/users/login",
            json={"email": "ana@example.com", "password": "wrong-password"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_unknown_email(self, test_client):
        response = await test_client.post(
            "/api/users/login",
            json={"email": "nobody@example.com", "password": "pw"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid credentials"


class TestProfile:

    @pytest.mark.asyncio
    async def test_profile_requires_token(self, test_client):
        response = await test_client.get("/api/users/profile")
        assert response.status_code == 401
        assert response.json()["message"] == "No token provided"

    @pytest.mark.asyncio
    async def test_profile_rejects_bad_token(self, test_client):
        response = await test_client.get(
            "/api/users/profile",
            headers={"Authorization": "Bearer not-a-token"},
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    @pytest.mark.asyncio
    async def test_profile_of_deleted_user_is_404(self, test_client):
        """A valid token whose user row no longer exists."""
        token = auth_service.create_access_token(user_id=987654, role="user")
        response = await test_client.get(
            "/api/users/profile",
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"
        assert response.json()["message"] == "User not found"

    @pytest.mark.asyncio
    async def test_profile_image_of_deleted_user_is_404_and_file_removed(
        self, test_client, sample_image_bytes
    ):
        profiles_dir = file_service.upload_root / "profiles"
        before = set(os.listdir(profiles_dir))
        token = auth_service.create_access_token(user_id=987654, role="user")

        response = await test_client.post(
            "/api/users/profile/image",
            files={"profile_image": ("me.jpg", sample_image_bytes, "image/jpeg")},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 404
        assert response.json()["message"] == "User not found"
        assert set(os.listdir(profiles_dir)) == before

    @pytest.mark.asyncio
    async def test_profile_excludes_password_and_lists_trails(self, test_client, create_user):
        user = await create_user("ana")
        for name in ("First", "Second"):
            created = await test_client.post(
                "/api/trails", data={"name": name}, headers=user["headers"]
            )
            assert created.status_code == 201

        response = await test_client.get("/api/users/profile", headers=user["headers"])
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        data = body["data"]
        assert data["user_id"] == user["id"]
        assert data["username"] == "ana"
        assert "password" not in data
        assert [t["name"] for t in data["trails"]] == ["Second", "First"]

    @pytest.mark.asyncio
    async def test_update_profile_fields(self, test_client, create_user):
        user = await create_user("ana")
        response = await test_client.put(
            "/api/users/profile",
            data={"name": "ana_v2", "bio": "Weekend hiker"},
            headers=user["headers"],
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["username"] == "ana_v2"
        assert data["bio"] == "Weekend hiker"

    @pytest.mark.asyncio
    async def test_update_profile_only_touches_supplied_fields(self, test_client, create_user):
        user = await create_user("ana")
        await test_client.put("/api/users/profile", data={"bio": "Original"}, headers=user["headers"])

        response = await test_client.put(
            "/api/users/profile",
            data={"name": "renamed", "bio": ""},
            headers=user["headers"],
        )
        data = response.json()["data"]
        assert data["username"] == "renamed"
        assert data["bio"] == "Original"

    @pytest.mark.asyncio
    async def test_update_profile_without_fields(self, test_client, create_user):
        user = await create_user("ana")
        response = await test_client.put("/api/users/profile", data={}, headers=user["headers"])
        assert response.status_code == 400
        assert response.json()["message"] == "No fields to update"

    @pytest.mark.asyncio
    async def test_update_profile_name_collision(self, test_client, create_user):
        await create_user("taken")
        user = await create_user("ana")
        response = await test_client.put(
            "/api/users/profile", data={"name": "taken"}, headers=user["headers"]
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_profile_with_image(self, test_client, create_user, sample_image_bytes):
        user = await create_user("ana")
        response = await test_client.put(
            "/api/users/profile",
            files={"profile_image": ("me.jpg", sample_image_bytes, "image/jpeg")},
            headers=user["headers"],
        )
        assert response.status_code == 200
        url = response.json()["data"]["profile_image_url"]
        assert url.startswith("/uploads/profiles/profile-")

        served = await test_client.get(url)
        assert served.status_code == 200
        assert served.content == sample_image_bytes


class TestProfileImage:

    @pytest.mark.asyncio
    async def test_upload_png(self, test_client, create_user):
        user = await create_user("ana")
        response = await test_client.post(
            "/api/users/profile/image",
            files={"profile_image": ("me.png", b"\x89PNG\r\n\x1a\n", "image/png")},
            headers=user["headers"],
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["profile_image_url"].endswith(".png")

        profile = await test_client.get("/api/users/profile", headers=user["headers"])
        assert profile.json()["data"]["profile_image_url"] == body["data"]["profile_image_url"]

    @pytest.mark.asyncio
    async def test_missing_file(self, test_client, create_user):
        user = await create_user("ana")
        response = await test_client.post(
            "/api/users/profile/image",
            data={"unrelated": "x"},
            headers=user["headers"],
        )
        assert response.status_code == 400
        assert response.json()["message"] == "No image file provided"

    @pytest.mark.asyncio
    async def test_gif_rejected(self, test_client, create_user):
        user = await create_user("ana")
        response = await test_client.post(
            "/api/users/profile/image",
            files={"profile_image": ("anim.gif", b"GIF89a", "image/gif")},
            headers=user["headers"],
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Images only (jpeg, jpg, png)!"
