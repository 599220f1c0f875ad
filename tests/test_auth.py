"""Tests for registration, login and token handling."""

from datetime import timedelta

from api.routes.auth import create_access_token
from conftest import register_user


class TestRegister:
    def test_register_student_returns_token_and_profile(self, client):
        headers, user = register_user(client, "Alice@Example.com", name="Alice")

        assert user["email"] == "alice@example.com"
        assert user["role"] == "student"
        assert user["course"] == "BSc"
        assert user["isVerified"] is True
        assert user["savedPapers"] == []
        assert "passwordHash" not in user

    def test_register_faculty_drops_course_and_year(self, client):
        response = client.post(
            "/api/auth/register",
            json={
                "name": "Prof",
                "email": "prof@example.com",
                "password": "secret123",
                "role": "faculty",
                "collegeName": "MIT",
                "course": "BSc",
                "year": "2",
            },
        )

        assert response.status_code == 201
        user = response.json()["user"]
        assert user["course"] is None
        assert user["year"] is None

    def test_register_student_without_course_is_rejected(self, client):
        response = client.post(
            "/api/auth/register",
            json={
                "name": "Bob",
                "email": "bob@example.com",
                "password": "secret123",
                "collegeName": "MIT",
            },
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_register_duplicate_email_is_case_insensitive(self, client):
        register_user(client, "dup@example.com")
        response = client.post(
            "/api/auth/register",
            json={
                "name": "Dup",
                "email": "DUP@example.com",
                "password": "secret123",
                "collegeName": "MIT",
                "course": "BSc",
                "year": "1",
            },
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "User already exists"}

    def test_register_short_password_is_rejected(self, client):
        response = client.post(
            "/api/auth/register",
            json={
                "name": "Eve",
                "email": "eve@example.com",
                "password": "123",
                "role": "faculty",
                "collegeName": "MIT",
            },
        )

        assert response.status_code == 400


class TestLogin:
    def test_login_with_any_email_case(self, client):
        register_user(client, "carol@example.com")

        response = client.post(
            "/api/auth/login", json={"email": "CAROL@example.com", "password": "secret123"}
        )

        assert response.status_code == 200
        assert response.json()["token"]

    def test_login_wrong_password_is_unauthorized(self, client):
        register_user(client, "carol@example.com")

        response = client.post(
            "/api/auth/login", json={"email": "carol@example.com", "password": "wrong-pass"}
        )

        assert response.status_code == 401
        assert response.json()["success"] is False


class TestTokens:
    def test_me_requires_token(self, client):
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_me_rejects_garbage_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401

    def test_me_rejects_expired_token(self, client, student):
        _, user = student
        token = create_access_token({"sub": user["id"]}, expires_delta=timedelta(minutes=-1))

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_me_returns_current_user(self, client, student):
        headers, user = student

        response = client.get("/api/auth/me", headers=headers)

        assert response.status_code == 200
        assert response.json()["user"]["id"] == user["id"]


class TestChangePassword:
    def test_change_password_then_login_with_new_one(self, client, student):
        headers, _ = student

        response = client.put(
            "/api/auth/password",
            json={"currentPassword": "secret123", "newPassword": "newsecret"},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Password updated successfully"
        login = client.post(
            "/api/auth/login", json={"email": "student@college.edu", "password": "newsecret"}
        )
        assert login.status_code == 200

    def test_same_password_reports_unchanged(self, client, student):
        headers, _ = student

        response = client.put(
            "/api/auth/password",
            json={"currentPassword": "secret123", "newPassword": "secret123"},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Password unchanged"
        login = client.post(
            "/api/auth/login", json={"email": "student@college.edu", "password": "secret123"}
        )
        assert login.status_code == 200

    def test_wrong_current_password_is_unauthorized(self, client, student):
        headers, _ = student

        response = client.put(
            "/api/auth/password",
            json={"currentPassword": "bad-guess", "newPassword": "newsecret"},
            headers=headers,
        )

        assert response.status_code == 401
