"""Test authentication endpoints and utilities."""

from app.utils.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestSecurityUtilities:
    def test_hash_and_verify_password(self):
        hashed = hash_password("secret123")
        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong", hashed)
        assert not verify_password("secret123", None)

    def test_token_round_trip(self):
        token = create_access_token({"sub": "42", "role": "student"})
        assert decode_access_token(token) == 42

    def test_garbage_token(self):
        assert decode_access_token("not-a-token") is None


class TestRegisterAndLogin:
    def test_register_returns_user_and_token(self, client):
        response = client.post("/api/register", json={
            "username": "asha",
            "email": "asha@example.com",
            "password": "secret123",
            "full_name": "Asha Rao",
            "role": "student",
            "skills": ["python", " ", "sql "],
        })

        assert response.status_code == 201
        body = response.json()
        assert body["user"]["username"] == "asha"
        assert body["user"]["role"] == "student"
        assert body["user"]["skills"] == ["python", "sql"]
        assert "hashed_password" not in body["user"]
        assert body["token_type"] == "bearer"

        me = client.get("/api/user", headers={"Authorization": f"Bearer {body['access_token']}"})
        assert me.status_code == 200
        assert me.json()["email"] == "asha@example.com"

    def test_register_duplicate_username_case_insensitive(self, client, student):
        response = client.post("/api/register", json={
            "username": student.username.upper(),
            "email": "new@example.com",
            "password": "secret123",
            "full_name": "Someone Else",
        })
        assert response.status_code == 400
        assert response.json() == {"message": "Username already exists"}

    def test_register_validation_error_shape(self, client):
        response = client.post("/api/register", json={
            "username": "ab",
            "email": "bad",
            "password": "1",
            "full_name": "X",
        })
        assert response.status_code == 400
        assert "message" in response.json()

    def test_login(self, client, student):
        response = client.post("/api/login", data={"username": student.username, "password": "secret123"})
        assert response.status_code == 200
        token = response.json()["access_token"]
        assert decode_access_token(token) == student.id

    def test_login_bad_password(self, client, student):
        response = client.post("/api/login", data={"username": student.username, "password": "nope"})
        assert response.status_code == 401
        assert response.json() == {"message": "Invalid credentials"}

    def test_logout_requires_auth(self, client, student, headers_for):
        assert client.post("/api/logout").status_code == 401
        assert client.post("/api/logout", headers=headers_for(student)).status_code == 200


class TestCurrentUser:
    def test_missing_token(self, client):
        response = client.get("/api/user")
        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized"}

    def test_invalid_token(self, client):
        response = client.get("/api/user", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401
        assert response.json() == {"message": "Could not validate credentials"}


class TestUsers:
    def test_list_users_by_role(self, client, student, employer, admin, headers_for):
        response = client.get("/api/users", params={"role": "employer"}, headers=headers_for(admin))
        assert response.status_code == 200
        assert [u["id"] for u in response.json()] == [employer.id]

    def test_read_profile_self_or_admin(self, client, student, other_student, admin, headers_for):
        assert client.get(f"/api/users/{student.id}", headers=headers_for(student)).status_code == 200
        assert client.get(f"/api/users/{student.id}", headers=headers_for(admin)).status_code == 200
        assert client.get(f"/api/users/{student.id}", headers=headers_for(other_student)).status_code == 403

    def test_update_profile(self, client, student, headers_for):
        response = client.patch(
            f"/api/users/{student.id}",
            json={"bio": "Second year CS", "skills": ["react"]},
            headers=headers_for(student),
        )
        assert response.status_code == 200
        assert response.json()["bio"] == "Second year CS"
        assert response.json()["skills"] == ["react"]
        assert response.json()["username"] == student.username

    def test_update_cannot_change_role(self, client, student, headers_for):
        response = client.patch(
            f"/api/users/{student.id}",
            json={"role": "admin"},
            headers=headers_for(student),
        )
        assert response.status_code == 400

    def test_update_other_user_forbidden(self, client, student, other_student, headers_for):
        response = client.patch(
            f"/api/users/{student.id}",
            json={"bio": "hacked"},
            headers=headers_for(other_student),
        )
        assert response.status_code == 403
