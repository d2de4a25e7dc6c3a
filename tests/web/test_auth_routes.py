"""HTTP tests for registration, login, logout and profile."""

from helpers import login, use_session

REGISTRATION = {
    "email": "bob@x.com",
    "username": "bob",
    "password": "secret1",
    "firstName": "Bob",
    "lastName": "Stone",
    "phoneNumber": "555-0101",
}


class TestRegister:
    def test_register_sets_session_cookie(self, client):
        response = client.post("/api/register", json=REGISTRATION)
        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "bob@x.com"
        assert body["firstName"] == "Bob"
        assert body["role"] == "student"
        assert "passwordHash" not in body
        assert "password_hash" not in body

        set_cookie = response.headers["set-cookie"]
        assert "sid=" in set_cookie
        assert "HttpOnly" in set_cookie
        assert "Max-Age=86400" in set_cookie

        me = client.get("/api/user")
        assert me.status_code == 200
        assert me.json()["username"] == "bob"

    def test_register_duplicate_email(self, client):
        client.post("/api/register", json=REGISTRATION)
        response = client.post("/api/register", json={**REGISTRATION, "username": "other"})
        assert response.status_code == 400
        assert response.json() == {"message": "Email already exists", "type": "duplicate_identity", "field": "email"}

    def test_register_duplicate_username(self, client):
        client.post("/api/register", json=REGISTRATION)
        response = client.post("/api/register", json={**REGISTRATION, "email": "other@x.com"})
        assert response.status_code == 400
        assert response.json()["field"] == "username"

    def test_register_missing_fields(self, client):
        response = client.post("/api/register", json={"email": "bob@x.com"})
        assert response.status_code == 400
        assert response.json()["message"] == "Email, username, and password are required"


class TestLogin:
    def test_login_by_username_and_email(self, client):
        client.post("/api/register", json=REGISTRATION)
        client.cookies.clear()

        for identifier in ("bob", "bob@x.com"):
            response = client.post("/api/login", json={"login": identifier, "password": "secret1"})
            assert response.status_code == 200
            assert response.json()["username"] == "bob"
            assert response.cookies["sid"]

    def test_login_wrong_password(self, client):
        client.post("/api/register", json=REGISTRATION)
        client.cookies.clear()
        response = client.post("/api/login", json={"login": "bob", "password": "nope"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email/username or password"
        assert "sid" not in response.cookies

    def test_login_missing_fields(self, client):
        response = client.post("/api/login", json={"login": "bob"})
        assert response.status_code == 400

    def test_login_deactivated(self, client):
        client.post("/api/register", json=REGISTRATION)
        bob_id = client.get("/api/user").json()["id"]
        admin_sid = login(client, "admin", "admin-secret")
        use_session(client, admin_sid)
        assert client.delete(f"/api/admin/users/{bob_id}").status_code == 200

        client.cookies.clear()
        response = client.post("/api/login", json={"login": "bob", "password": "secret1"})
        assert response.status_code == 401
        assert response.json() == {"message": "Account is deactivated", "type": "account_deactivated"}


class TestLogout:
    def test_logout_ends_session(self, client):
        client.post("/api/register", json=REGISTRATION)
        sid = client.cookies["sid"]
        response = client.post("/api/logout")
        assert response.status_code == 200
        assert response.json() == {"message": "Logged out successfully"}

        use_session(client, sid)
        assert client.get("/api/user").status_code == 401

    def test_logout_without_session(self, client):
        assert client.post("/api/logout").status_code == 200

    def test_logout_redirect(self, client):
        client.post("/api/register", json=REGISTRATION)
        sid = client.cookies["sid"]
        response = client.get("/api/logout", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/auth"

        use_session(client, sid)
        assert client.get("/api/user").status_code == 401


class TestProfile:
    def test_requires_session(self, client):
        response = client.get("/api/user")
        assert response.status_code == 401
        assert response.json() == {"message": "Not authenticated", "type": "authentication_error"}

    def test_garbage_cookie(self, client):
        use_session(client, "not-a-session")
        assert client.get("/api/user").status_code == 401

    def test_update_profile(self, client):
        client.post("/api/register", json=REGISTRATION)
        response = client.put("/api/user/profile", json={"firstName": "Robert", "lastName": "", "phoneNumber": "555"})
        assert response.status_code == 200
        body = response.json()
        assert body["firstName"] == "Robert"
        assert body["lastName"] is None
        assert body["phoneNumber"] == "555"
        assert client.get("/api/user").json()["firstName"] == "Robert"

    def test_update_profile_requires_session(self, client):
        assert client.put("/api/user/profile", json={"firstName": "X"}).status_code == 401


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
