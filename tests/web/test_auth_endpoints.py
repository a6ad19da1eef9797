"""HTTP tests for the auth and profile endpoints."""

import pytest

from healthdesk.errors import DependencyError


def register(client, username="alice", password="pw1"):
    return client.post("/register", json={"username": username, "password": password})


class TestRegisterEndpoint:
    """Tests for POST /register."""

    def test_register_sets_session_cookie(self, client, config):
        """Test that registration answers registerSuccess and opens a session."""
        response = register(client)

        assert response.status_code == 200
        assert response.json() == {"registerSuccess": True}
        assert client.get("/session").json() == {"sessionActive": True}

    def test_cookie_attributes(self, client, config):
        """Test that the cookie is HttpOnly, Secure and sent cross-site."""
        response = register(client)
        cookie = response.headers["set-cookie"].lower()
        assert cookie.startswith(f"{config.session_cookie_name}=")
        assert "httponly" in cookie
        assert "secure" in cookie
        assert "samesite=none" in cookie
        assert f"max-age={config.session_ttl_seconds}" in cookie

    def test_register_existing_username(self, client):
        """Test that a taken username answers isRegistered."""
        register(client)
        response = register(client, password="anything")
        assert response.status_code == 200
        assert response.json() == {"isRegistered": True}

    def test_frontend_field_names_accepted(self, client):
        """Test that userName/enteredPassword work as well."""
        response = client.post("/register", json={"userName": "carol", "enteredPassword": "pw1"})
        assert response.json() == {"registerSuccess": True}

    def test_plaintext_password_field_accepted(self, client, credentials):
        """Test that plaintextPassword is accepted as the password field."""
        response = client.post("/register", json={"username": "dave", "plaintextPassword": "pw1"})
        assert response.status_code == 200
        assert response.json() == {"registerSuccess": True}
        assert [u.username for u in credentials.users.values()] == ["dave"]

        client.cookies.clear()
        login = client.post("/login", json={"username": "dave", "password": "pw1"})
        assert login.json() == {"success": True}

    def test_empty_password_rejected(self, client):
        """Test that an empty password is a validation error."""
        response = register(client, password="")
        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"


class TestLoginEndpoint:
    """Tests for POST /login."""

    def test_scenario(self, client):
        """Test register, duplicate register, bad login and good login in sequence."""
        assert register(client).json() == {"registerSuccess": True}
        assert register(client, password="anything").json() == {"isRegistered": True}

        client.cookies.clear()
        bad = client.post("/login", json={"username": "alice", "password": "wrong"})
        assert bad.status_code == 401
        assert bad.json() == {"success": False}
        assert client.get("/session").json() == {"sessionActive": False}

        good = client.post("/login", json={"username": "alice", "password": "pw1"})
        assert good.status_code == 200
        assert good.json() == {"success": True}
        assert client.get("/session").json() == {"sessionActive": True}

    def test_unknown_user_same_response(self, client):
        """Test that an unknown username looks exactly like a wrong password."""
        register(client)
        client.cookies.clear()
        wrong_password = client.post("/login", json={"username": "alice", "password": "wrong"})
        unknown_user = client.post("/login", json={"username": "mallory", "password": "pw1"})
        assert wrong_password.status_code == unknown_user.status_code == 401
        assert wrong_password.json() == unknown_user.json()
        assert "set-cookie" not in unknown_user.headers

    def test_store_failure_is_generic(self, client, credentials, monkeypatch):
        """Test that a store outage becomes a 503 without internals."""

        async def down(username):
            raise DependencyError("connection refused by db-primary:27017")

        monkeypatch.setattr(credentials, "find_by_username", down)
        response = client.post("/login", json={"username": "alice", "password": "pw1"})
        assert response.status_code == 503
        assert response.json() == {"message": "Service temporarily unavailable.", "type": "dependency_failure"}


class TestSessionEndpoints:
    """Tests for GET /session and GET /logout."""

    def test_no_cookie(self, client):
        """Test that a fresh client has no session."""
        assert client.get("/session").json() == {"sessionActive": False}

    def test_logout_then_status(self, client):
        """Test that logout ends the session."""
        register(client)
        response = client.get("/logout")
        assert response.json() == {"success": True}
        assert client.get("/session").json() == {"sessionActive": False}

    def test_logout_without_session(self, client):
        """Test that logout succeeds without a session."""
        assert client.get("/logout").json() == {"success": True}

    def test_forged_cookie(self, client, config):
        """Test that an unknown token is not a session."""
        client.cookies.set(config.session_cookie_name, "forged-token")
        assert client.get("/session").json() == {"sessionActive": False}


class TestResetEndpoint:
    """Tests for POST /resetUnamePwd."""

    def test_requires_session(self, client):
        """Test that reset without a session is 401."""
        response = client.post("/resetUnamePwd", json={"username": "alice2"})
        assert response.status_code == 401
        assert response.json()["type"] == "not_authenticated"

    def test_username_only(self, client):
        """Test that a username-only change answers usernameUpdated."""
        register(client)
        response = client.post("/resetUnamePwd", json={"username": "alice2"})
        assert response.json() == {"usernameUpdated": True}
        assert client.get("/getDetails").json()["username"] == "alice2"

    def test_username_and_password(self, client):
        """Test that changing both answers usernamePasswordUpdated."""
        register(client)
        response = client.post(
            "/resetUnamePwd", json={"username": "alice2", "password": "pw2", "existingPassword": "pw1"}
        )
        assert response.json() == {"usernamePasswordUpdated": True}
        client.cookies.clear()
        assert client.post("/login", json={"username": "alice2", "password": "pw2"}).json() == {"success": True}

    @pytest.mark.parametrize(
        ("body", "expected"),
        [
            ({"password": "pw1", "existingPassword": "pw1"}, {"passwordUpdated": False}),
            ({"password": "pw2", "existingPassword": "pw1"}, {"passwordUpdated": True}),
            ({"username": "alice2", "password": "pw1", "existingPassword": "pw1"}, {"usernamePasswordUpdated": False}),
        ],
    )
    def test_password_outcomes(self, client, body, expected):
        """Test the boolean payloads for password changes."""
        register(client)
        assert client.post("/resetUnamePwd", json=body).json() == expected

    def test_wrong_existing_password(self, client):
        """Test that a wrong current password is rejected."""
        register(client)
        response = client.post("/resetUnamePwd", json={"password": "pw2", "existingPassword": "nope"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid current password"

    def test_empty_request(self, client):
        """Test that a request with nothing to change is rejected."""
        register(client)
        assert client.post("/resetUnamePwd", json={}).status_code == 400

    def test_taken_username(self, client):
        """Test that taking another user's name is a conflict."""
        register(client, "alice")
        client.cookies.clear()
        register(client, "bob")
        response = client.post("/resetUnamePwd", json={"username": "alice"})
        assert response.status_code == 409
        assert response.json()["type"] == "conflict"


class TestProfileEndpoints:
    """Tests for /details, /saveAddressDetails and /getDetails."""

    def test_get_details_requires_session(self, client):
        """Test that profile fetch without a session is an explicit 401."""
        response = client.get("/getDetails")
        assert response.status_code == 401

    def test_save_requires_session(self, client):
        """Test that profile writes without a session are 401."""
        details = client.post("/details", json={"firstName": "A", "lastName": "B", "insurerCode": "C"})
        address = client.post("/saveAddressDetails", json={"latitude": 1.0, "longitude": 2.0, "readableAddress": "X"})
        assert details.status_code == address.status_code == 401

    def test_save_and_fetch(self, client):
        """Test that saved details and address come back without the password hash."""
        register(client)
        saved = client.post("/details", json={"firstName": "Alice", "lastName": "Smith", "insurerCode": "PLAN-7"})
        stored = client.post(
            "/saveAddressDetails", json={"latitude": 52.52, "longitude": 13.405, "readableAddress": "Berlin"}
        )
        assert saved.json() == {"saved": True}
        assert stored.json() == {"addrStored": True}

        details = client.get("/getDetails").json()
        assert details["first_name"] == "Alice"
        assert details["insurer_code"] == "PLAN-7"
        assert details["address"] == "Berlin"
        assert "password_hash" not in details

    def test_bad_coordinates(self, client):
        """Test that out-of-range coordinates are rejected by the body schema."""
        register(client)
        response = client.post("/saveAddressDetails", json={"latitude": 95, "longitude": 0, "readableAddress": "X"})
        assert response.status_code == 422


class TestMisc:
    """Tests for health and OpenAPI."""

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_openapi_marks_public_endpoints(self, client, config):
        """Test that the cookie scheme is declared and public routes need none."""
        schema = client.get("/openapi.json").json()
        assert schema["components"]["securitySchemes"]["SessionCookie"]["name"] == config.session_cookie_name
        assert schema["paths"]["/login"]["post"]["security"] == []
        assert "security" not in schema["paths"]["/getDetails"]["get"]
