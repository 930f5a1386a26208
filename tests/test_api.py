from fastapi.testclient import TestClient


class TestAuthEndpoints:
    """Registration and login over HTTP"""

    def test_register(self, client: TestClient):
        response = client.post("/auth/register", json={"email": "a@x.com", "password": "pw1"})
        assert response.status_code == 201

        data = response.json()
        assert data["user"]["email"] == "a@x.com"
        assert "password" not in data["user"]
        assert "hashedPassword" not in data["user"]
        assert data["access_token"]
        assert data["token_type"] == "bearer"

    def test_register_duplicate_email(self, client: TestClient):
        body = {"email": "a@x.com", "password": "pw1"}
        client.post("/auth/register", json=body)

        response = client.post("/auth/register", json=body)
        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    def test_register_malformed_email(self, client: TestClient):
        response = client.post("/auth/register", json={"email": "not-an-email", "password": "pw1"})
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"

    def test_login(self, client: TestClient, register_user):
        register_user("a@x.com")
        response = client.post("/auth/login", json={"email": "a@x.com", "password": "pw1"})
        assert response.status_code == 200
        assert response.json()["user"]["email"] == "a@x.com"

    def test_login_failures_are_indistinguishable(self, client: TestClient, register_user):
        register_user("a@x.com")

        wrong = client.post("/auth/login", json={"email": "a@x.com", "password": "bad"})
        unknown = client.post("/auth/login", json={"email": "b@x.com", "password": "pw1"})

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json()
        assert wrong.json()["message"] == "Invalid credentials"
        assert wrong.headers["www-authenticate"] == "Bearer"

    def test_email_is_stored_as_given(self, client: TestClient):
        first = client.post("/auth/register", json={"email": "a@X.com", "password": "pw1"})
        assert first.status_code == 201
        assert first.json()["user"]["email"] == "a@X.com"

        # A different spelling is a different account
        second = client.post("/auth/register", json={"email": "a@x.com", "password": "pw1"})
        assert second.status_code == 201

    def test_long_password_rejected_only_at_registration(self, client: TestClient, register_user):
        register_user("a@x.com")
        long_password = "x" * 80

        register = client.post("/auth/register", json={"email": "b@x.com", "password": long_password})
        assert register.status_code == 400

        for email in ("a@x.com", "nobody@x.com"):
            login = client.post("/auth/login", json={"email": email, "password": long_password})
            assert login.status_code == 401
            assert login.json()["message"] == "Invalid credentials"

    def test_me(self, client: TestClient, owner):
        response = client.get("/users/me", headers=owner["headers"])
        assert response.status_code == 200
        assert response.json()["id"] == owner["user"]["id"]

    def test_me_requires_token(self, client: TestClient):
        assert client.get("/users/me").status_code == 401
        bad = client.get("/users/me", headers={"Authorization": "Bearer nonsense"})
        assert bad.status_code == 401
        assert bad.json()["error"] == "unauthorized"


class TestLinkEndpoints:
    """Shortening and managing links over HTTP"""

    def test_shorten_anonymously(self, client: TestClient):
        response = client.post("/shorten", json={"originalUrl": "https://example.com"})
        assert response.status_code == 201

        data = response.json()
        assert data["originalUrl"] == "https://example.com/"
        assert len(data["shortCode"]) == 6
        assert data["shortUrl"].endswith("/" + data["shortCode"])
        assert data["clickCount"] == 0
        assert {"id", "createdAt", "updatedAt"} <= data.keys()

    def test_shorten_invalid_url(self, client: TestClient):
        response = client.post("/shorten", json={"originalUrl": "ftp://example.com"})
        assert response.status_code == 400
        body = response.json()
        assert body == {"statusCode": 400, "error": "invalid_input", "message": body["message"]}

    def test_shorten_missing_body_field(self, client: TestClient):
        assert client.post("/shorten", json={}).status_code == 400

    def test_shorten_with_invalid_token_is_anonymous(self, client: TestClient, owner):
        response = client.post(
            "/shorten",
            json={"originalUrl": "https://example.com"},
            headers={"Authorization": "Bearer nonsense"},
        )
        assert response.status_code == 201
        assert client.get("/urls", headers=owner["headers"]).json() == []

    def test_list_own_urls(self, client: TestClient, owner, stranger):
        mine = client.post("/shorten", json={"originalUrl": "https://example.com/a"}, headers=owner["headers"])
        client.post("/shorten", json={"originalUrl": "https://example.com/b"}, headers=stranger["headers"])
        client.post("/shorten", json={"originalUrl": "https://example.com/c"})

        response = client.get("/urls", headers=owner["headers"])
        assert response.status_code == 200
        assert [u["id"] for u in response.json()] == [mine.json()["id"]]

    def test_list_requires_auth(self, client: TestClient):
        assert client.get("/urls").status_code == 401

    def test_update(self, client: TestClient, owner):
        created = client.post("/shorten", json={"originalUrl": "https://example.com"}, headers=owner["headers"]).json()

        response = client.put(
            f"/urls/{created['id']}",
            json={"originalUrl": "https://example.org/new"},
            headers=owner["headers"],
        )
        assert response.status_code == 200
        assert response.json()["originalUrl"] == "https://example.org/new"
        assert response.json()["shortCode"] == created["shortCode"]

    def test_update_errors(self, client: TestClient, owner, stranger):
        created = client.post("/shorten", json={"originalUrl": "https://example.com"}, headers=owner["headers"]).json()
        path = f"/urls/{created['id']}"

        forbidden = client.put(path, json={"originalUrl": "https://example.org/"}, headers=stranger["headers"])
        assert forbidden.status_code == 403
        assert forbidden.json()["error"] == "forbidden"

        missing = client.put("/urls/missing", json={"originalUrl": "https://example.org/"}, headers=owner["headers"])
        assert missing.status_code == 404

        invalid = client.put(path, json={"originalUrl": "nope"}, headers=owner["headers"])
        assert invalid.status_code == 400

        unauthenticated = client.put(path, json={"originalUrl": "https://example.org/"})
        assert unauthenticated.status_code == 401

        listed = client.get("/urls", headers=owner["headers"]).json()
        assert listed[0]["originalUrl"] == "https://example.com/"

    def test_delete(self, client: TestClient, owner, stranger):
        created = client.post("/shorten", json={"originalUrl": "https://example.com"}, headers=owner["headers"]).json()
        path = f"/urls/{created['id']}"

        assert client.delete(path, headers=stranger["headers"]).status_code == 403

        response = client.delete(path, headers=owner["headers"])
        assert response.status_code == 200
        assert response.json() == {"message": "URL deleted successfully"}

        assert client.delete(path, headers=owner["headers"]).status_code == 404
        assert client.get("/urls", headers=owner["headers"]).json() == []
        assert client.get(f"/{created['shortCode']}", follow_redirects=False).status_code == 404


class TestServiceEndpoints:
    """Root and health endpoints"""

    def test_root(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["docs_url"] == "/docs"

    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.json() == {"status": "healthy"}
        assert "x-process-time" in response.headers
