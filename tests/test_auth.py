"""Tests for registration, login, token checks and the development fallback."""

from app.config.settings import settings


class TestPublicEndpoints:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}
        assert client.get("/ready").json() == {"status": "ready"}

    def test_supabase_credentials(self, client, monkeypatch):
        monkeypatch.setattr(settings, "supabase_url", "https://test.supabase.co")
        monkeypatch.setattr(settings, "supabase_anon_key", "anon-key")

        response = client.get("/api/supabase-credentials")

        assert response.status_code == 200
        assert response.json() == {"supabaseUrl": "https://test.supabase.co", "supabaseAnonKey": "anon-key"}

    def test_security_headers(self, client):
        response = client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_rate_limit_returns_429(self, client, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit", "2/minute")

        statuses = [client.get("/").status_code for _ in range(3)]

        assert statuses == [200, 200, 429]
        assert client.get("/").json()["message"].startswith("Rate limit exceeded")
        assert client.get("/health").status_code == 200


class TestRegisterAndLogin:

    def test_register_creates_user_and_limit(self, client, fake_supabase):
        response = client.post("/api/auth/register", json={"email": "carol@example.com", "password": "s3cret!"})

        assert response.status_code == 201
        user_id = response.json()["userId"]
        users = fake_supabase.rows("users")
        assert users[0]["id"] == user_id
        assert users[0]["password"] == "placeholder_password"
        assert fake_supabase.rows("scan_limits")[0]["max_scans"] == 10

    def test_register_twice_is_409(self, client):
        payload = {"email": "carol@example.com", "password": "s3cret!"}
        client.post("/api/auth/register", json=payload)

        response = client.post("/api/auth/register", json=payload)

        assert response.status_code == 409
        assert response.json() == {"message": "User with this email already exists"}

    def test_register_missing_fields_is_400(self, client):
        response = client.post("/api/auth/register", json={"email": "carol@example.com"})

        assert response.status_code == 400

    def test_login_and_me(self, client):
        client.post("/api/auth/register", json={"email": "carol@example.com", "password": "s3cret!"})

        login = client.post("/api/auth/login", json={"email": "carol@example.com", "password": "s3cret!"})
        token = login.json()["accessToken"]
        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert login.status_code == 200
        assert login.json()["tokenType"] == "bearer"
        assert me.status_code == 200
        assert me.json()["email"] == "carol@example.com"
        assert "password" not in me.json()

    def test_login_wrong_password_is_401(self, client):
        client.post("/api/auth/register", json={"email": "carol@example.com", "password": "s3cret!"})

        response = client.post("/api/auth/login", json={"email": "carol@example.com", "password": "nope"})

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid email or password"}

    def test_login_leaves_shared_client_anonymous(self, client, fake_supabase, alice):
        client.post("/api/auth/register", json={"email": "carol@example.com", "password": "s3cret!"})

        login = client.post("/api/auth/login", json={"email": "carol@example.com", "password": "s3cret!"})

        assert login.status_code == 200
        assert fake_supabase.headers["Authorization"] == "Bearer anon-key"
        assert fake_supabase.sessions[-1].headers["Authorization"] == f"Bearer {login.json()['accessToken']}"
        assert client.get("/api/auth/me", headers=alice).json()["id"] == "user-alice"

    def test_logout(self, client, alice):
        response = client.post("/api/auth/logout", headers=alice)

        assert response.json() == {"message": "Logged out successfully"}


class TestTokenChecks:

    def test_me_creates_user_row_lazily(self, client, alice, fake_supabase):
        response = client.get("/api/auth/me", headers=alice)

        assert response.status_code == 200
        assert response.json()["id"] == "user-alice"
        assert fake_supabase.rows("users")[0]["email"] == "alice@example.com"

    def test_invalid_token_is_401(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer forged"})

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid or expired token"}

    def test_missing_token_is_401(self, client):
        assert client.get("/api/auth/me").status_code == 401


class TestDevelopmentFallback:

    def test_header_fallback_when_enabled(self, client, fake_supabase, monkeypatch):
        monkeypatch.setattr(settings, "allow_dev_auth_fallback", True)
        monkeypatch.setattr(settings, "environment", "development")
        fake_supabase.seed("users", {"id": "user-dev", "email": "dev@example.com", "password": "placeholder_password"})

        response = client.get("/api/auth/me", headers={"x-user-id": "user-dev"})

        assert response.status_code == 200
        assert response.json()["id"] == "user-dev"

    def test_header_ignored_in_production(self, client, fake_supabase, monkeypatch):
        monkeypatch.setattr(settings, "allow_dev_auth_fallback", True)
        monkeypatch.setattr(settings, "environment", "production")
        fake_supabase.seed("users", {"id": "user-dev", "email": "dev@example.com", "password": "placeholder_password"})

        response = client.get("/api/auth/me", headers={"x-user-id": "user-dev"})

        assert response.status_code == 401

    def test_unknown_header_user_is_rejected(self, client, monkeypatch):
        monkeypatch.setattr(settings, "allow_dev_auth_fallback", True)
        monkeypatch.setattr(settings, "environment", "development")

        response = client.get("/api/auth/me", headers={"x-user-id": "nobody"})

        assert response.status_code == 401
