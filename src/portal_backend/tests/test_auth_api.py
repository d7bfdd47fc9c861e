import base64
import pytest
from types import SimpleNamespace
from cryptography.fernet import Fernet
from fastapi.testclient import TestClient

from portal_backend.model import AuthSession, Base, Profile
from portal_backend.server import create_app

from .fixtures import bearer, fresh, make_user


@pytest.fixture
def account(db):
    return make_user(db, "academic_staff", email="Lecturer@Portal.test", first_name="Funmi", last_name="Ade")


@pytest.mark.integration
class TestLogin:

    def test_login_issues_session(self, client, db, account):
        response = client.post("/auth/login", json={"email": "lecturer@portal.test", "password": "secret"})

        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["main_role"] == "academic_staff"
        assert response.cookies.get("portal_session") == body["access_token"]

        session = db.query(AuthSession).filter_by(token=body["access_token"]).one()
        assert session.user_id == account.id
        assert session.logout_time is None

    def test_token_authenticates_requests(self, client, account):
        token = client.post("/auth/login", json={"email": account.email, "password": "secret"}).json()["access_token"]

        response = client.get("/profile/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["profile"]["id"] == account.id

    def test_cookie_authenticates_requests(self, client, account):
        client.post("/auth/login", json={"email": account.email, "password": "secret"})

        assert client.get("/profile/me").status_code == 200

    def test_authorization_header_wins_over_cookie(self, client, account):
        client.post("/auth/login", json={"email": account.email, "password": "secret"})

        response = client.get("/profile/me", headers={"Authorization": "Bearer revoked-or-unknown"})

        assert response.status_code == 401

    @pytest.mark.parametrize("email,password", [
        ("lecturer@portal.test", "wrong"),
        ("nobody@portal.test", "secret"),
    ])
    def test_invalid_credentials(self, client, account, email, password):
        response = client.post("/auth/login", json={"email": email, "password": password})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    def test_malformed_login(self, client):
        response = client.post("/auth/login", json={"email": "x@y.z"})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid payload"
        assert ["body", "password"] in [field["loc"] for field in response.json()["fields"]]

    def test_account_without_profile_cannot_log_in(self, client, db):
        user = make_user(db, None, email="orphan@portal.test")

        response = client.post("/auth/login", json={"email": user.email, "password": "secret"})

        assert response.status_code == 401


@pytest.mark.integration
class TestLogout:

    def test_logout_revokes_token(self, client, db, account):
        headers = bearer(db, account)

        response = client.post("/auth/logout", headers=headers)

        assert response.json() == {"success": True}
        assert client.get("/profile/me", headers=headers).status_code == 401

    def test_logout_requires_session(self, client):
        assert client.post("/auth/logout").status_code == 401


@pytest.mark.integration
class TestOwnProfile:

    def test_onboarding_complete(self, client, db, account):
        response = client.post("/auth/onboarding/complete", headers=bearer(db, account))

        assert response.json() == {"ok": True}
        assert fresh(db, Profile, account.id).onboarding_status == "active"

    def test_read_profile(self, client, db, account):
        profile = client.get("/profile/me", headers=bearer(db, account)).json()["profile"]

        assert profile["first_name"] == "Funmi"
        assert profile["main_role"] == "academic_staff"
        assert profile["onboarding_status"] == "pending"

    def test_update_trims_and_clears(self, client, db, account):
        headers = bearer(db, account)
        client.patch("/profile/me", json={"address": "old address"}, headers=headers)

        response = client.patch(
            "/profile/me",
            json={"phone": "  0801 234 5678 ", "address": "   "},
            headers=headers
        )

        assert response.status_code == 200
        assert response.json()["profile"]["phone"] == "0801 234 5678"
        assert response.json()["profile"]["address"] is None

    def test_update_ignores_other_fields(self, client, db, account):
        response = client.patch(
            "/profile/me",
            json={"main_role": "admin", "first_name": "Hacker"},
            headers=bearer(db, account)
        )

        assert response.status_code == 400
        assert response.json() == {"error": "No valid fields to update"}
        profile = fresh(db, Profile, account.id)
        assert profile.main_role == "academic_staff"
        assert profile.first_name == "Funmi"

    def test_update_rejects_long_values(self, client, db, account):
        response = client.patch("/profile/me", json={"phone": "9" * 41}, headers=bearer(db, account))
        assert response.status_code == 400


@pytest.mark.integration
class TestApplicationSecret:

    @pytest.fixture
    def rotated_app(self, portal_settings):
        rotated = SimpleNamespace(**vars(portal_settings))
        rotated.TOKEN_SECRET = Fernet.generate_key().decode()
        app = create_app(rotated)
        Base.metadata.create_all(bind=app.state.engine)
        try:
            yield app
        finally:
            app.state.engine.dispose()

    @pytest.fixture
    def rotated_db(self, rotated_app):
        session = rotated_app.state.session_factory()
        try:
            yield session
        finally:
            session.close()

    def test_passwords_are_checked_with_the_app_secret(self, rotated_app, rotated_db):
        secret_key = rotated_app.state.settings.TOKEN_SECRET
        make_user(rotated_db, "admin", email="current@portal.test", secret_key=secret_key)
        make_user(rotated_db, "admin", email="stale@portal.test")
        client = TestClient(rotated_app)

        current = client.post("/auth/login", json={"email": "current@portal.test", "password": "secret"})
        stale = client.post("/auth/login", json={"email": "stale@portal.test", "password": "secret"})

        assert current.status_code == 200
        assert stale.status_code == 401

    def test_basic_credentials_use_the_app_secret(self, rotated_app, rotated_db):
        secret_key = rotated_app.state.settings.TOKEN_SECRET
        account = make_user(rotated_db, "academic_staff", email="basic@portal.test", secret_key=secret_key)
        encoded = base64.b64encode(b"basic@portal.test:secret").decode()

        response = TestClient(rotated_app).get("/profile/me", headers={"Authorization": f"Basic {encoded}"})

        assert response.status_code == 200
        assert response.json()["profile"]["id"] == account.id
