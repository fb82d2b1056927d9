"""App factory wiring: root routes and the error envelope."""

from fastapi.testclient import TestClient

from umutisafe.config import settings
from umutisafe.main import create_app


def test_root_and_health(client):
    assert client.get("/").json()["message"] == "Welcome to UmutiSafe API"
    assert client.get("/health").json() == {"success": True, "status": "healthy", "environment": "test"}


def test_missing_token_is_rendered_in_envelope(client):
    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_validation_errors_are_400(client):
    response = client.post("/api/auth/login", json={"email": "not-an-email"})

    assert response.status_code == 400
    assert "password" in response.json()["message"]


def _crashing_app(engine, app_settings):
    app = create_app(app_settings=app_settings, engine=engine)

    @app.get("/boom")
    def boom():
        raise RuntimeError("kaboom")

    return TestClient(app, raise_server_exceptions=False)


def test_unhandled_error_includes_stack_outside_production(engine):
    response = _crashing_app(engine, settings).get("/boom")

    assert response.status_code == 500
    assert response.json()["message"] == "kaboom"
    assert response.json()["stack"] == "RuntimeError: kaboom"


def test_unhandled_error_hides_stack_in_production(engine):
    production = settings.model_copy(update={"ENVIRONMENT": "production"})

    response = _crashing_app(engine, production).get("/boom")

    assert response.status_code == 500
    assert "stack" not in response.json()
