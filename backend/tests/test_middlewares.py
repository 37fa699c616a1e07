"""
Tests for the HTTP middlewares on a bare application.
"""

from fastapi import FastAPI, Response
from fastapi.testclient import TestClient

from crud_api.core.middlewares import register_middlewares


def _app() -> FastAPI:
    app = FastAPI()
    register_middlewares(app)

    @app.get("/ping")
    def ping(response: Response):
        response.headers["server"] = "uvicorn"
        return {"ok": True}

    @app.post("/echo")
    def echo(payload: dict):
        return payload

    return app


class TestSecurityHeaders:
    """Headers added to and removed from every response."""

    def test_server_header_is_removed(self):
        response = TestClient(_app()).get("/ping")

        assert response.status_code == 200
        assert "server" not in response.headers
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_request_id_generated(self):
        response = TestClient(_app()).get("/ping")
        assert response.headers["X-Request-ID"]


class TestContentType:
    """Bodies must be JSON."""

    def test_json_accepted(self):
        response = TestClient(_app()).post("/echo", json={"a": 1})
        assert response.json() == {"a": 1}

    def test_other_types_rejected(self):
        response = TestClient(_app()).post(
            "/echo", content="a=1", headers={"Content-Type": "text/plain"}
        )
        assert response.status_code == 415
