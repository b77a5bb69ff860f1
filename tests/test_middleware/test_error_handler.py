"""
Tests for error handling: domain error mapping and the catch-all middleware.
"""

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from procedural_memory.domain.errors import (
    DomainError,
    InvalidAlgorithm,
    InvalidDateFormat,
    InvalidProcedureInput,
    InvalidReviewIndex,
    ProcedureNotFound,
)
from procedural_memory.middleware.error_handler import register_error_handlers, status_for


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def app_with_handlers():
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/missing")
    async def missing():
        raise ProcedureNotFound("abc")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    @app.get("/teapot")
    async def teapot():
        raise HTTPException(status_code=418, detail="short and stout")

    return app


@pytest.fixture
def client(app_with_handlers):
    return TestClient(app_with_handlers, raise_server_exceptions=False)


# =============================================================================
# Status mapping
# =============================================================================


class TestStatusFor:
    @pytest.mark.parametrize(
        "error,status",
        [
            (ProcedureNotFound("p"), 404),
            (InvalidReviewIndex("p", 99, 18), 400),
            (InvalidAlgorithm("visual"), 422),
            (InvalidDateFormat("nope"), 422),
            (InvalidProcedureInput("empty"), 422),
            (DomainError("generic"), 400),
        ],
    )
    def test_mapping(self, error, status):
        assert status_for(error) == status


# =============================================================================
# Responses
# =============================================================================


class TestErrorResponses:
    def test_domain_error_body(self, client):
        response = client.get("/missing")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == {
            "type": "ProcedureNotFound",
            "message": "Procedure abc not found",
        }
        assert body["request_id"]

    def test_unhandled_exception_is_500(self, client):
        response = client.get("/boom")

        assert response.status_code == 500
        body = response.json()
        assert body["error"]["message"] == "Internal server error"
        assert "kaboom" not in response.text

    def test_http_exception_passes_through(self, client):
        response = client.get("/teapot")

        assert response.status_code == 418
        assert response.json() == {"detail": "short and stout"}
