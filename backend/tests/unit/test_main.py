from fastapi.middleware.cors import CORSMiddleware
from fastapi.testclient import TestClient

from mdp_survey.errors import (
    DuplicateFunctionError,
    DuplicateRotationError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from mdp_survey.main import CORS_ORIGINS, _status_for, app


def _get_cors_middleware():
    for middleware in app.user_middleware:
        if middleware.cls is CORSMiddleware:
            return middleware
    raise AssertionError("CORSMiddleware not configured")


def test_lifespan_hooks_toggle_state():
    with TestClient(app):
        assert app.state.lifespan_started is True
    assert app.state.lifespan_shutdown is True


def test_router_mounts_api_prefix():
    paths = {route.path for route in app.router.routes}
    assert "/api/healthz" in paths
    assert "/api/evaluations" in paths
    assert "/api/evaluations/{evaluation_id}" in paths
    assert "/api/analytics/cohort" in paths


def test_cors_defaults():
    middleware = _get_cors_middleware()
    assert middleware.kwargs["allow_origins"] == CORS_ORIGINS
    assert middleware.kwargs["allow_methods"] == ["*"]


def test_error_kinds_map_to_status_codes():
    assert _status_for(ValidationError("bad")) == 400
    assert _status_for(DuplicateRotationError("dup")) == 400
    assert _status_for(DuplicateFunctionError("dup")) == 400
    assert _status_for(NotFoundError("gone")) == 404
    assert _status_for(PersistenceError("disk")) == 500


def test_error_payload_shape():
    assert DuplicateFunctionError("again").to_payload() == {
        "error": "again",
        "kind": "duplicate_function",
    }
