# tests/test_errors.py
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app import models
from app.errors import ApiError, ErrorKind, register_exception_handlers
from app.ownership import is_owner, require_owner


@pytest.fixture
def error_client():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/boom")
    def boom():
        raise RuntimeError("connection to db failed: password=hunter2")

    @app.get("/conflict")
    def conflict():
        raise ApiError.booking_conflict({"startDate": "taken"})

    return TestClient(app, raise_server_exceptions=False)


def test_store_errors_are_sanitized(error_client):
    resp = error_client.get("/boom")
    assert resp.status_code == 500
    assert resp.json() == {"message": "Internal server error"}


def test_api_error_body(error_client):
    resp = error_client.get("/conflict")
    assert resp.status_code == 403
    assert resp.json() == {
        "message": "Sorry, this spot is already booked for the specified dates",
        "errors": {"startDate": "taken"},
    }


def test_unknown_route_uses_message_body(error_client):
    resp = error_client.get("/nowhere")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Not Found"}


@pytest.mark.parametrize(
    "kind, status_code",
    [
        (ErrorKind.NOT_FOUND, 404),
        (ErrorKind.UNAUTHORIZED, 401),
        (ErrorKind.FORBIDDEN, 403),
        (ErrorKind.BOOKING_CONFLICT, 403),
        (ErrorKind.INVALID_INPUT, 400),
        (ErrorKind.INTERNAL_ERROR, 500),
    ],
)
def test_error_kind_status_codes(kind, status_code):
    assert kind.status_code == status_code


def test_ownership_by_resource_kind():
    spot = models.Spot(owner_id=1)
    review = models.Review(user_id=2)
    image = models.Image(user_id=3)

    assert is_owner(1, spot) and not is_owner(2, spot)
    assert is_owner(2, review) and not is_owner(1, review)
    assert is_owner(3, image)


def test_require_owner_raises_forbidden():
    with pytest.raises(ApiError) as exc_info:
        require_owner(7, models.Spot(owner_id=1))
    assert exc_info.value.kind is ErrorKind.FORBIDDEN


def test_unknown_resource_kind():
    with pytest.raises(TypeError):
        is_owner(1, object())
