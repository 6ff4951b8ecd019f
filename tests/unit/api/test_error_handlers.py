import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from boxoffice.api.exceptions import register_error_handlers, MEDIA_TYPE, STORAGE_ERROR_MESSAGE
from boxoffice.domain.exceptions import AlreadyCheckedIn, SoldOut, Unauthorized, InvalidTicketFormat, \
    InternalError, TicketNotFoundForConcert


def _client(exc: Exception) -> TestClient:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/boom")
    async def boom():
        raise exc

    return TestClient(app)


@pytest.mark.parametrize("exc, status_code, code", [
    (AlreadyCheckedIn("Ticket already checked in"), 409, "already_checked_in"),
    (SoldOut("Not enough tickets left"), 409, "insufficient_inventory"),
    (InvalidTicketFormat("Invalid ticket ID format"), 400, "invalid_format"),
    (TicketNotFoundForConcert("Ticket not found for this concert"), 404, "not_found_for_concert"),
    (InternalError("Could not generate unique ticket identifiers"), 500, "internal_error"),
])
def test_app_errors_render_problem_details(exc, status_code, code):
    response = _client(exc).get("/boom")

    assert response.status_code == status_code
    assert response.headers["content-type"].startswith(MEDIA_TYPE)
    body = response.json()
    assert body["success"] is False
    assert body["code"] == code
    assert body["message"] == str(exc)
    assert body["detail"] == str(exc)


def test_context_is_included():
    response = _client(SoldOut("Not enough tickets left", ctx={"ticket_type_id": 10, "requested": 5})).get("/boom")

    assert response.json()["context"] == {"ticket_type_id": 10, "requested": 5}


def test_unauthorized_sets_www_authenticate():
    response = _client(Unauthorized("Session expired or revoked")).get("/boom")

    assert response.status_code == 401
    assert response.headers["www-authenticate"].startswith("Bearer ")


def test_storage_errors_are_generic(caplog):
    exc = OperationalError("SELECT 1", {}, Exception("connection refused"))

    with caplog.at_level("ERROR", logger="boxoffice.api"):
        response = _client(exc).get("/boom")

    assert response.status_code == 500
    body = response.json()
    assert body["message"] == STORAGE_ERROR_MESSAGE
    assert body["code"] == "internal_error"
    assert "connection refused" not in response.text
    assert any("Storage error" in r.getMessage() for r in caplog.records)
