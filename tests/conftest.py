import os

os.environ.setdefault("POSTGRES_USER", "boxoffice")
os.environ.setdefault("db_password", "boxoffice")
os.environ.setdefault("POSTGRES_DB", "boxoffice_test")
os.environ.setdefault("secret_key", "test-secret-key")

import pytest
import importlib


SERVICE_MODULES = [
    "boxoffice.services.auth_service",
    "boxoffice.services.venue_service",
    "boxoffice.services.concert_service",
    "boxoffice.services.sale_service",
    "boxoffice.services.checkin_service",
]


class _StubSpan:
    def __init__(
        self,
        *,
        scope: str,
        action: str,
        object_type: str | None = None,
        object_id: int | str | None = None,
        concert_id: int | None = None,
        sale_id: int | None = None,
        ticket_id: str | None = None,
        meta: dict | None = None,
        **_ignored
    ):
        self.scope = scope
        self.action = action
        self.object_type = object_type
        self.object_id = object_id
        self.concert_id = concert_id
        self.sale_id = sale_id
        self.ticket_id = ticket_id
        self.meta = dict(meta or {})
        self.entered = False
        self.exited = False
        self.exit_args = None

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.exited = True
        self.exit_args = (exc_type, exc, tb)
        return False


@pytest.fixture(autouse=True)
def auditspan_stub(mocker, request):
    instances = []

    def factory(*a, **k):
        s = _StubSpan(*a, **k)
        instances.append(s)
        return s

    for mod in SERVICE_MODULES:
        importlib.import_module(mod)
        mocker.patch(f"{mod}.AuditSpan", side_effect=factory)

    return instances
