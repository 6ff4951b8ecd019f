import json
import pytest
from sqlalchemy.exc import IntegrityError
from boxoffice.workers import audit_worker


def test_params_from_payload_fills_defaults():
    params = audit_worker.params_from_payload({
        "scope": "CHECKIN",
        "action": "CHECK_IN",
        "status": "fail",
        "concert_id": 1,
        "ticket_id": "ABCDEFGHJK23",
        "actor_roles": ("staff",)
    })

    assert params["status"] == "FAIL"
    assert params["actor_roles"] == ["staff"]
    assert params["meta"] == {}
    assert params["concert_id"] == 1
    assert params["ticket_id"] == "ABCDEFGHJK23"
    assert params["sale_id"] is None


def test_params_from_payload_requires_scope_and_action():
    with pytest.raises(ValueError):
        audit_worker.params_from_payload({"scope": "SALES"})


@pytest.mark.parametrize("fields", [{"json": "[1, 2]"}, {}])
def test_decode_entry_rejects_non_objects(fields):
    with pytest.raises(ValueError):
        audit_worker.decode_entry(fields)


def _session(mocker, db):
    ctx = mocker.MagicMock()
    ctx.__aenter__.return_value = db
    return mocker.Mock(return_value=ctx)


def _db(mocker, execute):
    db = mocker.MagicMock()
    db.execute = execute
    return db


@pytest.mark.asyncio
async def test_store_entries_acks_stored_and_malformed(mocker):
    r = mocker.Mock()
    r.xack = mocker.AsyncMock()
    db = _db(mocker, mocker.AsyncMock())
    entries = [
        ("1-0", {"json": json.dumps({"scope": "SALES", "action": "CREATE", "sale_id": 3})}),
        ("2-0", {"json": json.dumps({"scope": "SALES"})}),
    ]

    await audit_worker.store_entries(r, _session(mocker, db), entries)

    db.execute.assert_awaited_once()
    assert db.execute.await_args.args[1]["sale_id"] == 3
    assert [c.args[2] for c in r.xack.await_args_list] == ["1-0", "2-0"]


@pytest.mark.asyncio
async def test_store_entries_keeps_failed_inserts_pending(mocker):
    r = mocker.Mock()
    r.xack = mocker.AsyncMock()
    db = _db(mocker, mocker.AsyncMock(side_effect=[IntegrityError("INSERT", {}, Exception("bad")), None]))
    entries = [
        ("1-0", {"json": json.dumps({"scope": "AUTH", "action": "LOGIN"})}),
        ("2-0", {"json": json.dumps({"scope": "AUTH", "action": "LOGOUT"})}),
    ]

    await audit_worker.store_entries(r, _session(mocker, db), entries)

    assert [c.args[2] for c in r.xack.await_args_list] == ["2-0"]
