from decimal import Decimal
from boxoffice.domain.exceptions import AppError, InvalidTicketFormat, InvalidInput, TicketNotFoundForConcert, \
    NotFound, AlreadyCheckedIn, SoldOut, Conflict


def test_subclasses_keep_parent_type_and_own_code():
    assert isinstance(InvalidTicketFormat("x"), InvalidInput)
    assert isinstance(TicketNotFoundForConcert("x"), NotFound)
    assert isinstance(AlreadyCheckedIn("x"), Conflict)
    assert isinstance(SoldOut("x"), Conflict)
    assert InvalidTicketFormat.code == "invalid_format"
    assert AlreadyCheckedIn.code == "already_checked_in"


def test_ctx_is_normalized():
    err = AppError("boom", ctx={"amount": Decimal("10.50"), "ids": [1, 2], "n": 3, "flag": True})

    assert err.ctx == {"amount": "10.50", "ids": "[1, 2]", "n": 3, "flag": True}


def test_empty_message_falls_back_to_class_name():
    assert str(SoldOut()) == "SoldOut"
