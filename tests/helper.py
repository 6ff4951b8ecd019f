import uuid
from decimal import Decimal
from boxoffice.core.dependencies.auth import Actor
from boxoffice.domain.users.models import ProfileRole


def db_with_scalars_first(mocker, value):
    res = mocker.Mock()
    res.scalars.return_value.first.return_value = value
    db = mocker.Mock()
    db.execute = mocker.AsyncMock(return_value=res)
    return db, res


def db_with_scalar(mocker, value):
    db = mocker.Mock()
    db.scalar = mocker.AsyncMock(return_value=value)
    return db


def make_db(mocker):
    db = mocker.Mock()
    db.flush = mocker.AsyncMock()
    db.execute = mocker.AsyncMock()
    db.scalar = mocker.AsyncMock()
    return db


def make_actor(role: ProfileRole = ProfileRole.STAFF, user_id: int = 7) -> Actor:
    return Actor(user_id=user_id, role=role, session_id=uuid.UUID("00000000-0000-0000-0000-000000000001"))


def make_ticket_type(mocker, id: int, name: str, price: str, total_quantity: int = 100, is_active: bool = True):
    ticket_type = mocker.Mock(
        id=id,
        concert_id=1,
        price=Decimal(price),
        total_quantity=total_quantity,
        is_active=is_active
    )
    ticket_type.name = name
    return ticket_type
