import pytest
from boxoffice.services import ticket_type_service
from boxoffice.domain.exceptions import NotFound
from tests.helper import make_ticket_type


@pytest.mark.asyncio
async def test_lists_active_ticket_types(mocker):
    mocker.patch(
        "boxoffice.services.concert_service.crud.get_concert_by_id",
        new=mocker.AsyncMock(return_value=mocker.Mock(id=1))
    )
    listing = mocker.patch(
        "boxoffice.services.ticket_type_service.crud.list_ticket_types",
        new=mocker.AsyncMock(return_value=[make_ticket_type(mocker, 10, "VIP", "80.00")])
    )
    db = mocker.Mock()

    result = await ticket_type_service.list_concert_ticket_types(db, 1)

    listing.assert_awaited_once_with(db, 1)
    assert [(t.id, t.name, t.is_active) for t in result] == [(10, "VIP", True)]


@pytest.mark.asyncio
async def test_unknown_concert(mocker):
    mocker.patch(
        "boxoffice.services.concert_service.crud.get_concert_by_id",
        new=mocker.AsyncMock(return_value=None)
    )

    with pytest.raises(NotFound):
        await ticket_type_service.list_concert_ticket_types(mocker.Mock(), 1)
