import pytest
from sqlalchemy.exc import IntegrityError
from boxoffice.services import venue_service
from boxoffice.domain.venues.schemas import VenueCreateDTO, VenueUpdateDTO, VenuesQueryDTO
from boxoffice.domain.exceptions import NotFound, Conflict
from tests.helper import make_db


@pytest.mark.asyncio
async def test_get_venue_not_found(mocker):
    mocker.patch("boxoffice.services.venue_service.crud.get_venue_by_id", new=mocker.AsyncMock(return_value=None))

    with pytest.raises(NotFound) as e:
        await venue_service.get_venue(mocker.Mock(), 3)

    assert e.value.ctx == {"venue_id": 3}


@pytest.mark.asyncio
async def test_create_venue_flushes_and_records_id(mocker, auditspan_stub):
    venue = mocker.Mock(id=9)
    create = mocker.patch("boxoffice.services.venue_service.crud.create_venue", new=mocker.AsyncMock(return_value=venue))
    db = make_db(mocker)

    out = await venue_service.create_venue(db, VenueCreateDTO(name=" Blue Note ", capacity=300))

    assert out is venue
    create.assert_awaited_once_with(db, {"name": "Blue Note", "capacity": 300})
    db.flush.assert_awaited_once()
    assert auditspan_stub[0].object_id == 9


@pytest.mark.asyncio
async def test_update_venue_sets_only_given_fields(mocker):
    venue = mocker.Mock(id=9)
    mocker.patch("boxoffice.services.venue_service.crud.get_venue_by_id", new=mocker.AsyncMock(return_value=venue))
    update = mocker.patch("boxoffice.services.venue_service.crud.update_venue", new=mocker.AsyncMock(return_value=venue))
    db = make_db(mocker)

    await venue_service.update_venue(db, VenueUpdateDTO(address=" Main St 1 "), 9)

    update.assert_awaited_once_with(venue, {"address": "Main St 1"})


@pytest.mark.asyncio
async def test_list_venues_builds_page(mocker):
    venue = mocker.Mock(id=1, address=None, capacity=None)
    venue.name = "Hall"
    mocker.patch(
        "boxoffice.services.venue_service.crud.list_all_venues",
        new=mocker.AsyncMock(return_value=([venue], 1))
    )

    page = await venue_service.list_venues(mocker.Mock(), VenuesQueryDTO(page=1, page_size=10))

    assert page.total == 1
    assert page.items[0].name == "Hall"
    assert page.has_next is False


@pytest.mark.asyncio
async def test_delete_venue_used_by_concert_is_refused(mocker):
    venue = mocker.Mock(id=4)
    mocker.patch("boxoffice.services.venue_service.crud.get_venue_by_id", new=mocker.AsyncMock(return_value=venue))
    mocker.patch("boxoffice.services.venue_service.crud.venue_has_concerts", new=mocker.AsyncMock(return_value=True))
    delete = mocker.patch("boxoffice.services.venue_service.crud.delete_venue", new=mocker.AsyncMock())
    db = make_db(mocker)

    with pytest.raises(Conflict) as e:
        await venue_service.delete_venue(db, 4)

    assert str(e.value) == "Cannot delete venue that is being used by concerts"
    delete.assert_not_awaited()
    db.flush.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_unused_venue(mocker):
    venue = mocker.Mock(id=4)
    mocker.patch("boxoffice.services.venue_service.crud.get_venue_by_id", new=mocker.AsyncMock(return_value=venue))
    mocker.patch("boxoffice.services.venue_service.crud.venue_has_concerts", new=mocker.AsyncMock(return_value=False))
    delete = mocker.patch("boxoffice.services.venue_service.crud.delete_venue", new=mocker.AsyncMock())
    db = make_db(mocker)

    await venue_service.delete_venue(db, 4)

    delete.assert_awaited_once_with(db, venue)
    db.flush.assert_awaited_once()


@pytest.mark.asyncio
async def test_delete_venue_race_with_new_concert_maps_fk_error(mocker):
    venue = mocker.Mock(id=4)
    mocker.patch("boxoffice.services.venue_service.crud.get_venue_by_id", new=mocker.AsyncMock(return_value=venue))
    mocker.patch("boxoffice.services.venue_service.crud.venue_has_concerts", new=mocker.AsyncMock(return_value=False))
    mocker.patch("boxoffice.services.venue_service.crud.delete_venue", new=mocker.AsyncMock())
    db = make_db(mocker)
    db.flush.side_effect = IntegrityError("DELETE FROM venues", {}, Exception("fk"))

    with pytest.raises(Conflict):
        await venue_service.delete_venue(db, 4)
