import pytest
from decimal import Decimal
from pydantic import ValidationError
from boxoffice.domain.concerts.schemas import ConcertCreateDTO, ConcertUpdateDTO
from boxoffice.domain.venues.schemas import VenueCreateDTO
from boxoffice.domain.ticketing.schemas import CheckInRequestDTO, TicketSearchQueryDTO


def test_concert_create_trims_and_defaults_blank_ticket_rows():
    dto = ConcertCreateDTO(
        name=" Jazz Night ",
        concert_date="2026-11-20T20:00:00+01:00",
        venue_id=3,
        image_url="  ",
        ticket_types=[{"name": " VIP ", "price": "120.00", "total_quantity": 50}, {"name": "  "}]
    )

    assert dto.name == "Jazz Night"
    assert dto.image_url is None
    assert dto.ticket_types[0].name == "VIP"
    assert dto.ticket_types[0].price == Decimal("120.00")
    assert dto.ticket_types[1].name is None
    assert dto.ticket_types[1].price == Decimal("0")
    assert dto.ticket_types[1].total_quantity == 0


def test_concert_create_blank_name_rejected():
    with pytest.raises(ValidationError):
        ConcertCreateDTO(name="   ", concert_date="2026-11-20T20:00:00Z", venue_id=1)


def test_concert_update_ticket_types_absent_means_untouched():
    dto = ConcertUpdateDTO(name="Renamed")

    assert dto.ticket_types is None
    assert dto.model_dump(exclude_none=True) == {"name": "Renamed"}


def test_concert_update_accepts_ids_on_rows():
    dto = ConcertUpdateDTO(ticket_types=[{"id": 4, "name": "GA", "price": "10", "total_quantity": 0}])

    assert dto.ticket_types[0].id == 4


def test_venue_create_capacity_must_be_positive():
    with pytest.raises(ValidationError):
        VenueCreateDTO(name="Hall", capacity=0)


def test_check_in_request_keeps_raw_ticket_id_and_trims_notes():
    dto = CheckInRequestDTO(ticket_id=" abc ", notes="  ")

    assert dto.ticket_id == " abc "
    assert dto.notes is None


def test_ticket_search_query_trims_customer_name():
    dto = TicketSearchQueryDTO(customer_name="  Jane Roe ")

    assert dto.customer_name == "Jane Roe"
    assert dto.concert_id is None
