import pytest
from decimal import Decimal
from pydantic import ValidationError
from boxoffice.domain.sales.schemas import SaleCreateDTO, MAX_TICKETS_PER_LINE


def test_sale_create_trims_name_and_normalizes_contacts():
    dto = SaleCreateDTO(
        concert_id=1,
        customer_name="  Jane Roe ",
        customer_email="  ",
        customer_phone="+1 650-253-0000",
        ticket_purchases=[{"ticket_type_id": 5, "quantity": 2, "price_per_ticket": "25.00"}]
    )

    assert dto.customer_name == "Jane Roe"
    assert dto.customer_email is None
    assert dto.customer_phone == "+16502530000"
    assert dto.ticket_purchases[0].price_per_ticket == Decimal("25.00")


def test_sale_create_blank_name_becomes_none_for_service_check():
    dto = SaleCreateDTO(concert_id=1, customer_name="   ", ticket_purchases=[])

    assert dto.customer_name is None
    assert dto.ticket_purchases == []


def test_sale_create_keeps_degenerate_lines_for_service_filtering():
    dto = SaleCreateDTO(
        concert_id=1,
        customer_name="Jane",
        ticket_purchases=[{"ticket_type_id": 5, "quantity": 0}, {"ticket_type_id": 0, "quantity": 3}]
    )

    assert [i.quantity for i in dto.ticket_purchases] == [0, 3]


def test_sale_create_invalid_email_rejected():
    with pytest.raises(ValidationError):
        SaleCreateDTO(concert_id=1, customer_name="Jane", customer_email="not-an-email")


def test_sale_create_invalid_phone_rejected():
    with pytest.raises(ValidationError):
        SaleCreateDTO(concert_id=1, customer_name="Jane", customer_phone="12")


def test_sale_create_extra_field_rejected():
    with pytest.raises(ValidationError):
        SaleCreateDTO(concert_id=1, customer_name="Jane", discount=10)


def test_sale_create_price_with_three_decimals_rejected():
    with pytest.raises(ValidationError):
        SaleCreateDTO(
            concert_id=1,
            customer_name="Jane",
            ticket_purchases=[{"ticket_type_id": 1, "quantity": 1, "price_per_ticket": "1.005"}]
        )


def test_sale_create_quantity_above_line_cap_rejected():
    with pytest.raises(ValidationError):
        SaleCreateDTO(
            concert_id=1,
            customer_name="Jane",
            ticket_purchases=[{"ticket_type_id": 1, "quantity": MAX_TICKETS_PER_LINE + 1}]
        )
