import pytest
from decimal import Decimal
from boxoffice.services import report_service
from boxoffice.domain.exceptions import NotFound


def _row(mocker, ticket_type_id, name, price, *, sold, remaining, revenue, checked_in=0, is_active=True):
    row = mocker.Mock(
        ticket_type_id=ticket_type_id,
        price=Decimal(price),
        is_active=is_active,
        sold=sold,
        remaining=remaining,
        revenue=Decimal(revenue),
        checked_in=checked_in
    )
    row.name = name
    return row


@pytest.fixture
def concert(mocker):
    concert = mocker.Mock(id=1)
    concert.name = "Jazz Night"
    mocker.patch(
        "boxoffice.services.concert_service.crud.get_concert_by_id",
        new=mocker.AsyncMock(return_value=concert)
    )
    return concert


@pytest.mark.asyncio
async def test_report_reconstructs_initial_inventory(mocker, concert):
    mocker.patch("boxoffice.services.report_service.crud.ticket_type_sales", new=mocker.AsyncMock(return_value=[
        _row(mocker, 10, "VIP", "100.00", sold=3, remaining=47, revenue="300.00", checked_in=1),
        _row(mocker, 11, "GA", "40.00", sold=0, remaining=100, revenue="0"),
    ]))

    report = await report_service.concert_sales_report(mocker.Mock(), 1)

    vip, ga = report.ticket_types
    assert (vip.initial, vip.sold, vip.remaining, vip.checked_in) == (50, 3, 47, 1)
    assert vip.revenue == Decimal("300.00")
    assert (ga.initial, ga.sold, ga.remaining) == (100, 0, 100)
    assert report.total_initial == 150
    assert report.total_sold == 3
    assert report.total_remaining == 147
    assert report.total_checked_in == 1
    assert report.total_revenue == Decimal("300.00")
    assert report.sold_percentage == 2.0


@pytest.mark.asyncio
async def test_report_keeps_retired_ticket_types_with_sales(mocker, concert):
    mocker.patch("boxoffice.services.report_service.crud.ticket_type_sales", new=mocker.AsyncMock(return_value=[
        _row(mocker, 12, "Early bird", "25.00", sold=10, remaining=0, revenue="250.00", is_active=False),
    ]))

    report = await report_service.concert_sales_report(mocker.Mock(), 1)

    assert report.ticket_types[0].is_active is False
    assert report.sold_percentage == 100.0


@pytest.mark.asyncio
async def test_report_without_inventory_has_zero_percentage(mocker, concert):
    mocker.patch("boxoffice.services.report_service.crud.ticket_type_sales", new=mocker.AsyncMock(return_value=[]))

    report = await report_service.concert_sales_report(mocker.Mock(), 1)

    assert report.ticket_types == []
    assert report.total_revenue == Decimal("0")
    assert report.sold_percentage == 0.0


@pytest.mark.asyncio
async def test_report_for_unknown_concert(mocker):
    mocker.patch(
        "boxoffice.services.concert_service.crud.get_concert_by_id",
        new=mocker.AsyncMock(return_value=None)
    )
    sales = mocker.patch("boxoffice.services.report_service.crud.ticket_type_sales", new=mocker.AsyncMock())

    with pytest.raises(NotFound):
        await report_service.concert_sales_report(mocker.Mock(), 404)

    sales.assert_not_awaited()
