from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.domain.reports import crud
from boxoffice.domain.reports.schemas import ConcertSalesReportDTO, TicketTypeSalesDTO
from boxoffice.services.concert_service import require_concert


async def concert_sales_report(db: AsyncSession, concert_id: int) -> ConcertSalesReportDTO:
    """Per ticket type figures for one concert.

    `remaining` is the live inventory counter, so `initial` is reconstructed
    as sold + remaining. Revenue sums what was actually charged.
    """
    concert = await require_concert(db, concert_id)
    rows = await crud.ticket_type_sales(db, concert_id)

    ticket_types = [
        TicketTypeSalesDTO(
            ticket_type_id=r.ticket_type_id,
            name=r.name,
            price=r.price,
            is_active=r.is_active,
            initial=int(r.sold) + r.remaining,
            sold=int(r.sold),
            remaining=r.remaining,
            checked_in=int(r.checked_in),
            revenue=Decimal(r.revenue)
        )
        for r in rows
    ]
    total_initial = sum(t.initial for t in ticket_types)
    total_sold = sum(t.sold for t in ticket_types)

    return ConcertSalesReportDTO(
        concert_id=concert.id,
        concert_name=concert.name,
        ticket_types=ticket_types,
        total_initial=total_initial,
        total_sold=total_sold,
        total_remaining=sum(t.remaining for t in ticket_types),
        total_checked_in=sum(t.checked_in for t in ticket_types),
        total_revenue=sum((t.revenue for t in ticket_types), Decimal("0")),
        sold_percentage=round(total_sold * 100 / total_initial, 1) if total_initial else 0.0
    )
