from typing import Any
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.pagination import PageDTO
from boxoffice.domain.ticketing import crud
from boxoffice.domain.ticketing.schemas import TicketSearchQueryDTO, TicketSearchItemDTO
from boxoffice.domain.exceptions import InvalidInput


def _map_ticket_row(row: Any) -> TicketSearchItemDTO:
    return TicketSearchItemDTO(
        ticket_id=row.ticket_id,
        ticket_number=row.ticket_number,
        ticket_type_name=row.ticket_type_name,
        purchase_id=row.purchase_id,
        sale_id=row.sale_id,
        customer_name=row.customer_name,
        concert_id=row.concert_id,
        concert_name=row.concert_name,
        concert_date=row.concert_date,
        venue_name=row.venue_name,
        checked_in=row.checked_in_at is not None,
        checked_in_at=row.checked_in_at
    )


async def search_tickets(db: AsyncSession, query: TicketSearchQueryDTO) -> PageDTO[TicketSearchItemDTO]:
    if (query.customer_name is None) == (query.concert_id is None):
        raise InvalidInput(
            "Provide either a customer name or a concert",
            ctx={"customer_name": query.customer_name, "concert_id": query.concert_id}
        )

    rows, total = await crud.search_tickets(
        db,
        query.page,
        query.page_size,
        customer_name=query.customer_name,
        concert_id=query.concert_id
    )
    return PageDTO[TicketSearchItemDTO](
        items=[_map_ticket_row(r) for r in rows],
        total=total,
        page=query.page,
        page_size=query.page_size
    )
