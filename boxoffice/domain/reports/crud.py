from typing import Any
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.domain.concerts.models import TicketType
from boxoffice.domain.sales.models import TicketPurchase
from boxoffice.domain.ticketing.models import UniqueTicket, CheckIn


async def ticket_type_sales(db: AsyncSession, concert_id: int) -> list[Any]:
    sold = (
        select(
            TicketPurchase.ticket_type_id,
            func.sum(TicketPurchase.quantity).label("sold"),
            func.sum(TicketPurchase.total_price).label("revenue")
        )
        .group_by(TicketPurchase.ticket_type_id)
        .subquery()
    )
    checked = (
        select(
            TicketPurchase.ticket_type_id,
            func.count(CheckIn.id).label("checked_in")
        )
        .select_from(CheckIn)
        .join(UniqueTicket, UniqueTicket.id == CheckIn.ticket_id)
        .join(TicketPurchase, TicketPurchase.id == UniqueTicket.purchase_id)
        .group_by(TicketPurchase.ticket_type_id)
        .subquery()
    )
    stmt = (
        select(
            TicketType.id.label("ticket_type_id"),
            TicketType.name,
            TicketType.price,
            TicketType.is_active,
            TicketType.total_quantity.label("remaining"),
            func.coalesce(sold.c.sold, 0).label("sold"),
            func.coalesce(sold.c.revenue, 0).label("revenue"),
            func.coalesce(checked.c.checked_in, 0).label("checked_in")
        )
        .select_from(TicketType)
        .outerjoin(sold, sold.c.ticket_type_id == TicketType.id)
        .outerjoin(checked, checked.c.ticket_type_id == TicketType.id)
        .where(
            TicketType.concert_id == concert_id,
            or_(TicketType.is_active.is_(True), sold.c.sold > 0)
        )
        .order_by(TicketType.price.desc(), TicketType.id)
    )
    result = await db.execute(stmt)
    return list(result.all())
