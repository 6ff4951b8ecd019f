from typing import Any
from sqlalchemy import select, func
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.pagination import paginate
from boxoffice.domain.ticketing.models import UniqueTicket, CheckIn
from boxoffice.domain.sales.models import Sale, TicketPurchase
from boxoffice.domain.concerts.models import Concert, TicketType
from boxoffice.domain.venues.models import Venue

INSERT_BATCH_ROWS = 1000


async def insert_unique_tickets(db: AsyncSession, purchase_id: int, codes: dict[int, str]) -> set[int]:
    """Inserts `{ticket_number: code}`; returns the numbers that were stored.

    Rows go out in batches of `INSERT_BATCH_ROWS` to stay under the bind
    parameter limit of the driver.
    """
    rows = [{"id": code, "purchase_id": purchase_id, "ticket_number": n} for n, code in codes.items()]
    stored: set[int] = set()
    for start in range(0, len(rows), INSERT_BATCH_ROWS):
        stmt = (
            insert(UniqueTicket)
            .values(rows[start:start + INSERT_BATCH_ROWS])
            .on_conflict_do_nothing(index_elements=["id"])
            .returning(UniqueTicket.ticket_number)
        )
        result = await db.execute(stmt)
        stored.update(result.scalars().all())
    return stored


async def list_purchase_tickets(db: AsyncSession, purchase_id: int) -> list[Any]:
    stmt = (
        select(
            UniqueTicket.id.label("ticket_id"),
            UniqueTicket.ticket_number,
            UniqueTicket.purchase_id,
            TicketType.name.label("ticket_type_name")
        )
        .select_from(UniqueTicket)
        .join(TicketPurchase, TicketPurchase.id == UniqueTicket.purchase_id)
        .join(TicketType, TicketType.id == TicketPurchase.ticket_type_id)
        .where(UniqueTicket.purchase_id == purchase_id)
        .order_by(UniqueTicket.ticket_number)
    )
    result = await db.execute(stmt)
    return list(result.all())


async def get_ticket_for_concert(db: AsyncSession, concert_id: int, ticket_id: str) -> Any | None:
    stmt = (
        select(
            UniqueTicket.id.label("ticket_id"),
            UniqueTicket.ticket_number,
            TicketPurchase.id.label("purchase_id"),
            TicketPurchase.quantity,
            TicketPurchase.price_per_ticket,
            TicketPurchase.total_price,
            Sale.id.label("sale_id"),
            Sale.customer_name,
            Sale.concert_id,
            TicketType.name.label("ticket_type_name"),
            Concert.name.label("concert_name")
        )
        .select_from(UniqueTicket)
        .join(TicketPurchase, TicketPurchase.id == UniqueTicket.purchase_id)
        .join(Sale, Sale.id == TicketPurchase.sale_id)
        .join(TicketType, TicketType.id == TicketPurchase.ticket_type_id)
        .join(Concert, Concert.id == Sale.concert_id)
        .where(UniqueTicket.id == ticket_id, Sale.concert_id == concert_id)
    )
    result = await db.execute(stmt)
    return result.first()


async def get_check_in_by_ticket(db: AsyncSession, ticket_id: str) -> CheckIn | None:
    stmt = select(CheckIn).where(CheckIn.ticket_id == ticket_id)
    result = await db.execute(stmt)
    return result.scalars().first()


async def create_check_in(db: AsyncSession, data: dict) -> CheckIn:
    check_in = CheckIn(**data)
    db.add(check_in)
    return check_in


async def count_check_ins(db: AsyncSession, ticket_id: str) -> int:
    stmt = select(func.count(CheckIn.id)).where(CheckIn.ticket_id == ticket_id)
    return int(await db.scalar(stmt) or 0)


async def search_tickets(
        db: AsyncSession,
        page: int,
        page_size: int,
        *,
        customer_name: str | None = None,
        concert_id: int | None = None
):
    base = (
        select(
            UniqueTicket.id.label("ticket_id"),
            UniqueTicket.ticket_number,
            TicketType.name.label("ticket_type_name"),
            TicketPurchase.id.label("purchase_id"),
            Sale.id.label("sale_id"),
            Sale.customer_name,
            Concert.id.label("concert_id"),
            Concert.name.label("concert_name"),
            Concert.concert_date,
            Venue.name.label("venue_name"),
            CheckIn.checked_in_at
        )
        .select_from(UniqueTicket)
        .join(TicketPurchase, TicketPurchase.id == UniqueTicket.purchase_id)
        .join(Sale, Sale.id == TicketPurchase.sale_id)
        .join(TicketType, TicketType.id == TicketPurchase.ticket_type_id)
        .join(Concert, Concert.id == Sale.concert_id)
        .join(Venue, Venue.id == Concert.venue_id)
        .outerjoin(CheckIn, CheckIn.ticket_id == UniqueTicket.id)
    )
    where = []
    if customer_name is not None:
        where.append(Sale.customer_name == customer_name)
    if concert_id is not None:
        where.append(Sale.concert_id == concert_id)

    return await paginate(
        db,
        base,
        page=page,
        page_size=page_size,
        where=where,
        order_by=[Sale.sale_date.desc(), TicketPurchase.id, UniqueTicket.ticket_number],
        scalars=False,
        count_by=UniqueTicket.id
    )
