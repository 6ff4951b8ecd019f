from datetime import datetime
from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.pagination import paginate
from boxoffice.domain.concerts.models import Concert, TicketType
from boxoffice.domain.venues.models import Venue
from boxoffice.domain.sales.models import TicketPurchase


async def get_concert_by_id(db: AsyncSession, concert_id: int) -> Concert | None:
    stmt = select(Concert).where(Concert.id == concert_id)
    result = await db.execute(stmt)
    return result.scalars().first()


async def list_concerts(
        db: AsyncSession,
        page: int,
        page_size: int,
        *,
        date_from: datetime | None = None,
        name: str | None = None
):
    base = (
        select(
            Concert.id,
            Concert.name,
            Concert.concert_date,
            Concert.venue_id,
            Concert.image_url,
            Venue.name.label("venue_name")
        )
        .select_from(Concert)
        .join(Venue, Venue.id == Concert.venue_id)
    )
    where = []
    if date_from is not None:
        where.append(Concert.concert_date >= date_from)
    if name:
        where.append(func.lower(Concert.name).contains(name.strip().lower()))

    return await paginate(
        db,
        base,
        page=page,
        page_size=page_size,
        where=where,
        order_by=[Concert.concert_date, Concert.id],
        scalars=False,
        count_by=Concert.id
    )


async def create_concert(db: AsyncSession, data: dict) -> Concert:
    concert = Concert(**data)
    db.add(concert)
    return concert


async def update_concert(concert: Concert, data: dict) -> Concert:
    for key, value in data.items():
        setattr(concert, key, value)
    return concert


async def list_ticket_types(db: AsyncSession, concert_id: int, *, active_only: bool = True) -> list[TicketType]:
    stmt = select(TicketType).where(TicketType.concert_id == concert_id)
    if active_only:
        stmt = stmt.where(TicketType.is_active.is_(True))
    stmt = stmt.order_by(TicketType.price.desc(), TicketType.id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_active_ticket_types(db: AsyncSession, concert_id: int, ticket_type_ids: set[int]) -> list[TicketType]:
    stmt = select(TicketType).where(
        TicketType.concert_id == concert_id,
        TicketType.id.in_(ticket_type_ids),
        TicketType.is_active.is_(True)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def create_ticket_types(db: AsyncSession, concert_id: int, data: list[dict]) -> list[TicketType]:
    ticket_types = [TicketType(concert_id=concert_id, **d) for d in data]
    db.add_all(ticket_types)
    return ticket_types


async def update_ticket_type(ticket_type: TicketType, data: dict) -> TicketType:
    for key, value in data.items():
        setattr(ticket_type, key, value)
    return ticket_type


async def sold_ticket_type_ids(db: AsyncSession, ticket_type_ids: set[int]) -> set[int]:
    if not ticket_type_ids:
        return set()
    stmt = select(TicketPurchase.ticket_type_id).where(TicketPurchase.ticket_type_id.in_(ticket_type_ids)).distinct()
    result = await db.execute(stmt)
    return set(result.scalars().all())


async def delete_ticket_types(db: AsyncSession, ticket_type_ids: set[int]) -> None:
    await db.execute(delete(TicketType).where(TicketType.id.in_(ticket_type_ids)))


async def deactivate_ticket_types(db: AsyncSession, ticket_type_ids: set[int]) -> None:
    await db.execute(update(TicketType).where(TicketType.id.in_(ticket_type_ids)).values(is_active=False))


async def decrement_inventory(db: AsyncSession, ticket_type_id: int, quantity: int) -> int | None:
    """Conditional decrement; returns the new remaining count or None if not enough left."""
    return await db.scalar(
        update(TicketType)
        .where(
            TicketType.id == ticket_type_id,
            TicketType.is_active.is_(True),
            TicketType.total_quantity >= quantity
        )
        .values(total_quantity=TicketType.total_quantity - quantity)
        .returning(TicketType.total_quantity)
    )
