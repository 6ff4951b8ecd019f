from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.pagination import paginate
from boxoffice.domain.venues.models import Venue
from boxoffice.domain.concerts.models import Concert


async def get_venue_by_id(db: AsyncSession, venue_id: int) -> Venue | None:
    stmt = select(Venue).where(Venue.id == venue_id)
    result = await db.execute(stmt)
    return result.scalars().first()


async def list_all_venues(
        db: AsyncSession,
        page: int,
        page_size: int,
        *,
        name: str | None = None
) -> tuple[list[Venue], int]:
    where = []
    if name:
        where.append(func.lower(Venue.name).contains(name.strip().lower()))
    return await paginate(
        db,
        select(Venue),
        page=page,
        page_size=page_size,
        where=where,
        order_by=[Venue.name, Venue.id]
    )


async def create_venue(db: AsyncSession, data: dict) -> Venue:
    venue = Venue(**data)
    db.add(venue)
    return venue


async def update_venue(venue: Venue, data: dict) -> Venue:
    for key, value in data.items():
        setattr(venue, key, value)
    return venue


async def venue_has_concerts(db: AsyncSession, venue_id: int) -> bool:
    stmt = select(select(1).select_from(Concert).where(Concert.venue_id == venue_id).exists())
    return bool(await db.scalar(stmt))


async def delete_venue(db: AsyncSession, venue: Venue) -> None:
    await db.delete(venue)
