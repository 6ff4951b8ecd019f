from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.pagination import PageDTO
from boxoffice.core.auditing import AuditSpan
from boxoffice.domain.venues.models import Venue
from boxoffice.domain.venues.schemas import VenueCreateDTO, VenueUpdateDTO, VenuesQueryDTO, VenueReadDTO
from boxoffice.domain.venues import crud
from boxoffice.domain.exceptions import NotFound, Conflict


async def get_venue(db: AsyncSession, venue_id: int) -> Venue:
    venue = await crud.get_venue_by_id(db, venue_id)
    if not venue:
        raise NotFound("Venue not found", ctx={"venue_id": venue_id})
    return venue


async def list_venues(db: AsyncSession, query: VenuesQueryDTO) -> PageDTO[VenueReadDTO]:
    venues, total = await crud.list_all_venues(db, query.page, query.page_size, name=query.name)
    items = [VenueReadDTO.model_validate(venue) for venue in venues]
    return PageDTO(
        items=items,
        total=total,
        page=query.page,
        page_size=query.page_size
    )


async def create_venue(db: AsyncSession, schema: VenueCreateDTO) -> Venue:
    async with AuditSpan(
        scope="VENUES",
        action="CREATE",
        object_type="venue",
        meta={"name": schema.name}
    ) as span:
        data = schema.model_dump(exclude_none=True)
        venue = await crud.create_venue(db, data)
        await db.flush()
        span.object_id = venue.id
        return venue


async def update_venue(db: AsyncSession, schema: VenueUpdateDTO, venue_id: int) -> Venue:
    fields = list(schema.model_dump(exclude_none=True).keys())
    async with AuditSpan(
        scope="VENUES",
        action="UPDATE",
        object_type="venue",
        object_id=venue_id,
        meta={"fields": fields}
    ):
        venue = await get_venue(db, venue_id)
        data = schema.model_dump(exclude_none=True)
        venue = await crud.update_venue(venue, data)
        await db.flush()
        return venue


async def delete_venue(db: AsyncSession, venue_id: int) -> None:
    async with AuditSpan(
        scope="VENUES",
        action="DELETE",
        object_type="venue",
        object_id=venue_id
    ):
        venue = await get_venue(db, venue_id)
        if await crud.venue_has_concerts(db, venue_id):
            raise Conflict("Cannot delete venue that is being used by concerts", ctx={"venue_id": venue_id})
        await crud.delete_venue(db, venue)
        try:
            await db.flush()
        except IntegrityError as e:
            raise Conflict("Cannot delete venue that is being used by concerts", ctx={"venue_id": venue_id}) from e
