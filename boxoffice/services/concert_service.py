from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.pagination import PageDTO
from boxoffice.core.auditing import AuditSpan
from boxoffice.domain.concerts.models import Concert, TicketType
from boxoffice.domain.concerts.schemas import ConcertCreateDTO, ConcertUpdateDTO, ConcertDetailDTO, \
    ConcertListItemDTO, ConcertsQueryDTO, TicketTypeInputDTO, TicketTypeUpsertDTO, TicketTypeReadDTO
from boxoffice.domain.venues.models import Venue
from boxoffice.domain.concerts import crud
from boxoffice.services.venue_service import get_venue
from boxoffice.domain.exceptions import NotFound, InvalidInput, Unprocessable

_TICKET_TYPE_FIELDS = {"name", "price", "total_quantity"}


def _is_valid_row(row: TicketTypeInputDTO) -> bool:
    return bool(row.name) and row.price > 0 and row.total_quantity > 0


def _to_detail(concert: Concert, venue: Venue, ticket_types: list[TicketType]) -> ConcertDetailDTO:
    return ConcertDetailDTO(
        id=concert.id,
        name=concert.name,
        concert_date=concert.concert_date,
        venue_id=venue.id,
        venue_name=venue.name,
        venue_address=venue.address,
        image_url=concert.image_url,
        ticket_types=[TicketTypeReadDTO.model_validate(t) for t in ticket_types]
    )


async def require_concert(db: AsyncSession, concert_id: int) -> Concert:
    concert = await crud.get_concert_by_id(db, concert_id)
    if not concert:
        raise NotFound("Concert not found", ctx={"concert_id": concert_id})
    return concert


async def get_concert(db: AsyncSession, concert_id: int) -> ConcertDetailDTO:
    concert = await require_concert(db, concert_id)
    ticket_types = await crud.list_ticket_types(db, concert_id)
    return _to_detail(concert, concert.venue, ticket_types)


async def list_concerts(db: AsyncSession, query: ConcertsQueryDTO) -> PageDTO[ConcertListItemDTO]:
    date_from = datetime.now(timezone.utc) if query.upcoming_only else None
    rows, total = await crud.list_concerts(db, query.page, query.page_size, date_from=date_from, name=query.name)
    items = [ConcertListItemDTO.model_validate(row) for row in rows]
    return PageDTO(
        items=items,
        total=total,
        page=query.page,
        page_size=query.page_size
    )


async def create_concert(db: AsyncSession, schema: ConcertCreateDTO) -> ConcertDetailDTO:
    if not schema.ticket_types:
        raise InvalidInput("At least one ticket type is required")

    rows = [row.model_dump(include=_TICKET_TYPE_FIELDS) for row in schema.ticket_types if _is_valid_row(row)]
    if not rows:
        raise InvalidInput(
            "At least one valid ticket type is required",
            ctx={"submitted": len(schema.ticket_types)}
        )

    async with AuditSpan(
        scope="CONCERTS",
        action="CREATE",
        object_type="concert",
        meta={"venue_id": schema.venue_id, "ticket_types": len(rows)}
    ) as span:
        venue = await get_venue(db, schema.venue_id)
        data = schema.model_dump(exclude={"ticket_types"})
        concert = await crud.create_concert(db, data)
        await db.flush()
        span.object_id = concert.id
        span.concert_id = concert.id

        ticket_types = await crud.create_ticket_types(db, concert.id, rows)
        await db.flush()
        ticket_types.sort(key=lambda t: (-t.price, t.id))
        return _to_detail(concert, venue, ticket_types)


def _check_upsert_rows(rows: list[TicketTypeUpsertDTO]) -> None:
    seen: set[int] = set()
    for row in rows:
        if row.id is None:
            continue
        if row.id in seen:
            raise InvalidInput("Duplicate ticket type in request", ctx={"ticket_type_id": row.id})
        seen.add(row.id)
        if not row.name or row.price <= 0 or row.total_quantity < 0:
            raise InvalidInput("Ticket type needs a name, a price and a quantity", ctx={"ticket_type_id": row.id})


async def _merge_ticket_types(db: AsyncSession, concert_id: int, rows: list[TicketTypeUpsertDTO]) -> dict:
    """Updates rows carrying an id, inserts new valid rows, removes the rest.

    Types left out of the payload are deleted when nothing was sold and
    deactivated otherwise, so past purchases keep their ticket type.
    """
    _check_upsert_rows(rows)
    existing = {t.id: t for t in await crud.list_ticket_types(db, concert_id, active_only=False)}

    kept: set[int] = set()
    new_rows: list[dict] = []
    for row in rows:
        data = row.model_dump(include=_TICKET_TYPE_FIELDS)
        if row.id is None:
            if _is_valid_row(row):
                new_rows.append(data)
            continue
        ticket_type = existing.get(row.id)
        if ticket_type is None:
            raise Unprocessable(
                "Ticket type does not belong to this concert",
                ctx={"concert_id": concert_id, "ticket_type_id": row.id}
            )
        data["is_active"] = True
        await crud.update_ticket_type(ticket_type, data)
        kept.add(row.id)

    if not kept and not new_rows:
        raise InvalidInput("At least one valid ticket type is required", ctx={"concert_id": concert_id})

    dropped = {tid for tid, t in existing.items() if tid not in kept and t.is_active}
    sold = await crud.sold_ticket_type_ids(db, dropped)
    if sold:
        await crud.deactivate_ticket_types(db, sold)
    if dropped - sold:
        await crud.delete_ticket_types(db, dropped - sold)
    if new_rows:
        await crud.create_ticket_types(db, concert_id, new_rows)

    return {"updated": len(kept), "created": len(new_rows), "deactivated": len(sold), "deleted": len(dropped - sold)}


async def update_concert(db: AsyncSession, concert_id: int, schema: ConcertUpdateDTO) -> ConcertDetailDTO:
    fields = list(schema.model_dump(exclude_none=True).keys())
    async with AuditSpan(
        scope="CONCERTS",
        action="UPDATE",
        object_type="concert",
        object_id=concert_id,
        concert_id=concert_id,
        meta={"fields": fields}
    ) as span:
        concert = await require_concert(db, concert_id)
        data = schema.model_dump(exclude_none=True, exclude={"ticket_types"})
        venue = await get_venue(db, data.get("venue_id", concert.venue_id))
        await crud.update_concert(concert, data)

        if schema.ticket_types is not None:
            span.meta["ticket_types"] = await _merge_ticket_types(db, concert_id, schema.ticket_types)

        await db.flush()
        ticket_types = await crud.list_ticket_types(db, concert_id)
        return _to_detail(concert, venue, ticket_types)
