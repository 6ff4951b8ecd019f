import logging
from typing import Any
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.auditing import AuditSpan
from boxoffice.core.dependencies.auth import Actor
from boxoffice.domain.ticketing import crud
from boxoffice.domain.ticketing.codes import is_valid_ticket_code
from boxoffice.domain.ticketing.schemas import CheckInResultDTO, TicketInfoDTO, TicketStatusDTO
from boxoffice.domain.exceptions import InvalidTicketFormat, TicketNotFoundForConcert, AlreadyCheckedIn, \
    Unauthorized

logger = logging.getLogger("boxoffice.checkin")

_REJECTIONS = (InvalidTicketFormat, TicketNotFoundForConcert, AlreadyCheckedIn, Unauthorized)


def _normalize_ticket_id(ticket_id: str | None) -> str:
    value = (ticket_id or "").strip()
    if not is_valid_ticket_code(value):
        raise InvalidTicketFormat(
            "Invalid ticket ID format. Must be 12 characters (A-Z, 0-9)",
            ctx={"length": len(value)}
        )
    return value


async def _ticket_in_concert(db: AsyncSession, concert_id: int, ticket_id: str) -> Any:
    row = await crud.get_ticket_for_concert(db, concert_id, ticket_id)
    if not row:
        raise TicketNotFoundForConcert(
            "Ticket not found for this concert",
            ctx={"concert_id": concert_id, "ticket_id": ticket_id}
        )
    return row


async def check_in_ticket(
        db: AsyncSession,
        concert_id: int,
        ticket_id: str | None,
        actor: Actor | None,
        notes: str | None = None
) -> CheckInResultDTO:
    try:
        async with AuditSpan(
            scope="CHECKIN",
            action="CHECK_IN",
            object_type="ticket",
            concert_id=concert_id
        ) as span:
            ticket_id = _normalize_ticket_id(ticket_id)
            span.object_id = ticket_id
            span.ticket_id = ticket_id

            ticket = await _ticket_in_concert(db, concert_id, ticket_id)
            span.sale_id = ticket.sale_id

            if await crud.get_check_in_by_ticket(db, ticket_id):
                raise AlreadyCheckedIn("Ticket already checked in", ctx={"ticket_id": ticket_id})

            if actor is None:
                raise Unauthorized("Authentication required", ctx={"ticket_id": ticket_id})

            check_in = await crud.create_check_in(db, {
                "ticket_id": ticket_id,
                "checked_in_by": actor.user_id,
                "notes": notes or f"Checked in for {ticket.concert_name}"
            })
            try:
                await db.flush()
            except IntegrityError as e:
                raise AlreadyCheckedIn("Ticket already checked in", ctx={"ticket_id": ticket_id}) from e

            checked_in_count = await crud.count_check_ins(db, ticket_id)
    except _REJECTIONS as e:
        logger.info("Check-in rejected concert_id=%s kind=%s", concert_id, e.code)
        raise

    logger.info("Ticket checked in concert_id=%s ticket_id=%s by=%s", concert_id, ticket_id, actor.user_id)
    return CheckInResultDTO(
        success=True,
        message=f"Successfully checked in ticket {ticket_id}",
        ticket_info=TicketInfoDTO(
            ticket_id=ticket_id,
            ticket_number=ticket.ticket_number,
            purchase_id=ticket.purchase_id,
            sale_id=ticket.sale_id,
            customer_name=ticket.customer_name,
            ticket_type_name=ticket.ticket_type_name,
            quantity=ticket.quantity,
            price_per_ticket=ticket.price_per_ticket,
            total_price=ticket.total_price,
            checked_in_count=checked_in_count,
            checked_in_at=check_in.checked_in_at
        )
    )


async def get_ticket_status(db: AsyncSession, concert_id: int, ticket_id: str | None) -> TicketStatusDTO:
    ticket_id = _normalize_ticket_id(ticket_id)
    ticket = await _ticket_in_concert(db, concert_id, ticket_id)
    check_in = await crud.get_check_in_by_ticket(db, ticket_id)
    return TicketStatusDTO(
        ticket_id=ticket_id,
        ticket_number=ticket.ticket_number,
        concert_id=concert_id,
        customer_name=ticket.customer_name,
        ticket_type_name=ticket.ticket_type_name,
        checked_in=check_in is not None,
        checked_in_at=check_in.checked_in_at if check_in else None
    )
