import logging
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.config import TICKET_CODE_MAX_ATTEMPTS
from boxoffice.domain.sales.models import TicketPurchase
from boxoffice.domain.sales.schemas import IssuedTicketDTO
from boxoffice.domain.ticketing import crud
from boxoffice.domain.ticketing.codes import generate_ticket_codes
from boxoffice.domain.sales.crud import get_purchase_by_id
from boxoffice.domain.exceptions import InternalError, NotFound

logger = logging.getLogger("boxoffice.issuance")


async def issue_tickets(db: AsyncSession, purchase: TicketPurchase, ticket_type_name: str) -> list[IssuedTicketDTO]:
    """Creates one ticket per unit of `purchase.quantity`, numbered from 1.

    Codes that collide with an existing ticket are redrawn for the affected
    numbers only; the primary key is the uniqueness guarantee.
    """
    pending = list(range(1, purchase.quantity + 1))
    issued: dict[int, str] = {}

    for attempt in range(1, TICKET_CODE_MAX_ATTEMPTS + 1):
        codes = dict(zip(pending, generate_ticket_codes(len(pending), exclude=set(issued.values()))))
        stored = await crud.insert_unique_tickets(db, purchase.id, codes)
        issued.update({n: codes[n] for n in stored})
        pending = [n for n in pending if n not in stored]
        if not pending:
            break
        logger.warning("Ticket code collision purchase_id=%s attempt=%s retrying=%s",
                       purchase.id, attempt, len(pending))
    else:
        raise InternalError(
            "Could not generate unique ticket identifiers",
            ctx={"purchase_id": purchase.id, "missing": len(pending)}
        )

    return [
        IssuedTicketDTO(ticket_id=issued[n], ticket_number=n, ticket_type_name=ticket_type_name, purchase_id=purchase.id)
        for n in sorted(issued)
    ]


async def list_purchase_tickets(db: AsyncSession, purchase_id: int) -> list[IssuedTicketDTO]:
    if not await get_purchase_by_id(db, purchase_id):
        raise NotFound("Purchase not found", ctx={"purchase_id": purchase_id})
    rows = await crud.list_purchase_tickets(db, purchase_id)
    return [IssuedTicketDTO.model_validate(row) for row in rows]
