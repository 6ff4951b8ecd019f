from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.domain.concerts.schemas import TicketTypeReadDTO
from boxoffice.domain.concerts import crud
from boxoffice.services.concert_service import require_concert


async def list_concert_ticket_types(db: AsyncSession, concert_id: int) -> list[TicketTypeReadDTO]:
    await require_concert(db, concert_id)
    ticket_types = await crud.list_ticket_types(db, concert_id)
    return [TicketTypeReadDTO.model_validate(t) for t in ticket_types]
