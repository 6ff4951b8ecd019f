from fastapi import APIRouter, status, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.database import get_db
from boxoffice.core.dependencies.auth import require_staff
from boxoffice.domain.concerts.schemas import TicketTypeReadDTO
from boxoffice.domain.exceptions import InvalidInput
from boxoffice.services import ticket_type_service
from typing import Annotated


router = APIRouter(prefix='/api/ticket-types', tags=['ticket-types'])
db_dependency = Annotated[AsyncSession, Depends(get_db)]


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=list[TicketTypeReadDTO],
    dependencies=[Depends(require_staff)]
)
async def list_ticket_types(db: db_dependency, concert_id: Annotated[str | None, Query(alias="concertId")] = None):
    if not concert_id or not concert_id.isdigit() or int(concert_id) <= 0:
        raise InvalidInput("Concert ID is required")
    return await ticket_type_service.list_concert_ticket_types(db, int(concert_id))
