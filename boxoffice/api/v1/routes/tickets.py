from fastapi import APIRouter, status, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.database import get_db
from boxoffice.core.dependencies.auth import require_staff
from boxoffice.core.pagination import PageDTO
from boxoffice.domain.ticketing.schemas import TicketSearchQueryDTO, TicketSearchItemDTO
from boxoffice.services import tickets_service
from typing import Annotated


router = APIRouter(prefix='/tickets', tags=['tickets'])
db_dependency = Annotated[AsyncSession, Depends(get_db)]


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=PageDTO[TicketSearchItemDTO],
    dependencies=[Depends(require_staff)]
)
async def search_tickets(db: db_dependency, query: Annotated[TicketSearchQueryDTO, Depends()]):
    return await tickets_service.search_tickets(db, query)
