from boxoffice.core.pagination import PageDTO
from boxoffice.services import concert_service, checkin_service, report_service
from fastapi import APIRouter, status, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.database import get_db
from boxoffice.core.dependencies.auth import Actor, require_admin, require_staff
from boxoffice.domain.concerts.schemas import ConcertCreateDTO, ConcertUpdateDTO, ConcertDetailDTO, \
    ConcertListItemDTO, ConcertsQueryDTO
from boxoffice.domain.ticketing.schemas import CheckInRequestDTO, CheckInResultDTO, TicketStatusDTO
from boxoffice.domain.reports.schemas import ConcertSalesReportDTO
from typing import Annotated


router = APIRouter(prefix='/concerts', tags=['concerts'])
db_dependency = Annotated[AsyncSession, Depends(get_db)]


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=PageDTO[ConcertListItemDTO],
    dependencies=[Depends(require_staff)]
)
async def list_concerts(db: db_dependency, query: Annotated[ConcertsQueryDTO, Depends()]):
    return await concert_service.list_concerts(db, query)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ConcertDetailDTO,
    dependencies=[Depends(require_admin)]
)
async def create_concert(schema: ConcertCreateDTO, db: db_dependency, response: Response):
    concert = await concert_service.create_concert(db, schema)
    response.headers["Location"] = f"{router.prefix}/{concert.id}"
    return concert


@router.get(
    "/{concert_id}",
    status_code=status.HTTP_200_OK,
    response_model=ConcertDetailDTO,
    dependencies=[Depends(require_staff)]
)
async def get_concert(concert_id: int, db: db_dependency):
    return await concert_service.get_concert(db, concert_id)


@router.put(
    "/{concert_id}",
    status_code=status.HTTP_200_OK,
    response_model=ConcertDetailDTO,
    dependencies=[Depends(require_admin)]
)
async def update_concert(concert_id: int, schema: ConcertUpdateDTO, db: db_dependency):
    return await concert_service.update_concert(db, concert_id, schema)


@router.get(
    "/{concert_id}/report",
    status_code=status.HTTP_200_OK,
    response_model=ConcertSalesReportDTO,
    dependencies=[Depends(require_staff)]
)
async def get_sales_report(concert_id: int, db: db_dependency):
    return await report_service.concert_sales_report(db, concert_id)


@router.post(
    "/{concert_id}/check-ins",
    status_code=status.HTTP_201_CREATED,
    response_model=CheckInResultDTO
)
async def check_in(
        concert_id: int,
        schema: CheckInRequestDTO,
        db: db_dependency,
        actor: Annotated[Actor, Depends(require_staff)]
):
    return await checkin_service.check_in_ticket(db, concert_id, schema.ticket_id, actor, notes=schema.notes)


@router.get(
    "/{concert_id}/tickets/{ticket_id}",
    status_code=status.HTTP_200_OK,
    response_model=TicketStatusDTO,
    dependencies=[Depends(require_staff)]
)
async def get_ticket_status(concert_id: int, ticket_id: str, db: db_dependency):
    return await checkin_service.get_ticket_status(db, concert_id, ticket_id)
