from fastapi import APIRouter, status, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.database import get_db
from boxoffice.core.dependencies.auth import require_staff
from boxoffice.domain.sales.schemas import IssuedTicketDTO
from boxoffice.services import issuance_service
from typing import Annotated


router = APIRouter(prefix='/purchases', tags=['purchases'])
db_dependency = Annotated[AsyncSession, Depends(get_db)]


@router.get(
    "/{purchase_id}/tickets",
    status_code=status.HTTP_200_OK,
    response_model=list[IssuedTicketDTO],
    dependencies=[Depends(require_staff)]
)
async def list_purchase_tickets(purchase_id: int, db: db_dependency):
    return await issuance_service.list_purchase_tickets(db, purchase_id)
