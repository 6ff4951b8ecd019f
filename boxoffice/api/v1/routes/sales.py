from fastapi import APIRouter, status, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.database import get_db
from boxoffice.core.dependencies.auth import Actor, require_admin
from boxoffice.domain.sales.schemas import SaleCreateDTO, SaleReceiptDTO, SaleReadDTO
from boxoffice.services import sale_service
from typing import Annotated


router = APIRouter(prefix='/sales', tags=['sales'])
db_dependency = Annotated[AsyncSession, Depends(get_db)]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=SaleReceiptDTO
)
async def record_sale(
        schema: SaleCreateDTO,
        db: db_dependency,
        response: Response,
        actor: Annotated[Actor, Depends(require_admin)]
):
    receipt = await sale_service.record_sale(db, schema, actor)
    response.headers["Location"] = f"{router.prefix}/{receipt.sale_id}"
    return receipt


@router.get(
    "/{sale_id}",
    status_code=status.HTTP_200_OK,
    response_model=SaleReadDTO,
    dependencies=[Depends(require_admin)]
)
async def get_sale(sale_id: int, db: db_dependency):
    return await sale_service.get_sale(db, sale_id)
