from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.domain.sales.models import Sale, TicketPurchase


async def create_sale(db: AsyncSession, data: dict) -> Sale:
    sale = Sale(**data)
    db.add(sale)
    return sale


async def create_ticket_purchase(db: AsyncSession, data: dict) -> TicketPurchase:
    purchase = TicketPurchase(**data)
    db.add(purchase)
    return purchase


async def get_sale_by_id(db: AsyncSession, sale_id: int) -> Sale | None:
    stmt = select(Sale).where(Sale.id == sale_id)
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_purchase_by_id(db: AsyncSession, purchase_id: int) -> TicketPurchase | None:
    stmt = select(TicketPurchase).where(TicketPurchase.id == purchase_id)
    result = await db.execute(stmt)
    return result.scalars().first()
