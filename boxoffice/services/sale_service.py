import logging
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.auditing import AuditSpan
from boxoffice.core.dependencies.auth import Actor
from boxoffice.domain.sales import crud
from boxoffice.domain.sales.models import Sale
from boxoffice.domain.sales.schemas import SaleCreateDTO, SaleLineItemDTO, SaleReceiptDTO, SaleReadDTO, \
    TicketPurchaseReadDTO, IssuedTicketDTO
from boxoffice.domain.concerts import crud as concert_crud
from boxoffice.services.concert_service import require_concert
from boxoffice.services.issuance_service import issue_tickets
from boxoffice.domain.exceptions import InvalidInput, NotFound, Unprocessable, SoldOut

logger = logging.getLogger("boxoffice.sales")

CENTS = Decimal("0.01")


def _usable_items(schema: SaleCreateDTO) -> list[SaleLineItemDTO]:
    if not schema.customer_name or not schema.ticket_purchases:
        raise InvalidInput("Please enter customer name and select at least one ticket type")

    items = [
        item for item in schema.ticket_purchases
        if item.quantity > 0 and item.ticket_type_id > 0
        and (item.price_per_ticket is None or item.price_per_ticket >= 0)
    ]
    if not items:
        raise InvalidInput("Please select at least one ticket with quantity greater than 0")

    seen: set[int] = set()
    for item in items:
        if item.ticket_type_id in seen:
            raise InvalidInput(
                "Each ticket type can only appear once per sale",
                ctx={"ticket_type_id": item.ticket_type_id}
            )
        seen.add(item.ticket_type_id)
    return items


async def record_sale(db: AsyncSession, schema: SaleCreateDTO, actor: Actor) -> SaleReceiptDTO:
    items = _usable_items(schema)

    async with AuditSpan(
        scope="SALES",
        action="RECORD",
        object_type="sale",
        concert_id=schema.concert_id,
        meta={"items": len(items), "quantity": sum(i.quantity for i in items)}
    ) as span:
        concert = await require_concert(db, schema.concert_id)
        requested = {item.ticket_type_id for item in items}
        ticket_types = {t.id: t for t in await concert_crud.get_active_ticket_types(db, concert.id, requested)}
        missing = requested - ticket_types.keys()
        if missing:
            raise Unprocessable(
                "Ticket type does not match concert",
                ctx={"concert_id": concert.id, "ticket_type_ids": sorted(missing)}
            )

        lines = []
        for item in items:
            ticket_type = ticket_types[item.ticket_type_id]
            if item.quantity > ticket_type.total_quantity:
                raise SoldOut(
                    "Not enough tickets left",
                    ctx={"ticket_type_id": ticket_type.id, "ticket_type": ticket_type.name,
                         "requested": item.quantity, "remaining": ticket_type.total_quantity}
                )
            price = item.price_per_ticket if item.price_per_ticket is not None else ticket_type.price
            lines.append((item, ticket_type, price))
        total = sum((item.quantity * price for item, _, price in lines), Decimal("0")).quantize(CENTS, ROUND_HALF_UP)

        sale = await crud.create_sale(db, {
            "concert_id": concert.id,
            "customer_name": schema.customer_name,
            "customer_email": schema.customer_email,
            "customer_phone": schema.customer_phone,
            "total_amount": total,
            "sold_by": actor.user_id
        })
        await db.flush()
        span.object_id = sale.id
        span.sale_id = sale.id

        tickets: list[IssuedTicketDTO] = []
        for item, ticket_type, price in lines:
            purchase = await crud.create_ticket_purchase(db, {
                "sale_id": sale.id,
                "ticket_type_id": ticket_type.id,
                "quantity": item.quantity,
                "price_per_ticket": price,
                "total_price": (item.quantity * price).quantize(CENTS, ROUND_HALF_UP)
            })
            await db.flush()
            tickets.extend(await issue_tickets(db, purchase, ticket_type.name))

            remaining = await concert_crud.decrement_inventory(db, ticket_type.id, item.quantity)
            if remaining is None:
                raise SoldOut(
                    "Not enough tickets left",
                    ctx={"ticket_type_id": ticket_type.id, "ticket_type": ticket_type.name,
                         "requested": item.quantity}
                )

        span.meta["tickets"] = len(tickets)

    logger.info("Sale recorded sale_id=%s concert_id=%s tickets=%s total=%s",
                sale.id, concert.id, len(tickets), total)
    return SaleReceiptDTO(
        success=True,
        message=f"Sale recorded successfully! Sale ID: {sale.id}, Total: ${total:.2f}",
        sale_id=sale.id,
        total_amount=total,
        tickets=tickets
    )


def _to_read(sale: Sale) -> SaleReadDTO:
    purchases = []
    for purchase in sale.purchases:
        type_name = purchase.ticket_type.name
        purchases.append(TicketPurchaseReadDTO(
            id=purchase.id,
            ticket_type_id=purchase.ticket_type_id,
            ticket_type_name=type_name,
            quantity=purchase.quantity,
            price_per_ticket=purchase.price_per_ticket,
            total_price=purchase.total_price,
            tickets=[
                IssuedTicketDTO(ticket_id=t.id, ticket_number=t.ticket_number,
                                ticket_type_name=type_name, purchase_id=purchase.id)
                for t in purchase.tickets
            ]
        ))
    return SaleReadDTO(
        id=sale.id,
        concert_id=sale.concert_id,
        customer_name=sale.customer_name,
        customer_email=sale.customer_email,
        customer_phone=sale.customer_phone,
        total_amount=sale.total_amount,
        sale_date=sale.sale_date,
        purchases=purchases
    )


async def get_sale(db: AsyncSession, sale_id: int) -> SaleReadDTO:
    sale = await crud.get_sale_by_id(db, sale_id)
    if not sale:
        raise NotFound("Sale not found", ctx={"sale_id": sale_id})
    return _to_read(sale)
