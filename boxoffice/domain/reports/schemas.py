from pydantic import BaseModel, ConfigDict
from decimal import Decimal


class TicketTypeSalesDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra='forbid')

    ticket_type_id: int
    name: str
    price: Decimal
    is_active: bool
    initial: int
    sold: int
    remaining: int
    checked_in: int
    revenue: Decimal


class ConcertSalesReportDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    concert_id: int
    concert_name: str
    ticket_types: list[TicketTypeSalesDTO]
    total_initial: int
    total_sold: int
    total_remaining: int
    total_checked_in: int
    total_revenue: Decimal
    sold_percentage: float
