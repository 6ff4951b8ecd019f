from pydantic import BaseModel, Field, ConfigDict, field_validator
from datetime import datetime
from decimal import Decimal
from boxoffice.core.utils.text_utils import strip_text


class CheckInRequestDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    ticket_id: str = Field(max_length=64)
    notes: str | None = Field(default=None, max_length=500)

    _strip_notes = field_validator("notes", mode='before')(strip_text)


class TicketInfoDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra='forbid')

    ticket_id: str
    ticket_number: int
    purchase_id: int
    sale_id: int
    customer_name: str
    ticket_type_name: str
    quantity: int
    price_per_ticket: Decimal
    total_price: Decimal
    checked_in_count: int
    checked_in_at: datetime


class CheckInResultDTO(BaseModel):
    success: bool = True
    message: str
    ticket_info: TicketInfoDTO


class TicketStatusDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    ticket_id: str
    ticket_number: int
    concert_id: int
    customer_name: str
    ticket_type_name: str
    checked_in: bool
    checked_in_at: datetime | None = None


class TicketSearchQueryDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1, le=200)
    customer_name: str | None = Field(default=None, max_length=200)
    concert_id: int | None = Field(default=None, gt=0)

    _strip_name = field_validator("customer_name", mode='before')(strip_text)


class TicketSearchItemDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    ticket_id: str
    ticket_number: int
    ticket_type_name: str
    purchase_id: int
    sale_id: int
    customer_name: str
    concert_id: int
    concert_name: str
    concert_date: datetime
    venue_name: str
    checked_in: bool
    checked_in_at: datetime | None = None
