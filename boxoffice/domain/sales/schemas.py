from pydantic import BaseModel, Field, ConfigDict, EmailStr, field_validator
from datetime import datetime
from decimal import Decimal
from boxoffice.core.utils.text_utils import strip_text
from boxoffice.core.utils.validators import normalize_phone_or_none, blank_to_none

MAX_TICKETS_PER_LINE = 10000


class SaleLineItemDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    ticket_type_id: int
    quantity: int = Field(le=MAX_TICKETS_PER_LINE)
    price_per_ticket: Decimal | None = Field(default=None, max_digits=10, decimal_places=2)


class SaleCreateDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    concert_id: int = Field(gt=0)
    customer_name: str | None = Field(default=None, max_length=200)
    customer_email: EmailStr | None = None
    customer_phone: str | None = None
    ticket_purchases: list[SaleLineItemDTO] = Field(default_factory=list, max_length=50)

    _strip_name = field_validator("customer_name", mode='before')(strip_text)
    _blank_email = field_validator("customer_email", mode='before')(blank_to_none)
    _phone = field_validator("customer_phone", mode='before')(normalize_phone_or_none)


class IssuedTicketDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra='forbid')

    ticket_id: str
    ticket_number: int
    ticket_type_name: str
    purchase_id: int


class SaleReceiptDTO(BaseModel):
    success: bool = True
    message: str
    sale_id: int
    total_amount: Decimal
    tickets: list[IssuedTicketDTO]


class TicketPurchaseReadDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra='forbid')

    id: int
    ticket_type_id: int
    ticket_type_name: str
    quantity: int
    price_per_ticket: Decimal
    total_price: Decimal
    tickets: list[IssuedTicketDTO]


class SaleReadDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra='forbid')

    id: int
    concert_id: int
    customer_name: str
    customer_email: str | None
    customer_phone: str | None
    total_amount: Decimal
    sale_date: datetime
    purchases: list[TicketPurchaseReadDTO]
