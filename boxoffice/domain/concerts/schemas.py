from pydantic import BaseModel, Field, ConfigDict, field_validator
from datetime import datetime
from decimal import Decimal
from boxoffice.core.utils.text_utils import strip_text


class TicketTypeInputDTO(BaseModel):
    """Ticket type row as typed into the concert form; blank rows are dropped by the service."""
    model_config = ConfigDict(extra='forbid')

    name: str | None = Field(default=None, max_length=100)
    price: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    total_quantity: int = Field(default=0)

    _strip_name = field_validator("name", mode='before')(strip_text)


class TicketTypeUpsertDTO(TicketTypeInputDTO):
    id: int | None = Field(default=None, gt=0)


class TicketTypeReadDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra='forbid')

    id: int
    concert_id: int
    name: str
    price: Decimal
    total_quantity: int
    is_active: bool


class ConcertCreateDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    name: str = Field(min_length=1, max_length=200)
    concert_date: datetime
    venue_id: int = Field(gt=0)
    image_url: str | None = Field(default=None, max_length=2048)
    ticket_types: list[TicketTypeInputDTO] = Field(default_factory=list)

    _strip_name = field_validator("name", mode='before')(strip_text)
    _strip_image = field_validator("image_url", mode='before')(strip_text)


class ConcertUpdateDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    name: str | None = Field(default=None, min_length=1, max_length=200)
    concert_date: datetime | None = None
    venue_id: int | None = Field(default=None, gt=0)
    image_url: str | None = Field(default=None, max_length=2048)
    ticket_types: list[TicketTypeUpsertDTO] | None = None

    _strip_name = field_validator("name", mode='before')(strip_text)
    _strip_image = field_validator("image_url", mode='before')(strip_text)


class ConcertListItemDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra='forbid')

    id: int
    name: str
    concert_date: datetime
    venue_id: int
    venue_name: str | None
    image_url: str | None


class ConcertDetailDTO(ConcertListItemDTO):
    venue_address: str | None = None
    ticket_types: list[TicketTypeReadDTO]


class ConcertsQueryDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=200)
    upcoming_only: bool = False
    name: str | None = None
