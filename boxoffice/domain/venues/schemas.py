from pydantic import BaseModel, Field, ConfigDict, field_validator
from boxoffice.core.utils.text_utils import strip_text


class VenueCreateDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    name: str = Field(min_length=1, max_length=200)
    address: str | None = Field(default=None, max_length=500)
    capacity: int | None = Field(default=None, gt=0)

    _strip_name = field_validator("name", mode='before')(strip_text)
    _strip_address = field_validator("address", mode='before')(strip_text)


class VenueReadDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra='forbid')

    id: int
    name: str
    address: str | None
    capacity: int | None


class VenueUpdateDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    name: str | None = Field(default=None, min_length=1, max_length=200)
    address: str | None = Field(default=None, max_length=500)
    capacity: int | None = Field(default=None, gt=0)

    _strip_name = field_validator("name", mode='before')(strip_text)
    _strip_address = field_validator("address", mode='before')(strip_text)


class VenuesQueryDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=200)
    name: str | None = None
