from pydantic import BaseModel, ConfigDict, EmailStr
from boxoffice.domain.users.models import ProfileRole


class MeDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: EmailStr
    role: ProfileRole
    display_name: str | None = None
