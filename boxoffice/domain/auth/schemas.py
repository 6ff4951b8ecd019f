from pydantic import BaseModel, ConfigDict, Field
from typing import Literal
from boxoffice.domain.users.models import ProfileRole


class Token(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    access_token: str
    token_type: Literal["bearer"] = "bearer"
    expires_in: int = Field(description='Expiration time in seconds')


class TokenPayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sub: str
    iat: int
    nbf: int
    exp: int
    sid: str
    jti: str | None = None
    typ: Literal["access"] | None = None
    iss: str | None = None
    aud: str | list[str] | None = None


class LoginResponse(Token):
    sid: str
    role: ProfileRole
