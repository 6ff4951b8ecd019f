import uuid
from typing import Annotated, NamedTuple
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.database import get_db
from boxoffice.core.config import SECRET_KEY, ALGORITHM, JWT_ISSUER, JWT_AUDIENCE
from boxoffice.core.ctx import AUTH_USER_ID_CTX, AUTH_ROLE_CTX
from boxoffice.domain.auth.crud import get_active_session
from boxoffice.domain.auth.schemas import TokenPayload
from boxoffice.domain.users.crud import get_active_user_with_profile
from boxoffice.domain.users.models import ProfileRole
from boxoffice.domain.exceptions import Unauthorized, Forbidden


oauth2_bearer = OAuth2PasswordBearer(tokenUrl="/auth/login")


class Actor(NamedTuple):
    user_id: int
    role: ProfileRole
    session_id: uuid.UUID


async def get_token_payload(token: Annotated[str, Depends(oauth2_bearer)]) -> TokenPayload:
    try:
        raw_payload = jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[ALGORITHM],
            issuer=JWT_ISSUER,
            audience=JWT_AUDIENCE,
            options={"verify_aud": True, "leeway": 5}
        )
        if raw_payload.get("typ") != "access":
            raise Unauthorized("Invalid token type", ctx={"reason": "invalid_type"})
        return TokenPayload.model_validate(raw_payload)
    except (JWTError, ValidationError):
        raise Unauthorized("Invalid authentication credentials", ctx={"reason": "invalid_token"})


def require_roles(*allowed_roles: ProfileRole):
    allowed = set(allowed_roles)

    async def _inner(payload: Annotated[TokenPayload, Depends(get_token_payload)],
                     db: Annotated[AsyncSession, Depends(get_db)]) -> Actor:
        try:
            user_id = int(payload.sub)
            session_id = uuid.UUID(payload.sid)
        except ValueError:
            raise Unauthorized("Invalid authentication credentials", ctx={"reason": "invalid_token"})

        session = await get_active_session(db, session_id, user_id)
        if not session:
            raise Unauthorized("Session expired or revoked", ctx={"sid": payload.sid})

        user = await get_active_user_with_profile(db, user_id)
        if not user or not user.profile:
            raise Unauthorized("User not found", ctx={"user_id": payload.sub})

        role = user.profile.role
        AUTH_USER_ID_CTX.set(user.id)
        AUTH_ROLE_CTX.set(role.value)

        if allowed and role not in allowed:
            raise Forbidden("Permission denied", ctx={"required": [r.value for r in allowed_roles], "role": role.value})
        return Actor(user_id=user.id, role=role, session_id=session_id)
    return _inner


require_admin = require_roles(ProfileRole.ADMIN)
require_staff = require_roles(ProfileRole.ADMIN, ProfileRole.STAFF)
