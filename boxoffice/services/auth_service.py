from anyio import to_thread
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.auditing import AuditSpan
from boxoffice.core.config import ACCESS_TOKEN_EXPIRE_MINUTES, SESSION_TTL_HOURS
from boxoffice.core.dependencies.auth import Actor
from boxoffice.core.security import verify_password, create_access_token, new_expiry
from boxoffice.domain.auth.crud import create_session, revoke_session
from boxoffice.domain.auth.schemas import LoginResponse
from boxoffice.domain.users.crud import get_user_by_email, get_active_user_with_profile
from boxoffice.domain.users.models import User
from boxoffice.domain.users.schemas import MeDTO
from boxoffice.domain.exceptions import Unauthorized, Forbidden


async def authenticate_user(email: str, password: str, db: AsyncSession) -> User:
    user = await get_user_by_email(email.strip().lower(), db)
    ok = False
    if user:
        ok = await to_thread.run_sync(verify_password, password, user.password_hash)
    if not user or not ok:
        raise Unauthorized("Incorrect email or password", ctx={"reason": "bad_credentials"})
    if not user.is_active or not user.profile:
        raise Forbidden("Account is inactive", ctx={"reason": "inactive"})
    return user


async def sign_in(
        db: AsyncSession,
        email: str,
        password: str,
        *,
        ip: str | None = None,
        user_agent: str | None = None
) -> LoginResponse:
    async with AuditSpan(scope="AUTH", action="LOGIN", object_type="auth_session") as span:
        user = await authenticate_user(email, password, db)

        expires_at = new_expiry(SESSION_TTL_HOURS)
        session = await create_session(db, user.id, expires_at, ip, user_agent)
        access = create_access_token(subject=user.id, sid=str(session.id))

        span.object_id = str(session.id)
        span.meta.update({"sid": str(session.id), "user_id": user.id})

        return LoginResponse(
            access_token=access,
            token_type="bearer",
            expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            sid=str(session.id),
            role=user.profile.role
        )


async def sign_out(db: AsyncSession, actor: Actor) -> None:
    async with AuditSpan(
        scope="AUTH",
        action="LOGOUT",
        object_type="auth_session",
        object_id=str(actor.session_id)
    ):
        await revoke_session(db, actor.session_id)


async def get_user(db: AsyncSession, actor: Actor) -> MeDTO:
    user = await get_active_user_with_profile(db, actor.user_id)
    if not user:
        raise Unauthorized("User not found", ctx={"user_id": actor.user_id})
    return MeDTO(
        id=user.id,
        email=user.email,
        role=user.profile.role,
        display_name=user.profile.display_name
    )
