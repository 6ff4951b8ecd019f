import uuid
from datetime import datetime, timezone
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.domain.auth.models import AuthSession


async def create_session(
        db: AsyncSession,
        user_id: int,
        expires_at: datetime,
        ip: str | None,
        user_agent: str | None
) -> AuthSession:
    session = AuthSession(
        user_id=user_id,
        created_at=datetime.now(timezone.utc),
        expires_at=expires_at,
        ip=ip,
        user_agent=user_agent
    )
    db.add(session)
    await db.flush()
    return session


async def get_active_session(db: AsyncSession, session_id: uuid.UUID, user_id: int) -> AuthSession | None:
    now = datetime.now(timezone.utc)
    stmt = (
        select(AuthSession)
        .where(
            AuthSession.id == session_id,
            AuthSession.user_id == user_id,
            AuthSession.expires_at > now,
            AuthSession.revoked_at.is_(None)
        )
    )
    result = await db.execute(stmt)
    return result.scalars().first()


async def revoke_session(db: AsyncSession, session_id: uuid.UUID) -> None:
    await db.execute(
        update(AuthSession)
        .where(AuthSession.id == session_id, AuthSession.revoked_at.is_(None))
        .values(revoked_at=datetime.now(timezone.utc))
    )
