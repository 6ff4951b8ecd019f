from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy import select
from .models import User, Profile


async def get_user_by_email(email: str, db: AsyncSession) -> User | None:
    stmt = select(User).options(selectinload(User.profile)).where(User.email == email)
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_user_by_id(user_id: int, db: AsyncSession) -> User | None:
    stmt = select(User).options(selectinload(User.profile)).where(User.id == user_id)
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_active_user_with_profile(db: AsyncSession, user_id: int) -> User | None:
    stmt = (
        select(User)
        .join(Profile, Profile.user_id == User.id)
        .options(selectinload(User.profile))
        .where(User.id == user_id, User.is_active.is_(True))
    )
    result = await db.execute(stmt)
    return result.scalars().first()
