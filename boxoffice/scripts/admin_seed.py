import asyncio
import logging
from anyio import to_thread
from boxoffice.core.security import hash_password
from boxoffice.core.logging import configure_logging
from boxoffice.domain.users.crud import get_user_by_email
from boxoffice.domain.users.models import User, Profile, ProfileRole
from boxoffice.core.config import ADMIN_EMAIL, ADMIN_PASSWORD
from boxoffice.core.database import AsyncSessionLocal

logger = logging.getLogger("boxoffice.seed")


async def seed_admin_user(db) -> User | None:
    if not ADMIN_PASSWORD or not ADMIN_EMAIL:
        logger.warning("Missing ADMIN_EMAIL or admin_password - skipping seed")
        return None

    email = ADMIN_EMAIL.strip().lower()
    user = await get_user_by_email(email, db)

    if not user:
        user = User(
            email=email,
            password_hash=await to_thread.run_sync(hash_password, ADMIN_PASSWORD)
        )
        user.profile = Profile(role=ProfileRole.ADMIN, display_name="Admin")
        db.add(user)
    elif user.profile is None:
        user.profile = Profile(role=ProfileRole.ADMIN, display_name="Admin")
    else:
        user.profile.role = ProfileRole.ADMIN

    await db.flush()
    return user


async def main():
    configure_logging()
    async with AsyncSessionLocal() as db:
        user = await seed_admin_user(db)
        await db.commit()
        if user:
            logger.info("Admin OK: %s", user.email)


if __name__ == "__main__":
    asyncio.run(main())
