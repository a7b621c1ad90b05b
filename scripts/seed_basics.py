import asyncio
import logging
import os

from sqlalchemy import select

import app.database as database
from app.models.oj import OJ
from app.models.user import User
from app.services import club_records

DEFAULT_OJS = ["Codeforces", "AtCoder", "Nowcoder", "Vjudge", "Luogu"]

logger = logging.getLogger("seed")


async def main() -> None:
    """Create tables, seed the judges we pull submissions from and an admin account."""

    await database.init_models()
    async with database.SessionLocal() as session:
        known = set((await session.execute(select(OJ.oj_name))).scalars().all())
        session.add_all(OJ(oj_name=name) for name in DEFAULT_OJS if name not in known)
        await session.commit()

        admin = os.getenv("SEED_ADMIN_USERNAME")
        password = os.getenv("SEED_ADMIN_PASSWORD")
        if admin and password and await session.get(User, admin) is None:
            await club_records.add_user(
                session, username=admin, nickname=admin, password=password, is_admin=True
            )
            logger.info("Created admin %s", admin)
    logger.info("Seeded default online judges.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
