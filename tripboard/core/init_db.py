from tripboard.core.database import engine, Base, SessionLocal
import tripboard.models  # noqa: F401  registers every table on Base.metadata
from tripboard.services.trips.category_service import seed_default_categories


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        await seed_default_categories(db)
