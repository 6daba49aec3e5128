from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from dotenv import load_dotenv
from app.core.config import get_settings
from app.models.base import Base

load_dotenv()

DATABASE_URL = get_settings().database_url
if not DATABASE_URL:
    raise ValueError("❌ DATABASE_URL is not set!")

engine = create_async_engine(DATABASE_URL, echo=False)

# expire_on_commit=False: read schemas are built after the commit
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db():
    async with async_session() as session:
        yield session


async def create_db_and_tables():
    import app.models  # registers the storefront tables

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_db_and_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
