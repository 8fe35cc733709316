from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase

from blog.config import settings
from blog.middleware import install_query_counter

# Module-level engine variable allows tests to override with a test engine.
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

install_query_counter(engine)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def get_db():
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def atomic(db: AsyncSession):
    """
    Group several statements into one unit of work.

    Inside a request the session already carries the transaction opened by
    ``get_db``; the block then only flushes, and any exception propagates so
    the outer transaction rolls everything back.  A session with no open
    transaction gets its own ``BEGIN``/``COMMIT`` around the block.
    """
    if db.in_transaction():
        yield db
        await db.flush()
    else:
        async with db.begin():
            yield db
