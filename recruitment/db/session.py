"""
Database session and engine configuration.

This file sets up the async database connection using SQLAlchemy
(asyncpg in production, aiosqlite for local runs and tests).
"""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from recruitment.core.config import settings
from recruitment.errors import ConflictError


# Create the async database engine
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # When DEBUG=True, prints SQL queries to console
    future=True,
)

# Create a session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,  # Keeps data accessible after commit
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session.

    This is used by FastAPI to provide a database connection to the API endpoints.
    The session is automatically closed when the request is done.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def run_atomic(session: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """
    All-or-nothing unit of work on an existing session.

    Everything added or changed on the session inside the block (and any
    pending changes from before it) is committed together, or rolled back
    together when the block raises.
    """
    try:
        yield session
        await session.commit()
    except StaleDataError as exc:
        await session.rollback()
        raise ConflictError(
            "Record was modified concurrently, reload and retry",
            details={"reason": str(exc)},
        ) from exc
    except IntegrityError as exc:
        await session.rollback()
        raise ConflictError(
            "Record conflicts with an existing one",
            details={"constraint": str(exc.orig)},
        ) from exc
    except Exception:
        await session.rollback()
        raise
