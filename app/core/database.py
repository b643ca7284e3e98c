"""
Async Database Manager for SQLite/PostgreSQL with SQLAlchemy
- Automatic PostgreSQL database creation if missing
- Table initialization from the registered models
- Per-employee write lock used by leave request creation
"""
import logging
from importlib import import_module
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
from sqlalchemy import event, text, update
import sqlalchemy
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
    AsyncEngine
)
import asyncpg
from app.core.config import Settings, settings
from app.models.base import Base
from app.models.employee import Employee

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def _is_missing_database(exc: BaseException) -> bool:
    """Walk the exception chain looking for asyncpg's unknown-database error."""
    while exc is not None:
        if isinstance(exc, asyncpg.exceptions.InvalidCatalogNameError):
            return True
        exc = getattr(exc, "orig", None) or exc.__cause__
    return False


class DatabaseSessionManager:
    """Manages async database sessions with auto-creation and setup."""

    def __init__(self, config: Settings = settings):
        self.config = config
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None

    async def init(self, database_url: Optional[str] = None):
        """Initialize database connection with auto-creation fallback"""
        db_url = database_url or self.config.DATABASE_URL
        try:
            self.engine = self._create_engine(db_url)

            try:
                async with self.engine.begin() as conn:
                    await self._setup_database(conn)
            except Exception as e:
                if not _is_missing_database(e):
                    raise
                if not await self._create_database(db_url):
                    raise
                async with self.engine.begin() as conn:
                    await self._setup_database(conn)

            self.session_factory = async_sessionmaker(
                bind=self.engine,
                expire_on_commit=False,
                autoflush=False
            )

        except Exception as e:
            logger.error(f"❌ Database initialization failed: {e}")
            raise

    def _create_engine(self, db_url: str) -> AsyncEngine:
        if db_url.startswith("sqlite"):
            engine = create_async_engine(
                db_url,
                echo=self.config.SQL_ECHO,
                connect_args={"timeout": self.config.SQLITE_BUSY_TIMEOUT_SECONDS},
            )
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
            return engine

        return create_async_engine(
            db_url,
            pool_size=self.config.DB_POOL_SIZE,
            max_overflow=self.config.DB_MAX_OVERFLOW,
            pool_timeout=30,
            pool_recycle=300,
            pool_pre_ping=True,
            echo=self.config.SQL_ECHO,
        )

    async def _setup_database(self, conn):
        """Initialize database schema"""
        await conn.execute(text("SELECT 1"))
        for model in self.config.DB_MODELS:
            import_module(model)

        logger.info(f"📝 Models registered: {list(Base.metadata.tables.keys())}")
        await conn.run_sync(Base.metadata.create_all)
        logger.info("✅ Tables created/verified")

    async def _create_database(self, db_url: str) -> bool:
        """Create the PostgreSQL database if it does not exist"""
        try:
            url = make_url(db_url)
            db_name = url.database

            # Connect to the default database (usually 'postgres')
            default_url = url.set(database="postgres")
            engine = create_async_engine(default_url, isolation_level="AUTOCOMMIT")
            async with engine.connect() as conn:
                await conn.execute(text(f'CREATE DATABASE "{db_name}"'))
            await engine.dispose()
            logger.info(f"✅ Database '{db_name}' created successfully.")
            return True
        except (asyncpg.exceptions.PostgresError, sqlalchemy.exc.SQLAlchemyError) as e:
            logger.error(f"❌ Failed to create database: {e}")
            return False

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Context manager for safe session handling"""
        if not self.session_factory:
            raise RuntimeError("DatabaseSessionManager not initialized")
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def close(self):
        """Cleanup connection pool"""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None


async def lock_employee_for_write(db: AsyncSession, employee_id: int) -> None:
    """Serialize writers for one employee until the current transaction ends.

    PostgreSQL takes a transaction-scoped advisory lock keyed by the employee
    id. SQLite has no row locks, so a no-op UPDATE is issued as the first
    statement of the transaction; it takes the database write lock and other
    writers wait on the busy timeout.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        await db.execute(
            text("SELECT pg_advisory_xact_lock(:key)"), {"key": employee_id}
        )
    else:
        await db.execute(
            update(Employee)
            .where(Employee.id == employee_id)
            .values(is_active=Employee.is_active, updated_at=Employee.updated_at)
            .execution_options(synchronize_session=False)
        )


# Initialize session manager
session_manager = DatabaseSessionManager()

async def aget_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for database sessions
    Usage:
    @router.get("/")
    async def endpoint(db: AsyncSession = Depends(aget_db)):
        ...
    """
    async with session_manager.get_session() as session:
        yield session
