import asyncio
from collections.abc import AsyncIterator, Iterable, Mapping
from contextlib import asynccontextmanager
from typing import Any, Self

import asyncpg
import structlog
from pydantic import BaseModel

from minibank.config import Config
from minibank.errors import DuplicateKeyError, StoreError, StoreUnavailableError

logger = structlog.get_logger(__name__)

# Driver failures that mean the database is unreachable rather than the query being wrong
UNAVAILABLE_ERRORS: tuple[type[BaseException], ...] = (
    OSError,
    TimeoutError,
    asyncpg.InterfaceError,
    asyncpg.PostgresConnectionError,
    asyncpg.CannotConnectNowError,
)


class DbModel(BaseModel):
    """Base for models loaded from database rows."""

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Self:
        return cls.model_validate(dict(row))

    @classmethod
    def list_rows(cls, rows: Iterable[Mapping[str, Any]]) -> list[Self]:
        return [cls.from_row(row) for row in rows]


class Database:
    """Pooled PostgreSQL access with explicit timeouts and typed errors.

    Every query goes through a connection borrowed from a bounded pool. Callers
    beyond ``max_size`` wait up to ``acquire_timeout`` for a free connection.
    Driver exceptions are translated into ``StoreError`` subclasses so nothing
    above this layer depends on asyncpg.
    """

    def __init__(
        self,
        dsn: str,
        *,
        min_size: int = 1,
        max_size: int = 10,
        acquire_timeout: float = 5.0,
        command_timeout: float = 10.0,
        connect_attempts: int = 10,
        connect_interval: float = 2.0,
    ) -> None:
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._acquire_timeout = acquire_timeout
        self._command_timeout = command_timeout
        self._connect_attempts = connect_attempts
        self._connect_interval = connect_interval
        self._pool: asyncpg.Pool | None = None

    @classmethod
    def from_config(cls, config: Config) -> "Database":
        return cls(
            config.database_url,
            min_size=config.db_pool_min_size,
            max_size=config.db_pool_max_size,
            acquire_timeout=config.db_acquire_timeout,
            command_timeout=config.db_command_timeout,
            connect_attempts=config.db_connect_attempts,
            connect_interval=config.db_connect_interval,
        )

    async def connect(self) -> None:
        """Create the pool, retrying at a fixed interval while the server is not up yet."""
        for attempt in range(1, self._connect_attempts + 1):
            pool: asyncpg.Pool | None = None
            try:
                pool = await asyncpg.create_pool(
                    self._dsn,
                    min_size=self._min_size,
                    max_size=self._max_size,
                    command_timeout=self._command_timeout,
                )
                await pool.fetchval("SELECT 1", timeout=self._command_timeout)
            except (*UNAVAILABLE_ERRORS, asyncpg.PostgresError) as e:
                logger.warning(
                    "database_connect_retry",
                    attempt=attempt,
                    max_attempts=self._connect_attempts,
                    error=type(e).__name__,
                )
                if pool is not None:
                    pool.terminate()
                if attempt == self._connect_attempts:
                    raise StoreUnavailableError("Database unavailable") from e
                await asyncio.sleep(self._connect_interval)
            else:
                self._pool = pool
                logger.info("database_connected", attempt=attempt, max_size=self._max_size)
                return

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[asyncpg.Connection]:
        """Borrow a pooled connection, translating driver errors."""
        if self._pool is None:
            raise StoreUnavailableError("Database is not connected")
        try:
            async with self._pool.acquire(timeout=self._acquire_timeout) as conn:
                yield conn
        except asyncpg.UniqueViolationError as e:
            raise DuplicateKeyError("Unique constraint violated") from e
        except UNAVAILABLE_ERRORS as e:
            raise StoreUnavailableError("Database unavailable") from e
        except asyncpg.PostgresError as e:
            raise StoreError("Database query failed") from e

    async def execute(self, query: str, *args: Any) -> str:
        async with self.connection() as conn:
            return await conn.execute(query, *args, timeout=self._command_timeout)

    async def fetch(self, query: str, *args: Any) -> list[asyncpg.Record]:
        async with self.connection() as conn:
            return await conn.fetch(query, *args, timeout=self._command_timeout)

    async def fetchrow(self, query: str, *args: Any) -> asyncpg.Record | None:
        async with self.connection() as conn:
            return await conn.fetchrow(query, *args, timeout=self._command_timeout)

    async def fetchval(self, query: str, *args: Any) -> Any:
        async with self.connection() as conn:
            return await conn.fetchval(query, *args, timeout=self._command_timeout)
