from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, cast

from minibank.config import Config
from minibank.core.db import Database

if TYPE_CHECKING:
    from minibank.core.modules.access.service import AccessService
    from minibank.core.modules.account.service import AccountService
    from minibank.core.modules.session.service import SessionService
    from minibank.core.modules.user.service import UserService


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: Database, config: Config) -> None:
        self.database = database
        self.config = config
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    user: UserService
    session: SessionService
    access: AccessService
    account: AccountService

    def __init__(self, database: Database, config: Config) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []

        # Service configuration: (attribute_name, module_path, class_name)
        # Order matters for startup - users table must exist before accounts reference it
        service_configs = [
            ("user", "minibank.core.modules.user.service", "UserService"),
            ("session", "minibank.core.modules.session.service", "SessionService"),
            ("access", "minibank.core.modules.access.service", "AccessService"),
            ("account", "minibank.core.modules.account.service", "AccountService"),
        ]

        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(database, config)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in reversed(self._services):
            await service.on_stop()


class Core:
    """Container providing config, database, and all service instances."""

    config: Config
    database: Database
    services: Services

    def __init__(self, config: Config, database: Database | None = None) -> None:
        """Initialize core with config, the database pool, and auto-register services."""
        self.config = config
        self.database = database if database is not None else Database.from_config(config)
        self.services = Services(self.database, config)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        """Connect to the database, then start all services."""
        await self.database.connect()
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close the connection pool on shutdown."""
        await self.services.stop_all()
        await self.database.close()
