from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, cast
from urllib.parse import urlparse

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from ministry.config import Config


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
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

    from ministry.core.modules.access.service import AccessService  # noqa: PLC0415
    from ministry.core.modules.audit.service import AuditService  # noqa: PLC0415
    from ministry.core.modules.auth.service import AuthService  # noqa: PLC0415
    from ministry.core.modules.mail.service import MailService  # noqa: PLC0415
    from ministry.core.modules.password_reset.service import PasswordResetService  # noqa: PLC0415
    from ministry.core.modules.session.service import SessionService  # noqa: PLC0415
    from ministry.core.modules.user.service import UserService  # noqa: PLC0415

    user: UserService
    session: SessionService
    access: AccessService
    mail: MailService
    auth: AuthService
    password_reset: PasswordResetService
    audit: AuditService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []
        self._database = database

        # Service configuration: (attribute_name, module_path, class_name)
        # Order matters for initialization - user must be first
        service_configs = [
            ("user", "ministry.core.modules.user.service", "UserService"),
            ("session", "ministry.core.modules.session.service", "SessionService"),
            ("access", "ministry.core.modules.access.service", "AccessService"),
            ("mail", "ministry.core.modules.mail.service", "MailService"),
            ("auth", "ministry.core.modules.auth.service", "AuthService"),
            ("password_reset", "ministry.core.modules.password_reset.service", "PasswordResetService"),
            ("audit", "ministry.core.modules.audit.service", "AuditService"),
        ]

        # Dynamically import and instantiate services
        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(database)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        """Start all services that have startup logic."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        """Stop services in reverse start order."""
        for service in reversed(self._services):
            await service.on_stop()


class Core:
    """Container providing config, database, and all service instances.

    A database can be injected (tests, embedding); otherwise a MongoDB client is
    created from `config.database_url` and closed on shutdown.
    """

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]] | None
    database: AsyncDatabase[dict[str, Any]]
    services: Services

    def __init__(self, config: Config, database: AsyncDatabase[dict[str, Any]] | None = None) -> None:
        """Initialize core with config, MongoDB, and auto-register services."""
        self.config = config
        if database is None:
            self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard", tz_aware=True)
            self.database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
        else:
            self.mongo_client = None
            self.database = database
        self.services = Services(self.database)
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
        """Start all services on application startup."""
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close the MongoDB connection we own."""
        await self.services.stop_all()
        if self.mongo_client is not None:
            await self.mongo_client.aclose()
