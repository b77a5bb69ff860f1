"""
Service Registry - Central service configuration and registration.

Wires the procedure service and its collaborators into the container.
Services are registered lazily and instantiated on first access.

Usage:
    from procedural_memory.core.services import setup_services, get_procedure_service

    # At startup
    setup_services()

    # Anywhere afterwards
    service = await get_procedure_service()
"""

import logging

from .container import get_container

logger = logging.getLogger(__name__)


def setup_services() -> None:
    """
    Register all application services in the container.

    Call this once at application startup before using any services.
    """
    container = get_container()

    # ========================================================================
    # Configuration
    # ========================================================================

    def create_settings(c):
        from .config import get_settings

        return get_settings()

    container.register("settings", create_settings)

    def create_catalog(c):
        from .typed_config_loader import get_algorithm_catalog

        return get_algorithm_catalog()

    container.register("algorithm_catalog", create_catalog)

    # ========================================================================
    # Domain plumbing
    # ========================================================================

    def create_event_bus(c):
        from ..domain.events import get_event_bus

        return get_event_bus()

    container.register("event_bus", create_event_bus)

    def create_extractor(c):
        from ..services.skills import SkillExtractor

        return SkillExtractor()

    container.register("skill_extractor", create_extractor)

    # ========================================================================
    # Storage
    # ========================================================================

    async def create_repository(c):
        backend = c.get("settings").storage_backend
        if backend == "sqlite":
            from ..infrastructure.repositories import SqlAlchemyProcedureRepository
            from .database import init_database

            session_factory = await init_database(c.get("settings").database_url)
            return SqlAlchemyProcedureRepository(session_factory)

        from ..infrastructure.repositories import InMemoryProcedureRepository

        return InMemoryProcedureRepository()

    container.register_async("procedure_repository", create_repository)

    # ========================================================================
    # Application services
    # ========================================================================

    async def create_procedure_service(c):
        from ..services.procedure_service import ProcedureService

        return ProcedureService(
            repository=await c.get_async("procedure_repository"),
            catalog=c.get("algorithm_catalog"),
            extractor=c.get("skill_extractor"),
            event_bus=c.get("event_bus"),
        )

    container.register_async("procedure_service", create_procedure_service)

    logger.info("Services registered")


async def get_procedure_service():
    """Resolve the ProcedureService from the global container."""
    return await get_container().get_async("procedure_service")
