import logging
import os
from datetime import date

import pytest

# Set test environment variables
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["LOG_TO_FILE"] = "false"
os.environ["STORAGE_BACKEND"] = "memory"


@pytest.fixture(autouse=True)
def _strip_file_handlers():
    """Remove file handlers from root logger so tests never write to logs/."""
    root = logging.getLogger()
    saved = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
    for h in saved:
        root.removeHandler(h)
    yield
    for h in list(root.handlers):
        if isinstance(h, logging.FileHandler):
            root.removeHandler(h)
    for h in saved:
        root.addHandler(h)


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Give every test a fresh container, event bus and config caches."""
    from procedural_memory.core.config import get_settings
    from procedural_memory.core.container import reset_container
    from procedural_memory.core.typed_config_loader import _clear_caches
    from procedural_memory.domain.events import reset_event_bus

    get_settings.cache_clear()
    _clear_caches()
    reset_container()
    reset_event_bus()
    yield
    get_settings.cache_clear()
    _clear_caches()
    reset_container()
    reset_event_bus()


@pytest.fixture
def catalog():
    from procedural_memory.core.typed_config_loader import BUILTIN_CATALOG

    return BUILTIN_CATALOG


@pytest.fixture
def repository():
    from procedural_memory.infrastructure.repositories import InMemoryProcedureRepository

    return InMemoryProcedureRepository()


@pytest.fixture
def procedure_service(repository, catalog):
    """ProcedureService over an in-memory store with a fixed clock."""
    from procedural_memory.services.procedure_service import ProcedureService

    return ProcedureService(
        repository=repository,
        catalog=catalog,
        clock=lambda: date(2024, 1, 1),
    )


@pytest.fixture
def tie_shoes_steps():
    return [
        {"order": 1, "description": "Cross the laces."},
        {"order": 2, "description": "Loop the right lace."},
        {"order": 3, "description": "Pull both loops tight."},
    ]


@pytest.fixture
def make_procedure(catalog):
    """Build a Procedure scheduled from ``start`` without touching storage."""
    from datetime import datetime, timezone

    from procedural_memory.domain.models import Algorithm, Procedure, ProcedureStep
    from procedural_memory.services.srs import materialize_schedule

    def _make(
        procedure_id="proc-1",
        title="Tie shoes",
        algorithm=Algorithm.MOTOR,
        start=date(2024, 1, 1),
        step_count=3,
    ):
        return Procedure(
            id=procedure_id,
            title=title,
            steps=[
                ProcedureStep(order=i, description=f"Step number {i}")
                for i in range(1, step_count + 1)
            ],
            algorithm=algorithm,
            created_at=datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc),
            review_schedule=materialize_schedule(start, algorithm, catalog),
        )

    return _make
