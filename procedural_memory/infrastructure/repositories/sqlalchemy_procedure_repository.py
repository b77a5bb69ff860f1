"""SQLAlchemy implementation of ProcedureRepository."""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...domain.models import Procedure
from ...models.procedure import ProcedureRecord

logger = logging.getLogger(__name__)


class SqlAlchemyProcedureRepository:
    """Concrete ProcedureRepository backed by SQLAlchemy async sessions.

    Each call opens its own short-lived session from the factory.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, procedure_id: str) -> Optional[Procedure]:
        """Look up a procedure by ID."""
        async with self._session_factory() as session:
            record = await session.get(ProcedureRecord, procedure_id)
            return record.to_domain() if record is not None else None

    async def put(self, procedure: Procedure) -> None:
        """Insert or replace a procedure row."""
        async with self._session_factory() as session:
            async with session.begin():
                record = await session.get(ProcedureRecord, procedure.id)
                if record is None:
                    session.add(ProcedureRecord.from_domain(procedure))
                else:
                    record.update_from_domain(procedure)
        logger.debug("Stored procedure %s", procedure.id)

    async def list(self) -> List[Procedure]:
        """All procedures, oldest first (ties broken by ID)."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(ProcedureRecord).order_by(
                    ProcedureRecord.created_at.asc(), ProcedureRecord.id.asc()
                )
            )
            return [record.to_domain() for record in result.scalars().all()]
