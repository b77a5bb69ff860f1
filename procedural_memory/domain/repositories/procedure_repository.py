"""ProcedureRepository protocol: defines procedure storage contract."""

from typing import List, Optional, Protocol, runtime_checkable

from ..models import Procedure


@runtime_checkable
class ProcedureRepository(Protocol):
    """Repository interface for Procedure access and persistence."""

    async def get(self, procedure_id: str) -> Optional[Procedure]:
        """Look up a procedure by its ID.

        Args:
            procedure_id: Opaque procedure identifier.

        Returns:
            The Procedure, or None if not found.
        """
        ...

    async def put(self, procedure: Procedure) -> None:
        """Insert or replace a procedure, keyed by its ID.

        Args:
            procedure: The Procedure to store.
        """
        ...

    async def list(self) -> List[Procedure]:
        """Return every stored procedure in a stable order.

        Returns:
            List of Procedure objects (may be empty).
        """
        ...
