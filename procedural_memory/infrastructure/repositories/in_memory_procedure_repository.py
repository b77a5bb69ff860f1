"""In-process implementation of ProcedureRepository."""

import copy
import logging
from typing import Dict, List, Optional

from ...domain.models import Procedure

logger = logging.getLogger(__name__)


class InMemoryProcedureRepository:
    """Concrete ProcedureRepository backed by a dict.

    Procedures are copied on the way in and out, so a caller's edits only
    become visible to others once they ``put`` the record back.
    """

    def __init__(self) -> None:
        self._procedures: Dict[str, Procedure] = {}

    async def get(self, procedure_id: str) -> Optional[Procedure]:
        """Look up a procedure by ID."""
        procedure = self._procedures.get(procedure_id)
        return copy.deepcopy(procedure) if procedure is not None else None

    async def put(self, procedure: Procedure) -> None:
        """Insert or replace a procedure; insertion order is kept on replace."""
        self._procedures[procedure.id] = copy.deepcopy(procedure)

    async def list(self) -> List[Procedure]:
        """All procedures in insertion order."""
        return [copy.deepcopy(p) for p in self._procedures.values()]

    def __len__(self) -> int:
        return len(self._procedures)
