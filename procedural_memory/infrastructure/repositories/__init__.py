from .in_memory_procedure_repository import InMemoryProcedureRepository
from .sqlalchemy_procedure_repository import SqlAlchemyProcedureRepository

__all__ = [
    "InMemoryProcedureRepository",
    "SqlAlchemyProcedureRepository",
]
