from .procedure_repository import ProcedureRepository

__all__ = ["ProcedureRepository"]
