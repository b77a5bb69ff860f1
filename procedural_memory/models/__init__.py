from .base import Base, TimestampMixin
from .procedure import ProcedureRecord

__all__ = [
    "Base",
    "TimestampMixin",
    "ProcedureRecord",
]
