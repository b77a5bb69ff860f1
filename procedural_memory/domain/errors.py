"""
Typed domain errors for the procedural memory service.

Callers can distinguish a missing procedure from a bad review index or a
malformed input and map each to an appropriate response.
"""


class DomainError(Exception):
    """Base class for all domain-specific errors."""


# ---------------------------------------------------------------------------
# Lookup / state errors
# ---------------------------------------------------------------------------


class ProcedureNotFound(DomainError):
    """No procedure with the given ID is stored."""

    def __init__(self, procedure_id: str) -> None:
        self.procedure_id = procedure_id
        super().__init__(f"Procedure {procedure_id} not found")


class InvalidReviewIndex(DomainError):
    """Review index falls outside the procedure's schedule."""

    def __init__(self, procedure_id: str, review_index: int, schedule_length: int) -> None:
        self.procedure_id = procedure_id
        self.review_index = review_index
        self.schedule_length = schedule_length
        super().__init__(
            f"Review index {review_index} out of range for procedure "
            f"{procedure_id} (schedule has {schedule_length} reviews)"
        )


# ---------------------------------------------------------------------------
# Input validation errors
# ---------------------------------------------------------------------------


class ValidationError(DomainError):
    """Caller supplied malformed input."""


class InvalidAlgorithm(ValidationError):
    """Algorithm selector is not one of the known cadences."""

    def __init__(self, algorithm: str) -> None:
        self.algorithm = algorithm
        super().__init__(f"Unknown review algorithm: {algorithm!r}")


class InvalidDateFormat(ValidationError):
    """Date string is not a valid YYYY-MM-DD calendar date."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid date {value!r}; expected YYYY-MM-DD")


class InvalidProcedureInput(ValidationError):
    """Title or steps of a procedure are unusable."""
