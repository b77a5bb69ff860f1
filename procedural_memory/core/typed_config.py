"""
Typed configuration domain objects.

Review cadence tables as Pydantic-validated, immutable config classes:
- AlgorithmStep      (one dayOffset/label row)
- AlgorithmTemplate  (ordered rows for one cadence)
- AlgorithmCatalog   (every cadence, keyed by Algorithm)
"""

import logging
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ..domain.models import Algorithm

logger = logging.getLogger(__name__)


class AlgorithmStep(BaseModel):
    """One review slot. Day 1 is the day the procedure is saved."""

    model_config = ConfigDict(frozen=True)

    day_offset: int
    label: str

    @field_validator("day_offset")
    @classmethod
    def offset_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("day_offset must be >= 1")
        return v


class AlgorithmTemplate(BaseModel):
    """Ordered review slots for a single cadence."""

    model_config = ConfigDict(frozen=True)

    algorithm: Algorithm
    description: str = ""
    steps: List[AlgorithmStep]

    @field_validator("steps")
    @classmethod
    def offsets_strictly_increasing(cls, v: List[AlgorithmStep]) -> List[AlgorithmStep]:
        if not v:
            raise ValueError("template must contain at least one review")
        for prev, cur in zip(v, v[1:]):
            if cur.day_offset <= prev.day_offset:
                raise ValueError(
                    f"day_offset values must be strictly increasing "
                    f"({prev.day_offset} then {cur.day_offset})"
                )
        return v

    def __len__(self) -> int:
        return len(self.steps)


class AlgorithmCatalog(BaseModel):
    """All review cadences. Every Algorithm member must have a template."""

    model_config = ConfigDict(frozen=True)

    templates: Dict[Algorithm, AlgorithmTemplate]

    @model_validator(mode="after")
    def covers_every_algorithm(self) -> "AlgorithmCatalog":
        missing = [a.value for a in Algorithm if a not in self.templates]
        if missing:
            raise ValueError(f"catalog is missing templates for: {', '.join(missing)}")
        for key, template in self.templates.items():
            if template.algorithm != key:
                raise ValueError(
                    f"template keyed {key.value!r} declares algorithm "
                    f"{template.algorithm.value!r}"
                )
        return self

    def get_template(self, algorithm: Algorithm) -> AlgorithmTemplate:
        return self.templates[algorithm]

    def available_algorithms(self) -> List[str]:
        return [a.value for a in self.templates]
