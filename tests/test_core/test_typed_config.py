"""Tests for the typed review cadence models."""

import pytest
from pydantic import ValidationError

from procedural_memory.core.typed_config import AlgorithmCatalog, AlgorithmStep, AlgorithmTemplate
from procedural_memory.domain.models import Algorithm


def _template(algorithm, days):
    return AlgorithmTemplate(
        algorithm=algorithm,
        steps=[AlgorithmStep(day_offset=d, label=f"Day {d}") for d in days],
    )


class TestAlgorithmStep:
    def test_valid(self):
        step = AlgorithmStep(day_offset=1, label="Day 1")

        assert step.day_offset == 1

    def test_offset_must_be_positive(self):
        with pytest.raises(ValidationError):
            AlgorithmStep(day_offset=0, label="Day 0")

    def test_frozen(self):
        step = AlgorithmStep(day_offset=1, label="Day 1")

        with pytest.raises(ValidationError):
            step.day_offset = 2


class TestAlgorithmTemplate:
    def test_len(self):
        assert len(_template(Algorithm.MOTOR, [1, 2, 5])) == 3

    def test_rejects_empty(self):
        with pytest.raises(ValidationError):
            _template(Algorithm.MOTOR, [])

    @pytest.mark.parametrize("days", [[1, 3, 3], [1, 5, 4]])
    def test_rejects_non_increasing_offsets(self, days):
        with pytest.raises(ValidationError, match="strictly increasing"):
            _template(Algorithm.MOTOR, days)


class TestAlgorithmCatalog:
    def test_requires_every_algorithm(self):
        with pytest.raises(ValidationError, match="cognitive"):
            AlgorithmCatalog(templates={Algorithm.MOTOR: _template(Algorithm.MOTOR, [1])})

    def test_key_must_match_template(self):
        with pytest.raises(ValidationError):
            AlgorithmCatalog(
                templates={
                    Algorithm.MOTOR: _template(Algorithm.COGNITIVE, [1]),
                    Algorithm.COGNITIVE: _template(Algorithm.COGNITIVE, [1]),
                }
            )

    def test_lookup(self):
        catalog = AlgorithmCatalog(
            templates={
                Algorithm.MOTOR: _template(Algorithm.MOTOR, [1, 2]),
                Algorithm.COGNITIVE: _template(Algorithm.COGNITIVE, [1, 3]),
            }
        )

        assert [s.day_offset for s in catalog.get_template(Algorithm.COGNITIVE).steps] == [1, 3]
        assert catalog.available_algorithms() == ["motor", "cognitive"]

    def test_string_keys_are_coerced(self):
        catalog = AlgorithmCatalog(
            templates={
                "motor": _template(Algorithm.MOTOR, [1]),
                "cognitive": _template(Algorithm.COGNITIVE, [1]),
            }
        )

        assert Algorithm.MOTOR in catalog.templates
