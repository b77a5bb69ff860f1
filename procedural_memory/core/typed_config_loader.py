"""
Typed config loader: parses YAML into typed domain objects.

Reads the review cadence tables and returns an immutable Pydantic model.
A cached singleton accessor (`get_algorithm_catalog`) is provided for
production use.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from ..domain.models import Algorithm
from .typed_config import AlgorithmCatalog, AlgorithmStep, AlgorithmTemplate

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_ALGORITHMS_PATH = PROJECT_ROOT / "config" / "review_algorithms.yaml"

# ---------------------------------------------------------------------------
# Built-in cadence tables
# ---------------------------------------------------------------------------

_MOTOR_TABLE: List[Tuple[int, str]] = [
    (1, "Day 1: Initial practice"),
    (2, "Day 2: Early consolidation"),
    (3, "Day 3: Early consolidation"),
    (4, "Day 4: Early consolidation"),
    (5, "Day 5: Early consolidation"),
    (7, "Day 7: Skill stabilization"),
    (9, "Day 9: Skill stabilization"),
    (11, "Day 11: Skill stabilization"),
    (14, "Day 14: Skill stabilization"),
    (17, "Day 17: Automaticity building"),
    (21, "Day 21: Automaticity building"),
    (25, "Day 25: Automaticity building"),
    (30, "Day 30: Automaticity building"),
    (37, "Day 37: Long-term retention"),
    (45, "Day 45: Long-term retention"),
    (60, "Day 60: Long-term retention"),
    (75, "Day 75: Long-term retention"),
    (90, "Day 90: Mastery check"),
]

_COGNITIVE_TABLE: List[Tuple[int, str]] = [
    (1, "Day 1: Initial learning"),
    (3, "Day 3: Active recall"),
    (6, "Day 6: Active recall"),
    (10, "Day 10: Active recall"),
    (15, "Day 15: Spaced retrieval"),
    (21, "Day 21: Spaced retrieval"),
    (28, "Day 28: Spaced retrieval"),
    (36, "Day 36: Spaced retrieval"),
    (45, "Day 45: Consolidation"),
    (56, "Day 56: Consolidation"),
    (70, "Day 70: Consolidation"),
    (85, "Day 85: Consolidation"),
    (100, "Day 100: Consolidation"),
    (120, "Day 120: Long-term retention"),
    (140, "Day 140: Long-term retention"),
    (160, "Day 160: Long-term retention"),
    (180, "Day 180: Long-term retention"),
    (210, "Day 210: Mastery check"),
]


def _template(algorithm: Algorithm, description: str, table: List[Tuple[int, str]]) -> AlgorithmTemplate:
    return AlgorithmTemplate(
        algorithm=algorithm,
        description=description,
        steps=[AlgorithmStep(day_offset=day, label=label) for day, label in table],
    )


BUILTIN_CATALOG = AlgorithmCatalog(
    templates={
        Algorithm.MOTOR: _template(
            Algorithm.MOTOR,
            "Dense early practice for physical and hands-on skills",
            _MOTOR_TABLE,
        ),
        Algorithm.COGNITIVE: _template(
            Algorithm.COGNITIVE,
            "Expanding intervals for conceptual and mental procedures",
            _COGNITIVE_TABLE,
        ),
    }
)

# ---------------------------------------------------------------------------
# Raw YAML loading helper
# ---------------------------------------------------------------------------


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Config file not found: %s", path)
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.error("Expected a mapping at the top of %s", path)
        return {}
    return data


# ---------------------------------------------------------------------------
# Algorithm catalog
# ---------------------------------------------------------------------------


def load_algorithm_catalog(path: Optional[Path] = None) -> AlgorithmCatalog:
    """Parse review_algorithms.yaml into an AlgorithmCatalog.

    Falls back to the built-in tables when the file is missing, empty or
    fails validation, so the service always starts with both cadences.
    """
    if path is None:
        path = DEFAULT_ALGORITHMS_PATH

    raw = _load_yaml(path)
    algorithms = raw.get("algorithms")
    if not isinstance(algorithms, dict) or not algorithms:
        return BUILTIN_CATALOG

    try:
        templates: Dict[Algorithm, AlgorithmTemplate] = {}
        for key, data in algorithms.items():
            if not isinstance(data, dict):
                logger.warning("Skipping algorithm '%s': expected a mapping", key)
                continue
            algorithm = Algorithm(key)
            steps = [
                AlgorithmStep(day_offset=row["day"], label=row["label"])
                for row in data.get("reviews", [])
            ]
            templates[algorithm] = AlgorithmTemplate(
                algorithm=algorithm,
                description=data.get("description", ""),
                steps=steps,
            )
        return AlgorithmCatalog(templates=templates)
    except (ValueError, KeyError, TypeError, ValidationError) as e:
        logger.error("Invalid algorithm config in %s, using built-in tables: %s", path, e)
        return BUILTIN_CATALOG


# ---------------------------------------------------------------------------
# Cached singleton
# ---------------------------------------------------------------------------

_algorithm_catalog: Optional[AlgorithmCatalog] = None


def get_algorithm_catalog() -> AlgorithmCatalog:
    global _algorithm_catalog
    if _algorithm_catalog is None:
        from .config import get_settings

        configured = get_settings().algorithms_path
        _algorithm_catalog = load_algorithm_catalog(
            Path(configured).expanduser() if configured else None
        )
    return _algorithm_catalog


def _clear_caches() -> None:
    """Clear the cached catalog (for testing)."""
    global _algorithm_catalog
    _algorithm_catalog = None
