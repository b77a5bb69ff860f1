"""
Skill extraction: free text to ordered procedure steps.
"""

from .skill_extractor import (
    DEFAULT_REFINEMENT_PROMPT,
    SkillExtractor,
    extract_steps,
    refine_description,
)
from .step_classifier import PatternStepClassifier

__all__ = [
    "DEFAULT_REFINEMENT_PROMPT",
    "PatternStepClassifier",
    "SkillExtractor",
    "extract_steps",
    "refine_description",
]
