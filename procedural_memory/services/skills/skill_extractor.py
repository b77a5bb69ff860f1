"""
Skill Extractor
Turns free-form procedural text into an ordered list of refined steps.

Pipeline: sentence split -> classify -> (line fallback) -> refine -> dedupe.
Pure and stateless; never raises for text input.
"""

import logging
import re
from typing import List, Optional, Sequence

from ...domain.models import ProcedureStep
from ...domain.ports import StepClassifier
from .step_classifier import ACTION_VERBS, PatternStepClassifier

logger = logging.getLogger(__name__)

DEFAULT_REFINEMENT_PROMPT = """
Analyze the following extracted procedural steps and refine them to be:
1. Clear and actionable (start with action verbs)
2. Specific and detailed (avoid vague language)
3. Sequential and logical (proper order)
4. Concise but complete (remove redundancy)
5. Properly formatted (consistent style)

For each step, ensure it:
- Starts with an action verb (click, open, enter, etc.)
- Includes specific targets (button names, field labels, etc.)
- Contains necessary context or conditions
- Uses consistent terminology
- Is measurable/verifiable

Remove any:
- Duplicate or redundant steps
- Non-actionable commentary
- Steps that are too vague or general
- Incorrect sequencing

Return the refined steps in the same JSON format with improved descriptions.
"""

REFINEMENT_VERBS = ACTION_VERBS + ("go", "press", "choose", "fill")

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_VERB_ALTERNATION = "|".join(REFINEMENT_VERBS)
_LEADING_VERB = re.compile(rf"^(?:{_VERB_ALTERNATION})\b", re.IGNORECASE)
_EMBEDDED_VERB = re.compile(rf"\b(?:{_VERB_ALTERNATION})\b", re.IGNORECASE)
_FILLER_PREFIXES = [
    re.compile(
        r"^(?:you\s+should|you\s+need\s+to|you\s+must|make\s+sure\s+to|be\s+sure\s+to)\b\s*",
        re.IGNORECASE,
    ),
    re.compile(r"^step\s+\d+\s*[:.]?\s*", re.IGNORECASE),
    re.compile(r"^(?:next|then|after\s+that)\b,?\s*", re.IGNORECASE),
]
_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_TERMINAL_PUNCTUATION = (".", "!", "?")

MIN_FALLBACK_LINE_LENGTH = 10
MIN_REFINED_LENGTH = 5
OVERLAP_THRESHOLD = 0.7


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------


def split_sentences(content: str) -> List[str]:
    """Split on runs of . ! ? and drop blank pieces."""
    return [s.strip() for s in _SENTENCE_SPLIT.split(content) if s.strip()]


def strip_filler(text: str) -> str:
    """Remove leading filler phrases until none applies."""
    previous = None
    while previous != text:
        previous = text
        for pattern in _FILLER_PREFIXES:
            text = pattern.sub("", text, count=1)
    return text.strip()


def refine_description(description: str) -> str:
    """Rewrite a raw candidate into an imperative, punctuated step."""
    refined = strip_filler(description.strip())

    if not _LEADING_VERB.match(refined):
        matches = list(_EMBEDDED_VERB.finditer(refined))
        if matches:
            refined = refined[matches[-1].start():]

    refined = refined[:1].upper() + refined[1:]

    if not refined.endswith(_TERMINAL_PUNCTUATION):
        refined += "."
    return refined


def normalize(text: str) -> str:
    """Lowercase and strip everything but letters, digits and whitespace."""
    return _NON_ALNUM.sub("", text.lower()).strip()


def token_overlap(a: str, b: str) -> float:
    """Shared tokens over the size of the larger token set."""
    tokens_a = set(a.split())
    tokens_b = set(b.split())
    larger = max(len(tokens_a), len(tokens_b))
    if larger == 0:
        return 1.0
    return len(tokens_a & tokens_b) / larger


def is_redundant(
    description: str,
    kept: Sequence[ProcedureStep],
    threshold: float = OVERLAP_THRESHOLD,
) -> bool:
    """True when ``description`` repeats, contains or is contained by a kept step."""
    candidate = normalize(description)
    for step in kept:
        existing = normalize(step.description)
        if candidate == existing or candidate in existing or existing in candidate:
            return True
        if token_overlap(candidate, existing) >= threshold:
            return True
    return False


# ---------------------------------------------------------------------------
# Extractor
# ---------------------------------------------------------------------------


class SkillExtractor:
    """Heuristic extraction of procedure steps from text.

    The classifier is injected so a different step detector can replace the
    regex matcher without touching the pipeline.
    """

    def __init__(
        self,
        classifier: Optional[StepClassifier] = None,
        overlap_threshold: float = OVERLAP_THRESHOLD,
    ) -> None:
        self.classifier = classifier or PatternStepClassifier()
        self.overlap_threshold = overlap_threshold

    def extract(
        self, content: str, refinement_prompt: Optional[str] = None
    ) -> List[ProcedureStep]:
        """Extract ordered steps from ``content``.

        Args:
            content: Free text (chat transcript, notes, instructions).
            refinement_prompt: Instruction for a future model-backed refiner.
                Accepted and passed along; the heuristic refiner ignores it.

        Returns:
            Steps numbered 1..N. Empty only when the text holds nothing usable.
        """
        if not content or not content.strip():
            return []

        candidates = self.find_candidates(content)
        if not candidates:
            logger.debug("No candidate steps found in %d chars of text", len(content))
            return []

        if refinement_prompt:
            logger.debug("Custom refinement prompt supplied (%d chars)", len(refinement_prompt))
        prompt = refinement_prompt or DEFAULT_REFINEMENT_PROMPT
        return self.refine(candidates, prompt)

    def find_candidates(self, content: str) -> List[ProcedureStep]:
        """Actionable sentences, or long-enough lines when none match."""
        sentences = [s for s in split_sentences(content) if self.classifier.is_actionable(s)]
        if sentences:
            return _numbered(sentences)

        lines = [
            line.strip()
            for line in content.split("\n")
            if len(line.strip()) > MIN_FALLBACK_LINE_LENGTH
        ]
        if lines:
            logger.debug("No actionable sentences; using %d fallback lines", len(lines))
        return _numbered(lines)

    def refine(
        self, steps: List[ProcedureStep], refinement_prompt: str = DEFAULT_REFINEMENT_PROMPT
    ) -> List[ProcedureStep]:
        """Rewrite and deduplicate steps.

        Falls back to the unrefined input when nothing survives, so a
        non-empty input never becomes an empty result.
        """
        refined: List[ProcedureStep] = []
        for step in steps:
            description = refine_description(step.description)
            if len(description) <= MIN_REFINED_LENGTH:
                continue
            if is_redundant(description, refined, self.overlap_threshold):
                continue
            refined.append(ProcedureStep(order=len(refined) + 1, description=description))

        if not refined:
            logger.debug("Refinement removed all %d steps; keeping originals", len(steps))
            return steps

        logger.debug("Refined %d candidate steps into %d", len(steps), len(refined))
        return refined


def _numbered(descriptions: List[str]) -> List[ProcedureStep]:
    return [
        ProcedureStep(order=i, description=text)
        for i, text in enumerate(descriptions, start=1)
    ]


_default_extractor: Optional[SkillExtractor] = None


def extract_steps(content: str, refinement_prompt: Optional[str] = None) -> List[ProcedureStep]:
    """Module-level shortcut using the default pattern classifier."""
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = SkillExtractor()
    return _default_extractor.extract(content, refinement_prompt)
