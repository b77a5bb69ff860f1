"""
Pattern-based step classifier.

A sentence is treated as a procedural step when it contains an action verb,
a sequencing word or an obligation phrase.
"""

import re
from typing import Iterable, List, Pattern

ACTION_VERBS = (
    "click", "select", "enter", "type", "navigate", "open", "create", "set",
    "configure", "add", "remove", "update", "install", "download", "upload",
    "save", "delete", "copy", "paste", "cut", "move", "drag", "drop", "scroll",
    "zoom", "rotate", "resize",
)

SEQUENCE_WORDS = (
    r"step\s+\d+", "first", "then", "next", "after", "finally", "begin",
    "start", "proceed", "continue",
)

OBLIGATION_PHRASES = (
    "should", "must", r"need\s+to", r"have\s+to", r"required\s+to",
    r"make\s+sure", "ensure", "verify", "check", "confirm",
)


def _word_pattern(alternatives: Iterable[str]) -> Pattern[str]:
    return re.compile(r"\b(?:" + "|".join(alternatives) + r")\b", re.IGNORECASE)


DEFAULT_ACTION_PATTERNS: List[Pattern[str]] = [
    _word_pattern(ACTION_VERBS),
    _word_pattern(SEQUENCE_WORDS),
    _word_pattern(OBLIGATION_PHRASES),
]


class PatternStepClassifier:
    """StepClassifier that matches text against a list of regexes."""

    def __init__(self, patterns: Iterable[Pattern[str]] = DEFAULT_ACTION_PATTERNS) -> None:
        self._patterns = list(patterns)

    def is_actionable(self, text: str) -> bool:
        return any(pattern.search(text) for pattern in self._patterns)
