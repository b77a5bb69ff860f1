"""StepClassifier port -- decides whether a sentence describes an action."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class StepClassifier(Protocol):
    """Classifies a sentence-like unit of text as a procedural step or not."""

    def is_actionable(self, text: str) -> bool: ...
