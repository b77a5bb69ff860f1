"""Domain port protocols for decoupling services from infrastructure."""

from .step_classifier import StepClassifier

__all__ = ["StepClassifier"]
