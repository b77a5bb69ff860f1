"""Procedural memory: extract steps from free text and schedule their review."""
