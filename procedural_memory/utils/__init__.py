"""Utility modules for the procedural memory service."""
