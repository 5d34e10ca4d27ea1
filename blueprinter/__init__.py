"""Blueprinter -- blueprint-driven code scaffolding."""

__version__ = "0.1.0"
