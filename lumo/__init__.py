"""Lumo.AI: a local AI chat assistant with file analysis, voice and saved conversations."""

__version__ = "0.1.0"
