"""Prompt templates shipped under the repository's prompts/ directory."""

from lumo.prompts.loader import PromptEntry, PromptLoader

__all__ = ["PromptEntry", "PromptLoader"]
