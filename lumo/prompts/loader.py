"""Prompt loading and rendering utilities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jinja2 import Environment, FileSystemLoader, TemplateNotFound


@dataclass(frozen=True)
class PromptEntry:
    """Loaded prompt content and metadata."""

    content: str
    metadata: dict[str, Any]


class FrontMatterLoader(FileSystemLoader):
    """Jinja2 loader that strips YAML front matter."""

    def get_source(self, environment: Environment, template: str):  # type: ignore[override]
        source, filename, uptodate = super().get_source(environment, template)
        if source.startswith("---"):
            parts = source.split("---", 2)
            if len(parts) == 3:
                source = parts[2].lstrip()
        return source, filename, uptodate


class PromptLoader:
    """Load and manage prompt templates."""

    def __init__(self, prompts_dir: str | Path = "prompts") -> None:
        root = Path(__file__).resolve().parents[2]
        path = Path(prompts_dir)
        self.prompts_dir = path if path.is_absolute() else root / path
        self.cache: dict[str, PromptEntry] = {}
        self._env = Environment(
            loader=FrontMatterLoader(str(self.prompts_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def load(self, prompt_path: str) -> str:
        """
        Load prompt from file.

        Args:
            prompt_path: Relative path (e.g., "personas/general.md")

        Returns:
            Prompt content as string, front matter removed
        """
        return self._entry(prompt_path).content

    def render(self, prompt_path: str, **variables: Any) -> str:
        """
        Load prompt and substitute variables using Jinja2.

        Example:
            prompt = loader.render(
                "chat/system.md",
                persona_prompt=persona.system_prompt,
                file_context=context,
            )
        """
        try:
            template = self._env.get_template(prompt_path)
        except TemplateNotFound as exc:
            raise FileNotFoundError(f"Prompt not found: {prompt_path}") from exc
        return template.render(**variables).strip()

    def get_metadata(self, prompt_path: str) -> dict[str, Any]:
        """Return metadata for a prompt (loads if needed)."""
        return self._entry(prompt_path).metadata

    def list_prompts(self, directory: str) -> list[str]:
        """Return relative paths of the markdown prompts in a directory."""
        folder = self.prompts_dir / directory
        if not folder.is_dir():
            return []
        return sorted(
            str(path.relative_to(self.prompts_dir).as_posix())
            for path in folder.glob("*.md")
        )

    def _entry(self, prompt_path: str) -> PromptEntry:
        if prompt_path in self.cache:
            return self.cache[prompt_path]

        file_path = self.prompts_dir / prompt_path
        if not file_path.exists():
            raise FileNotFoundError(f"Prompt not found: {file_path}")

        content = file_path.read_text(encoding="utf-8")
        metadata: dict[str, Any] = {}
        prompt_content = content

        if content.startswith("---"):
            parts = content.split("---", 2)
            if len(parts) == 3:
                metadata = yaml.safe_load(parts[1]) or {}
                prompt_content = parts[2].strip()

        entry = PromptEntry(content=prompt_content, metadata=metadata)
        self.cache[prompt_path] = entry
        return entry
