"""
Personas

System-prompt presets the user can pick to bias the assistant's tone and
domain. Each persona lives in prompts/personas/<id>.md with its display
fields in YAML front matter.
"""

import logging
from functools import lru_cache

from pydantic import BaseModel, Field

from lumo.prompts import PromptLoader

logger = logging.getLogger(__name__)

DEFAULT_PERSONA_ID = "general"
PERSONAS_DIR = "personas"


class Persona(BaseModel):
    """A selectable system-prompt preset."""

    id: str = Field(..., description="Persona identifier")
    name: str = Field(..., description="Display name")
    icon: str = Field(default="🤖", description="Emoji shown next to the name")
    description: str = Field(default="", description="One-line summary")
    system_prompt: str = Field(..., description="System prompt sent to the model")


@lru_cache
def _load_personas() -> tuple[Persona, ...]:
    loader = PromptLoader()
    entries = []
    for path in loader.list_prompts(PERSONAS_DIR):
        metadata = loader.get_metadata(path)
        persona_id = metadata.get("id") or path.rsplit("/", 1)[-1].removesuffix(".md")
        persona = Persona(
            id=persona_id,
            name=metadata.get("name", persona_id),
            icon=metadata.get("icon", "🤖"),
            description=metadata.get("description", ""),
            system_prompt=loader.load(path),
        )
        entries.append((metadata.get("order", 100), persona))

    # general always leads, the rest follow their declared order
    entries.sort(key=lambda item: (item[1].id != DEFAULT_PERSONA_ID, item[0], item[1].id))
    personas = tuple(persona for _, persona in entries)
    logger.debug("Loaded personas", extra={"count": len(personas)})
    return personas


def list_personas() -> list[Persona]:
    """Return every persona, general first."""
    return list(_load_personas())


def get_persona(persona_id: str | None) -> Persona:
    """Return the persona with this id, falling back to general."""
    personas = _load_personas()
    for persona in personas:
        if persona.id == persona_id:
            return persona
    if persona_id and persona_id != DEFAULT_PERSONA_ID:
        logger.warning(f"Unknown persona '{persona_id}', using {DEFAULT_PERSONA_ID}")
    for persona in personas:
        if persona.id == DEFAULT_PERSONA_ID:
            return persona
    raise LookupError("No personas available; prompts/personas/ is missing")
