"""Persona preset routes."""

from fastapi import APIRouter

from lumo.personas import Persona, list_personas

router = APIRouter()


@router.get("/personas", response_model=list[Persona])
async def get_personas() -> list[Persona]:
    """List the selectable personas, general first."""
    return list_personas()
