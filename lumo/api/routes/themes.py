"""
Theme Routes

Built-in themes, their CSS and the light/dark toggle.
"""

import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import PlainTextResponse

from lumo import themes
from lumo.themes import Theme

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_theme(theme_id: str) -> Theme:
    theme = themes.get_theme(theme_id)
    if theme is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Theme not found: {theme_id}",
        )
    return theme


@router.get("/themes", response_model=list[Theme])
async def list_themes(dark: bool | None = None) -> list[Theme]:
    """List themes, optionally only the dark (or light) ones."""
    if dark is None:
        return themes.list_themes()
    return themes.themes_by_type(dark)


@router.get("/themes/{theme_id}", response_model=Theme)
async def get_theme(theme_id: str) -> Theme:
    return _require_theme(theme_id)


@router.get("/themes/{theme_id}/css", response_class=PlainTextResponse)
async def get_theme_css(theme_id: str) -> PlainTextResponse:
    theme = _require_theme(theme_id)
    return PlainTextResponse(themes.render_css(theme), media_type="text/css")


@router.get("/themes/{theme_id}/toggle", response_model=Theme)
async def toggle_theme(theme_id: str) -> Theme:
    """The built-in Lumo theme with the opposite brightness."""
    return themes.toggle_dark_mode(_require_theme(theme_id))
