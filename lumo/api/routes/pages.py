"""HTML page routes: landing, privacy, terms and support."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from lumo.pages import render_page

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def landing(theme: str | None = None) -> HTMLResponse:
    return HTMLResponse(render_page("landing", theme_id=theme))


@router.get("/privacy", response_class=HTMLResponse)
async def privacy(theme: str | None = None) -> HTMLResponse:
    return HTMLResponse(render_page("privacy", theme_id=theme))


@router.get("/terms", response_class=HTMLResponse)
async def terms(theme: str | None = None) -> HTMLResponse:
    return HTMLResponse(render_page("terms", theme_id=theme))


@router.get("/support", response_class=HTMLResponse)
async def support(theme: str | None = None) -> HTMLResponse:
    return HTMLResponse(render_page("support", theme_id=theme))
