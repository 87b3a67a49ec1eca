"""
Static pages

Landing, privacy, terms and support pages rendered from Jinja2 templates in
templates/. Every page is styled with the saved (or default) theme.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from lumo import themes
from lumo.config import get_settings
from lumo.personas import list_personas

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"

PAGES: dict[str, str] = {
    "landing": "Meet Your Intelligent AI Assistant",
    "privacy": "Privacy Policy",
    "terms": "Terms of Service",
    "support": "Support Center",
}


class PageNotFoundError(Exception):
    """No page is registered under the requested slug."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Page not found: {slug}")
        self.slug = slug


@lru_cache
def _environment(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_page(slug: str, theme_id: str | None = None, **context: Any) -> str:
    """
    Render a page to HTML.

    Args:
        slug: One of PAGES
        theme_id: Theme to style the page with (defaults to the saved theme)
        **context: Extra template variables

    Raises:
        PageNotFoundError: If slug is not a known page
    """
    if slug not in PAGES:
        raise PageNotFoundError(slug)

    settings = get_settings()
    theme = themes.initial_theme(theme_id or themes.saved_theme_id())
    variables = {
        "app_name": settings.app_name,
        "title": PAGES[slug],
        "theme": theme,
        "theme_css": themes.render_css(theme),
        "contact_email": settings.email.contact_address,
        "personas": list_personas(),
        **context,
    }
    html = _environment().get_template(f"{slug}.html").render(**variables)
    logger.debug("Rendered page", extra={"slug": slug, "theme": theme.id})
    return html
