"""Tests for the landing, privacy, terms and support pages."""

import pytest

from lumo import themes
from lumo.pages import PAGES, PageNotFoundError, render_page


@pytest.mark.parametrize("slug", sorted(PAGES))
def test_every_page_renders_with_theme(slug):
    html = render_page(slug)

    assert html.lstrip().lower().startswith("<!doctype html>")
    assert PAGES[slug] in html
    assert "/* Lumo Light */" in html
    assert "support@lumo.ai" in html


def test_explicit_theme():
    assert "color-scheme: dark;" in render_page("privacy", theme_id="forest-night")


def test_saved_theme_is_used():
    themes.save_theme("sunset-glow")

    assert "/* Sunset Glow */" in render_page("terms")


def test_landing_lists_personas():
    html = render_page("landing")

    assert "Code Master" in html
    assert "Language Tutor" in html


def test_unknown_page():
    with pytest.raises(PageNotFoundError, match="Page not found: about"):
        render_page("about")
