"""Tests for theme presets, selection and CSS rendering."""

import pytest

from lumo import settings_store, themes


def test_eight_presets_with_unique_ids():
    ids = [theme.id for theme in themes.list_themes()]

    assert len(ids) == 8
    assert len(set(ids)) == 8
    assert ids[:2] == ["lumo-light", "lumo-dark"]


def test_themes_by_type():
    dark = {theme.id for theme in themes.themes_by_type(True)}

    assert dark == {"lumo-dark", "forest-night", "cyberpunk"}
    assert len(themes.themes_by_type(False)) == 5


class TestInitialTheme:
    def test_saved_theme_wins(self):
        assert themes.initial_theme("cyberpunk", prefers_dark=False).id == "cyberpunk"

    def test_missing_saved_theme_follows_system_scheme(self):
        assert themes.initial_theme("deleted-theme", prefers_dark=True).id == "lumo-dark"

    def test_defaults_to_light(self):
        assert themes.initial_theme().id == "lumo-light"


def test_toggle_dark_mode_switches_lumo_theme():
    assert themes.toggle_dark_mode(themes.get_theme("ocean-breeze")).id == "lumo-dark"
    assert themes.toggle_dark_mode(themes.get_theme("forest-night")).id == "lumo-light"


def test_create_custom_theme_overrides_colors():
    base = themes.get_theme("lumo-dark")

    custom = themes.create_custom_theme("Mine", base, primary="10 80% 50%")

    assert custom.id.startswith("custom-")
    assert custom.colors.primary == "10 80% 50%"
    assert custom.colors.background == base.colors.background
    assert custom.is_dark is True
    assert custom.description == "Custom theme based on Lumo Dark"


def test_css_variables_include_derived_tokens():
    variables = themes.css_variables(themes.get_theme("lumo-light"))

    assert variables["--primary"] == "220 100% 60%"
    assert variables["--chat-user-bg"] == "220 100% 60%"
    assert variables["--primary-foreground"] == "0 0% 100%"
    assert variables["--muted-foreground"] == "240 4% 46%"
    assert variables["--ring"] == variables["--primary"]


def test_render_css():
    css = themes.render_css(themes.get_theme("cyberpunk"))

    assert css.startswith("/* Cyberpunk */\n:root {\n  color-scheme: dark;\n")
    assert "  --background: 240 30% 5%;\n" in css


def test_save_theme_persists_preference():
    themes.save_theme("royal-purple")

    assert themes.saved_theme_id() == "royal-purple"
    assert settings_store.get_value(settings_store.THEME_KEY) == "royal-purple"


def test_save_unknown_theme_raises():
    with pytest.raises(ValueError, match="Unknown theme"):
        themes.save_theme("neon-dreams")

    assert themes.saved_theme_id() is None
