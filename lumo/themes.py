"""
Themes

Built-in colour themes expressed as HSL tokens ("H S% L%"), the CSS custom
properties they map to, and the saved-theme preference.
"""

import logging
import time

from pydantic import BaseModel, Field

from lumo import settings_store

logger = logging.getLogger(__name__)


class ThemeColors(BaseModel):
    primary: str
    secondary: str
    accent: str
    background: str
    foreground: str
    muted: str
    border: str
    chat_user_bg: str
    chat_ai_bg: str


class Theme(BaseModel):
    """A colour theme."""

    id: str = Field(..., description="Theme identifier")
    name: str = Field(..., description="Display name")
    description: str = Field(default="", description="Short description")
    colors: ThemeColors
    gradient: str | None = Field(default=None, description="Optional CSS gradient")
    is_dark: bool = Field(default=False, description="Dark colour scheme")


def _theme(
    theme_id: str,
    name: str,
    description: str,
    colors: tuple[str, ...],
    is_dark: bool,
    gradient: str | None = None,
) -> Theme:
    keys = ThemeColors.model_fields.keys()
    return Theme(
        id=theme_id,
        name=name,
        description=description,
        colors=ThemeColors(**dict(zip(keys, colors))),
        gradient=gradient,
        is_dark=is_dark,
    )


# colours: primary, secondary, accent, background, foreground, muted, border,
# chat_user_bg, chat_ai_bg
THEMES: tuple[Theme, ...] = (
    _theme(
        "lumo-light", "Lumo Light", "The classic Lumo.AI light theme",
        ("220 100% 60%", "240 100% 95%", "280 100% 70%", "0 0% 100%", "240 10% 4%",
         "240 5% 96%", "240 6% 90%", "220 100% 60%", "240 5% 96%"),
        is_dark=False,
    ),
    _theme(
        "lumo-dark", "Lumo Dark", "The sleek Lumo.AI dark theme",
        ("220 100% 60%", "240 20% 15%", "280 100% 70%", "240 20% 6%", "240 5% 90%",
         "240 20% 10%", "240 20% 15%", "220 100% 60%", "240 20% 12%"),
        is_dark=True,
    ),
    _theme(
        "ocean-breeze", "Ocean Breeze", "Calming blue and teal tones",
        ("200 100% 50%", "180 100% 95%", "160 100% 60%", "0 0% 100%", "200 20% 10%",
         "180 20% 96%", "180 20% 90%", "200 100% 50%", "180 20% 96%"),
        is_dark=False,
        gradient="linear-gradient(135deg, hsl(200 100% 50%), hsl(160 100% 60%))",
    ),
    _theme(
        "sunset-glow", "Sunset Glow", "Warm orange and pink gradients",
        ("20 100% 60%", "40 100% 95%", "340 100% 70%", "0 0% 100%", "20 20% 10%",
         "40 20% 96%", "40 20% 90%", "20 100% 60%", "40 20% 96%"),
        is_dark=False,
        gradient="linear-gradient(135deg, hsl(20 100% 60%), hsl(340 100% 70%))",
    ),
    _theme(
        "forest-night", "Forest Night", "Deep greens with dark ambiance",
        ("120 60% 50%", "120 20% 15%", "80 80% 60%", "120 30% 8%", "120 10% 90%",
         "120 20% 12%", "120 20% 18%", "120 60% 50%", "120 20% 12%"),
        is_dark=True,
        gradient="linear-gradient(135deg, hsl(120 60% 50%), hsl(80 80% 60%))",
    ),
    _theme(
        "royal-purple", "Royal Purple", "Elegant purple and gold accents",
        ("270 80% 60%", "280 100% 95%", "45 100% 70%", "0 0% 100%", "270 20% 10%",
         "280 20% 96%", "280 20% 90%", "270 80% 60%", "280 20% 96%"),
        is_dark=False,
        gradient="linear-gradient(135deg, hsl(270 80% 60%), hsl(45 100% 70%))",
    ),
    _theme(
        "cyberpunk", "Cyberpunk", "Neon colors with dark futuristic feel",
        ("300 100% 70%", "180 100% 15%", "60 100% 70%", "240 30% 5%", "300 20% 90%",
         "240 20% 10%", "300 30% 20%", "300 100% 70%", "240 20% 10%"),
        is_dark=True,
        gradient="linear-gradient(135deg, hsl(300 100% 70%), hsl(60 100% 70%))",
    ),
    _theme(
        "minimal-gray", "Minimal Gray", "Clean and minimal grayscale design",
        ("0 0% 20%", "0 0% 95%", "0 0% 40%", "0 0% 100%", "0 0% 10%",
         "0 0% 96%", "0 0% 90%", "0 0% 20%", "0 0% 96%"),
        is_dark=False,
    ),
)

DEFAULT_LIGHT_THEME = "lumo-light"
DEFAULT_DARK_THEME = "lumo-dark"


def list_themes() -> list[Theme]:
    return list(THEMES)


def get_theme(theme_id: str | None) -> Theme | None:
    for theme in THEMES:
        if theme.id == theme_id:
            return theme
    return None


def themes_by_type(is_dark: bool) -> list[Theme]:
    return [theme for theme in THEMES if theme.is_dark == is_dark]


def initial_theme(saved_id: str | None = None, prefers_dark: bool = False) -> Theme:
    """Saved theme when it still exists, else the Lumo theme matching the system scheme."""
    saved = get_theme(saved_id)
    if saved is not None:
        return saved
    if saved_id:
        logger.warning(f"Saved theme '{saved_id}' no longer exists")
    return get_theme(DEFAULT_DARK_THEME if prefers_dark else DEFAULT_LIGHT_THEME)


def toggle_dark_mode(current: Theme) -> Theme:
    """Switch to the built-in Lumo theme with the opposite brightness."""
    for theme in THEMES:
        if theme.id.startswith("lumo-") and theme.is_dark != current.is_dark:
            return theme
    return current


def create_custom_theme(name: str, base: Theme, **colors: str) -> Theme:
    """Derive a theme from base with some colour tokens replaced."""
    merged = ThemeColors(**{**base.colors.model_dump(), **colors})
    return Theme(
        id=f"custom-{int(time.time() * 1000)}",
        name=name,
        description=f"Custom theme based on {base.name}",
        colors=merged,
        is_dark=base.is_dark,
    )


def _css_name(field: str) -> str:
    return "--" + field.replace("_", "-")


def css_variables(theme: Theme) -> dict[str, str]:
    """Map a theme to its CSS custom properties, derived tokens included."""
    colors = theme.colors
    variables = {_css_name(field): value for field, value in colors.model_dump().items()}
    variables.update(
        {
            "--primary-foreground": "0 0% 100%" if "100%" in colors.primary else "0 0% 0%",
            "--secondary-foreground": "240 100% 20%" if "95%" in colors.secondary else "240 5% 85%",
            "--accent-foreground": "0 0% 100%",
            "--muted-foreground": "240 5% 65%" if theme.is_dark else "240 4% 46%",
            "--card": colors.background,
            "--card-foreground": colors.foreground,
            "--input": colors.muted,
            "--ring": colors.primary,
            "--chat-user-text": "0 0% 100%",
            "--chat-ai-text": colors.foreground,
            "--chat-input-bg": colors.background,
            "--chat-input-border": colors.border,
        }
    )
    if theme.gradient:
        variables["--theme-gradient"] = theme.gradient
    return variables


def render_css(theme: Theme) -> str:
    """Render the theme as a :root stylesheet."""
    scheme = "dark" if theme.is_dark else "light"
    lines = [f"  color-scheme: {scheme};"]
    lines.extend(f"  {name}: {value};" for name, value in css_variables(theme).items())
    return f"/* {theme.name} */\n:root {{\n" + "\n".join(lines) + "\n}\n"


def saved_theme_id() -> str | None:
    return settings_store.get_value(settings_store.THEME_KEY)


def save_theme(theme_id: str) -> Theme:
    """Persist the preferred theme; unknown ids raise ValueError."""
    theme = get_theme(theme_id)
    if theme is None:
        raise ValueError(f"Unknown theme: {theme_id}")
    settings_store.set_value(settings_store.THEME_KEY, theme.id)
    return theme
