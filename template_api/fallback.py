"""Offline page generator used when no backend produces usable code.

Everything here is a pure function of the selections: no network, no clock,
no randomness, so the same input always renders the same three strings.
"""
from __future__ import annotations
import os
import re
from typing import Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from template_api.models import GeneratedCode, Selections

GENERIC_FONT_FAMILY = "sans-serif"
EXCERPT_MAX_CHARS = 200

_HEX6_RE = re.compile(r"#[0-9a-fA-F]{6}")

# Markup is escaped; stylesheet and script templates are emitted verbatim
_env = Environment(
    loader=FileSystemLoader(os.path.join(os.path.dirname(__file__), "templates")),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
    enable_async=False,
)


def primary_font_family(typography: Optional[str]) -> str:
    """First entry of a CSS font list, unquoted; generic sans-serif when empty."""
    first = (typography or "").split(",")[0]
    first = first.replace("'", "").replace('"', "").strip()
    return first or GENERIC_FONT_FAMILY


def _hero_tint(main_color: str) -> str:
    # Half-transparent variant of the brand color for the hero gradient
    if _HEX6_RE.fullmatch(main_color):
        return f"{main_color}80"
    return main_color


def _excerpt(text: Optional[str]) -> str:
    if not text or not text.strip():
        return ""
    return text[:EXCERPT_MAX_CHARS]


def _context(selections: Selections, excerpt: Optional[str] = None) -> dict:
    main_color = (selections.main_color or "").strip()
    return {
        "description": (selections.description or "").strip(),
        "main_color": main_color,
        "hero_tint": _hero_tint(main_color),
        "font_family": primary_font_family(selections.typography),
        "logo": (selections.logo_preview or "").strip(),
        "excerpt": _excerpt(excerpt),
    }


def build_template(selections: Selections, excerpt: Optional[str] = None) -> GeneratedCode:
    """Render the full landing page: header/nav, hero, about, contact form, footer.

    ``excerpt`` is text a backend produced but that could not be parsed; its
    first 200 characters are shown in the about section.
    """
    ctx = _context(selections, excerpt)
    return GeneratedCode(
        html=_env.get_template("page.html").render(**ctx),
        css=_env.get_template("page.css").render(**ctx),
        js=_env.get_template("page.js").render(**ctx),
    )


def build_minimal_template(selections: Selections) -> GeneratedCode:
    """Single static page with inline styles and no script."""
    ctx = _context(selections)
    return GeneratedCode(html=_env.get_template("minimal.html").render(**ctx), css="", js="")
