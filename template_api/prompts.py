from __future__ import annotations

from template_api.fallback import primary_font_family
from template_api.models import Selections


def _logo_line(selections: Selections, label: str) -> str:
    logo = (selections.logo_preview or "").strip()
    return f"- {label}: {logo}" if logo else ""


def build_primary_prompt(selections: Selections) -> str:
    """Strict-JSON instruction for the primary model."""
    font = primary_font_family(selections.typography)
    return f"""
Genera una landing page moderna y responsiva con los siguientes requisitos:
- Descripción: "{selections.description}"
- Color principal: {selections.main_color}
- Tipografía: "{font}"
{_logo_line(selections, "Logo")}

Requisitos técnicos:
1. HTML semántico y accesible
2. CSS moderno con variables CSS y diseño responsivo
3. JavaScript mínimo para interactividad esencial
4. Optimización para rendimiento y SEO
5. Soporte para móviles y tablets

Devuelve el código en formato JSON con las claves "html", "css" y "js".
El código debe ser completo y funcional.
"""


def build_secondary_prompt(selections: Selections) -> str:
    """Instruction-tuned prompt for the preferred code model."""
    font = primary_font_family(selections.typography)
    return f"""<s>[INST] Generate a modern responsive landing page with these requirements:
- Description: "{selections.description}"
- Main color: {selections.main_color}
- Typography: "{font}"
{_logo_line(selections, "Logo")}

Technical requirements:
1. Semantic and accessible HTML
2. Modern CSS with CSS variables and responsive design
3. Minimal JavaScript for essential interactivity
4. Performance and SEO optimization
5. Mobile and tablet support

Return the code in JSON format with keys "html", "css" and "js".
The code must be complete and functional. [/INST]"""


def build_backup_prompt(selections: Selections) -> str:
    font = primary_font_family(selections.typography)
    return (
        f"Create a simple HTML page for: {selections.description}. "
        f"Use color: {selections.main_color}, font: {font}. "
        "Return JSON with html, css, js keys."
    )
