from __future__ import annotations
import json
import logging
import re
from typing import Any, Dict, Optional

from template_api.errors import MalformedPayload
from template_api.fallback import build_template
from template_api.models import GeneratedCode, Selections

log = logging.getLogger(__name__)

# Greedy: first "{" through last "}"
_OBJECT_SPAN_RE = re.compile(r"\{[\s\S]*\}")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


def _sanitize(candidate: str) -> str:
    s = _TRAILING_COMMA_RE.sub(r"\1", candidate)
    # Curly apostrophes stay: they only occur inside string values
    return s.replace("“", '"').replace("”", '"')


def _load_object(candidate: str) -> Any:
    try:
        return json.loads(candidate)
    except Exception:
        pass
    try:
        return json.loads(_sanitize(candidate))
    except Exception as exc:
        raise MalformedPayload(f"embedded object is not valid JSON: {exc}") from exc


def code_from_object(obj: Any) -> GeneratedCode:
    """Coerce a decoded object into GeneratedCode; html is mandatory."""
    if not isinstance(obj, dict):
        raise MalformedPayload(f"expected an object, got {type(obj).__name__}")
    html = obj.get("html")
    if not (isinstance(html, str) and html.strip()):
        raise MalformedPayload("object has no html")
    fields: Dict[str, str] = {"html": html}
    for key in ("css", "js"):
        val = obj.get(key)
        if val is None:
            fields[key] = ""
        elif isinstance(val, str):
            fields[key] = val
        else:
            raise MalformedPayload(f"{key} is not a string")
    return GeneratedCode(**fields)


def parse_code_block(text: Optional[str]) -> GeneratedCode:
    """Parse the object embedded in free-form model output or raise MalformedPayload."""
    if not isinstance(text, str):
        raise MalformedPayload(f"expected text, got {type(text).__name__}")
    m = _OBJECT_SPAN_RE.search(text)
    if not m:
        raise MalformedPayload("no brace-delimited object in text")
    return code_from_object(_load_object(m.group(0)))


def extract_code(text: Optional[str], selections: Selections) -> GeneratedCode:
    """Best-effort parse; falls back to the offline template seeded with ``text``."""
    try:
        return parse_code_block(text)
    except MalformedPayload as exc:
        log.info("extraction: %s; rendering offline template with excerpt", exc)
        return build_template(selections, excerpt=text if isinstance(text, str) else None)
