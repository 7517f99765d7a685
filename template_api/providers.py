from __future__ import annotations
import json
import logging
from typing import Any, Dict, Optional

from template_api import remote
from template_api.config import Settings
from template_api.errors import IncompleteResponse, MalformedPayload, MissingCredential
from template_api.extraction import extract_code
from template_api.models import GeneratedCode, Selections
from template_api.prompts import build_backup_prompt, build_primary_prompt, build_secondary_prompt

log = logging.getLogger(__name__)

PRIMARY = "gemini"
SECONDARY_PREFERRED = "huggingface"
SECONDARY_BACKUP = "huggingface-backup"

REQUIRED_FIELDS = ("html", "css", "js")

_SAFETY_SETTINGS = [
    {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
    for category in (
        "HARM_CATEGORY_HARASSMENT",
        "HARM_CATEGORY_HATE_SPEECH",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "HARM_CATEGORY_DANGEROUS_CONTENT",
    )
]


def _extract_gemini_text(payload: Dict[str, Any]) -> Optional[str]:
    try:
        candidates = payload.get("candidates") or []
        for cand in candidates:
            content = cand.get("content") or {}
            parts = content.get("parts") or []
            for part in parts:
                txt = part.get("text")
                if isinstance(txt, str) and txt.strip():
                    return txt
    except Exception:
        pass
    return None


def call_primary(selections: Selections, settings: Settings) -> GeneratedCode:
    """Ask Gemini for strict JSON with html/css/js and validate every field."""
    if not settings.has_primary:
        raise MissingCredential("GEMINI_API_KEY is not configured", PRIMARY)

    prompt = build_primary_prompt(selections)
    log.debug("gemini prompt: %s", prompt)
    body = {
        "contents": [{"parts": [{"text": prompt}]}],
        "safetySettings": _SAFETY_SETTINGS,
        "generationConfig": {
            "temperature": settings.gemini_temperature,
            "topP": settings.gemini_top_p,
            "topK": settings.gemini_top_k,
            "maxOutputTokens": settings.gemini_max_output_tokens,
            "responseMimeType": "application/json",
        },
    }
    resp = remote.post_json(
        settings.gemini_generate_url,
        body,
        params={"key": settings.gemini_api_key},
        timeout=settings.timeout_secs,
        provider=PRIMARY,
    )
    remote.ensure_ok(resp, PRIMARY)

    text = _extract_gemini_text(remote.json_body(resp, PRIMARY))
    if not text:
        raise IncompleteResponse("empty response text", PRIMARY)
    try:
        code = json.loads(text)
    except Exception as exc:
        raise MalformedPayload(f"response is not JSON: {exc}", PRIMARY) from exc
    if not isinstance(code, dict):
        raise MalformedPayload("response is not a JSON object", PRIMARY)

    missing = [k for k in REQUIRED_FIELDS if not (isinstance(code.get(k), str) and code[k])]
    if missing:
        raise IncompleteResponse(f"response missing {', '.join(missing)}", PRIMARY)
    return GeneratedCode(html=code["html"], css=code["css"], js=code["js"])


def _huggingface_headers(settings: Settings) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {settings.hugging_face_api_key}",
        "Content-Type": "application/json",
    }


def _generated_text(data: Any, *, serialize_objects: bool) -> str:
    """Pull generated text out of an inference API payload."""
    if isinstance(data, list):
        if not data:
            return ""
        first = data[0]
        if isinstance(first, dict):
            for key in ("generated_text", "text"):
                val = first.get(key)
                if isinstance(val, str) and val:
                    return val
            return ""
        return first if isinstance(first, str) else ""
    if isinstance(data, str):
        return data
    if isinstance(data, dict) and serialize_objects:
        text = data.get("generated_text") or data.get("text")
        if isinstance(text, str) and text:
            return text
        return json.dumps(data, ensure_ascii=False)
    return ""


def call_secondary_preferred(selections: Selections, settings: Settings) -> GeneratedCode:
    """Code model on the inference API; free text goes through extraction."""
    if not settings.has_secondary:
        raise MissingCredential("HUGGING_FACE_API_KEY is not configured", SECONDARY_PREFERRED)

    body = {
        "inputs": build_secondary_prompt(selections),
        "parameters": {
            "max_new_tokens": 2048,
            "temperature": 0.3,
            "do_sample": True,
            "top_p": 0.9,
            "return_full_text": False,
        },
    }
    resp = remote.post_json(
        settings.hugging_face_url,
        body,
        headers=_huggingface_headers(settings),
        timeout=settings.timeout_secs,
        provider=SECONDARY_PREFERRED,
    )
    remote.ensure_ok(resp, SECONDARY_PREFERRED)
    text = _generated_text(remote.json_body(resp, SECONDARY_PREFERRED), serialize_objects=True)
    return extract_code(text, selections)


def call_secondary_backup(selections: Selections, settings: Settings) -> GeneratedCode:
    """Smaller model with a terse prompt; same extraction path."""
    if not settings.has_secondary:
        raise MissingCredential("HUGGING_FACE_API_KEY is not configured", SECONDARY_BACKUP)

    body = {
        "inputs": build_backup_prompt(selections),
        "parameters": {
            "max_length": 1024,
            "temperature": 0.8,
            "do_sample": True,
        },
    }
    resp = remote.post_json(
        settings.hugging_face_backup_url,
        body,
        headers=_huggingface_headers(settings),
        timeout=settings.timeout_secs,
        provider=SECONDARY_BACKUP,
    )
    remote.ensure_ok(resp, SECONDARY_BACKUP)
    text = _generated_text(remote.json_body(resp, SECONDARY_BACKUP), serialize_objects=False)
    return extract_code(text, selections)
