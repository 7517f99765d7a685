from __future__ import annotations
import logging
import os
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECS = 20.0

GEMINI_DEFAULT_MODEL = "gemini-1.5-flash-latest"
GEMINI_DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models"

HUGGING_FACE_DEFAULT_URL = "https://api-inference.huggingface.co/models/codellama/CodeLlama-7b-Instruct-hf"
HUGGING_FACE_DEFAULT_BACKUP_URL = "https://api-inference.huggingface.co/models/microsoft/DialoGPT-medium"


def _env_str(name: str, default: str = "") -> str:
    return (os.getenv(name, default) or default).strip()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except Exception:
        log.warning("config: ignoring non-numeric %s=%r", name, raw)
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except Exception:
        log.warning("config: ignoring non-integer %s=%r", name, raw)
        return default


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Credentials, endpoints and generation knobs for one orchestration pass."""

    model_config = ConfigDict(frozen=True)

    gemini_api_key: str = ""
    gemini_model: str = GEMINI_DEFAULT_MODEL
    gemini_endpoint: str = GEMINI_DEFAULT_ENDPOINT
    gemini_temperature: float = 0.4
    gemini_top_p: float = 0.8
    gemini_top_k: int = 32
    gemini_max_output_tokens: int = 16384

    hugging_face_api_key: str = ""
    hugging_face_url: str = HUGGING_FACE_DEFAULT_URL
    hugging_face_backup_url: str = HUGGING_FACE_DEFAULT_BACKUP_URL

    timeout_secs: float = DEFAULT_TIMEOUT_SECS
    minimal_last_resort: bool = False

    @property
    def has_primary(self) -> bool:
        return bool(self.gemini_api_key)

    @property
    def has_secondary(self) -> bool:
        return bool(self.hugging_face_api_key)

    @property
    def gemini_generate_url(self) -> str:
        return f"{self.gemini_endpoint.rstrip('/')}/{self.gemini_model}:generateContent"

    def status(self) -> Dict[str, Any]:
        """Describe which backends would be tried, without exposing keys."""
        if self.has_primary:
            using = "gemini"
        elif self.has_secondary:
            using = "huggingface"
        else:
            using = "template"
        return {
            "using": using,
            "primary": {"provider": "gemini", "model": self.gemini_model, "has_token": self.has_primary},
            "secondary": {
                "provider": "huggingface",
                "models": [self.hugging_face_url, self.hugging_face_backup_url],
                "has_token": self.has_secondary,
            },
            "timeout_secs": self.timeout_secs,
        }


def load_settings() -> Settings:
    timeout = _env_float("LLM_TIMEOUT_SECS", DEFAULT_TIMEOUT_SECS)
    if timeout <= 0:
        timeout = DEFAULT_TIMEOUT_SECS
    return Settings(
        gemini_api_key=_env_str("GEMINI_API_KEY"),
        gemini_model=_env_str("GEMINI_MODEL", GEMINI_DEFAULT_MODEL) or GEMINI_DEFAULT_MODEL,
        gemini_endpoint=_env_str("GEMINI_ENDPOINT", GEMINI_DEFAULT_ENDPOINT) or GEMINI_DEFAULT_ENDPOINT,
        gemini_temperature=_env_float("GEMINI_TEMPERATURE", 0.4),
        gemini_top_p=_env_float("GEMINI_TOP_P", 0.8),
        gemini_top_k=_env_int("GEMINI_TOP_K", 32),
        gemini_max_output_tokens=_env_int("GEMINI_MAX_OUTPUT_TOKENS", 16384),
        hugging_face_api_key=_env_str("HUGGING_FACE_API_KEY"),
        hugging_face_url=_env_str("HUGGING_FACE_API_URL", HUGGING_FACE_DEFAULT_URL) or HUGGING_FACE_DEFAULT_URL,
        hugging_face_backup_url=(
            _env_str("HUGGING_FACE_BACKUP_URL", HUGGING_FACE_DEFAULT_BACKUP_URL) or HUGGING_FACE_DEFAULT_BACKUP_URL
        ),
        timeout_secs=timeout,
        minimal_last_resort=_env_flag("TEMPLATE_MINIMAL_FALLBACK"),
    )
