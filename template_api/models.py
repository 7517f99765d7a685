from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from template_api.errors import InvalidSelections

MISSING_FIELDS_MESSAGE = "Faltan datos requeridos"


class Selections(BaseModel):
    """Design choices collected by the builder UI."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    description: Optional[str] = None
    main_color: Optional[str] = Field(default=None, alias="mainColor")
    typography: Optional[str] = None
    logo_preview: Optional[str] = Field(default=None, alias="logoPreview")

    def missing_fields(self) -> list[str]:
        missing = []
        for name in ("description", "main_color", "typography"):
            value = getattr(self, name)
            if not (isinstance(value, str) and value.strip()):
                missing.append(name)
        return missing


class GeneratedCode(BaseModel):
    model_config = ConfigDict(frozen=True)

    html: str
    css: str = ""
    js: str = ""


@dataclass
class ProviderOutcome:
    provider: str
    code: Optional[GeneratedCode] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.code is not None


def parse_selections(payload: Any) -> Selections:
    """Validate a decoded request body; raise InvalidSelections when unusable."""
    if not isinstance(payload, dict):
        raise InvalidSelections(MISSING_FIELDS_MESSAGE)
    try:
        selections = Selections.model_validate(payload)
    except ValidationError as exc:
        raise InvalidSelections(MISSING_FIELDS_MESSAGE) from exc
    if selections.missing_fields():
        raise InvalidSelections(MISSING_FIELDS_MESSAGE)
    return selections


def template_payload(code: GeneratedCode) -> Dict[str, Dict[str, str]]:
    return {"template": code.model_dump()}
