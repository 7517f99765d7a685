"""Landing page generation API for the template builder."""
import os
import sys
from pathlib import Path
from typing import Dict


def _parse_dotenv(text: str) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for line in text.splitlines():
        s = line.strip()
        if not s or s.startswith("#") or "=" not in s:
            continue
        key, val = (part.strip() for part in s.split("=", 1))
        if len(val) >= 2 and val[0] == val[-1] and val[0] in {'"', "'"}:
            val = val[1:-1]
        if key:
            values[key] = val
    return values


def _load_dotenv_if_needed() -> None:
    # Tests run offline; PYTEST_CURRENT_TEST is unset while modules are collected
    if os.getenv("PYTEST_CURRENT_TEST") or "pytest" in sys.modules:
        return
    env_path = Path(".env")
    if not env_path.exists():
        return
    try:
        values = _parse_dotenv(env_path.read_text(encoding="utf-8"))
    except OSError:
        return
    for key, val in values.items():
        os.environ.setdefault(key, val)


_load_dotenv_if_needed()
