import pytest

from template_api.models import Selections

_ENV_KEYS = (
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "GEMINI_ENDPOINT",
    "HUGGING_FACE_API_KEY",
    "HUGGING_FACE_API_URL",
    "HUGGING_FACE_BACKUP_URL",
    "LLM_TIMEOUT_SECS",
    "TEMPLATE_MINIMAL_FALLBACK",
)


@pytest.fixture(autouse=True)
def _no_credentials(monkeypatch):
    # A developer .env must not leak live keys into offline tests
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def bakery():
    return Selections(description="Bakery site", mainColor="#8B4513", typography="Georgia, serif")


class FakeResp:
    def __init__(self, status, payload=None, text=None):
        self.status_code = status
        self._payload = payload
        self.text = text if text is not None else ("" if payload is None else str(payload))

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


@pytest.fixture
def fake_resp():
    return FakeResp
