import pytest

from template_api.config import Settings
from template_api.errors import IncompleteResponse, ProviderTimeout, TransportError
from template_api.fallback import build_minimal_template, build_template
from template_api.models import GeneratedCode, Selections
from template_api.orchestrator import Orchestrator, State

BOTH = Settings(gemini_api_key="g", hugging_face_api_key="h")


def _ok(tag):
    def adapter(selections, settings):
        return GeneratedCode(html=f"<p>{tag}</p>", css="", js="")

    return adapter


def _fail(exc):
    def adapter(selections, settings):
        raise exc

    return adapter


def _never(selections, settings):
    raise AssertionError("adapter should not be called")


def test_primary_success_short_circuits(bakery):
    orch = Orchestrator(
        BOTH,
        {
            State.TRY_PRIMARY: _ok("primary"),
            State.TRY_SECONDARY_PREFERRED: _never,
            State.TRY_SECONDARY_BACKUP: _never,
        },
    )
    code, source, tried = orch.run(bakery)
    assert code.html == "<p>primary</p>"
    assert source is State.TRY_PRIMARY
    assert tried == [State.TRY_PRIMARY]


def test_incomplete_primary_falls_through_to_secondary(bakery):
    orch = Orchestrator(
        BOTH,
        {
            State.TRY_PRIMARY: _fail(IncompleteResponse("response missing js", "gemini")),
            State.TRY_SECONDARY_PREFERRED: _ok("secondary"),
            State.TRY_SECONDARY_BACKUP: _never,
        },
    )
    code, source, _ = orch.run(bakery)
    assert code.html == "<p>secondary</p>"
    assert source is State.TRY_SECONDARY_PREFERRED


def test_preferred_failure_uses_backup(bakery):
    orch = Orchestrator(
        BOTH,
        {
            State.TRY_PRIMARY: _fail(ProviderTimeout("slow")),
            State.TRY_SECONDARY_PREFERRED: _fail(TransportError("HTTP 503", status_code=503)),
            State.TRY_SECONDARY_BACKUP: _ok("backup"),
        },
    )
    code, source, tried = orch.run(bakery)
    assert code.html == "<p>backup</p>"
    assert tried == [State.TRY_PRIMARY, State.TRY_SECONDARY_PREFERRED, State.TRY_SECONDARY_BACKUP]


def test_all_failing_ends_in_deterministic_template(bakery):
    orch = Orchestrator(
        BOTH,
        {
            State.TRY_PRIMARY: _fail(ProviderTimeout("slow")),
            State.TRY_SECONDARY_PREFERRED: _fail(TransportError("down")),
            State.TRY_SECONDARY_BACKUP: _fail(RuntimeError("unexpected")),
        },
    )
    code, source, _ = orch.run(bakery)
    assert source is State.DETERMINISTIC
    assert code == build_template(bakery)
    assert orch.generate(bakery) == orch.generate(bakery)


def test_empty_html_counts_as_failure(bakery):
    orch = Orchestrator(
        BOTH,
        {
            State.TRY_PRIMARY: lambda s, c: GeneratedCode(html="  "),
            State.TRY_SECONDARY_PREFERRED: _ok("secondary"),
        },
    )
    assert orch.generate(bakery).html == "<p>secondary</p>"


def test_primary_skipped_without_credential(bakery):
    orch = Orchestrator(
        Settings(hugging_face_api_key="h"),
        {State.TRY_PRIMARY: _never, State.TRY_SECONDARY_PREFERRED: _ok("secondary")},
    )
    assert orch.entry_state() is State.TRY_SECONDARY_PREFERRED
    code, _, tried = orch.run(bakery)
    assert code.html == "<p>secondary</p>"
    assert State.TRY_PRIMARY not in tried


def test_nothing_configured_goes_straight_to_template(bakery):
    orch = Orchestrator(
        Settings(),
        {
            State.TRY_PRIMARY: _never,
            State.TRY_SECONDARY_PREFERRED: _never,
            State.TRY_SECONDARY_BACKUP: _never,
        },
    )
    assert orch.entry_state() is State.DETERMINISTIC
    code, source, tried = orch.run(bakery)
    assert tried == []
    assert code == build_template(bakery)


def test_secondary_tiers_skipped_when_only_primary_configured(bakery):
    orch = Orchestrator(
        Settings(gemini_api_key="g"),
        {
            State.TRY_PRIMARY: _fail(TransportError("down")),
            State.TRY_SECONDARY_PREFERRED: _never,
            State.TRY_SECONDARY_BACKUP: _never,
        },
    )
    code, source, tried = orch.run(bakery)
    assert tried == [State.TRY_PRIMARY]
    assert source is State.DETERMINISTIC
    assert code == build_template(bakery)


def test_minimal_last_resort_flag(bakery):
    orch = Orchestrator(Settings(minimal_last_resort=True))
    assert orch.generate(bakery) == build_minimal_template(bakery)


@pytest.mark.parametrize(
    "selections",
    [
        Selections(description="Bakery site", mainColor="#8B4513", typography="Georgia, serif"),
        Selections(description="x", mainColor="red", typography="''"),
        Selections(description="Ñandú & co", mainColor="#000", typography=",", logoPreview="data:,"),
    ],
)
def test_result_always_has_markup(selections):
    code = Orchestrator(Settings()).generate(selections)
    assert code.html.strip()
    assert isinstance(code.css, str) and isinstance(code.js, str)
