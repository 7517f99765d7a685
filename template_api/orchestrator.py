"""Fallback chain across generation backends.

The chain is a small state machine::

    TRY_PRIMARY -> TRY_SECONDARY_PREFERRED -> TRY_SECONDARY_BACKUP -> DETERMINISTIC -> DONE

A success in any state jumps straight to DONE. A failure moves one state to
the right. DETERMINISTIC renders the offline template and cannot fail, so
every run ends in DONE with a result.
"""
from __future__ import annotations
import enum
import logging
from typing import Callable, Dict, List, Optional, Tuple

from template_api import providers
from template_api.config import Settings
from template_api.errors import GenerationError
from template_api.fallback import build_minimal_template, build_template
from template_api.models import GeneratedCode, ProviderOutcome, Selections

log = logging.getLogger(__name__)

Adapter = Callable[[Selections, Settings], GeneratedCode]


class State(str, enum.Enum):
    TRY_PRIMARY = "try_primary"
    TRY_SECONDARY_PREFERRED = "try_secondary_preferred"
    TRY_SECONDARY_BACKUP = "try_secondary_backup"
    DETERMINISTIC = "deterministic"
    DONE = "done"


_NEXT: Dict[State, State] = {
    State.TRY_PRIMARY: State.TRY_SECONDARY_PREFERRED,
    State.TRY_SECONDARY_PREFERRED: State.TRY_SECONDARY_BACKUP,
    State.TRY_SECONDARY_BACKUP: State.DETERMINISTIC,
}


def default_adapters() -> Dict[State, Adapter]:
    return {
        State.TRY_PRIMARY: providers.call_primary,
        State.TRY_SECONDARY_PREFERRED: providers.call_secondary_preferred,
        State.TRY_SECONDARY_BACKUP: providers.call_secondary_backup,
    }


class Orchestrator:
    def __init__(self, settings: Settings, adapters: Optional[Dict[State, Adapter]] = None):
        self.settings = settings
        self.adapters = dict(default_adapters())
        if adapters:
            self.adapters.update(adapters)

    def entry_state(self) -> State:
        if self.settings.has_primary:
            return State.TRY_PRIMARY
        if self.settings.has_secondary:
            return State.TRY_SECONDARY_PREFERRED
        return State.DETERMINISTIC

    def _configured(self, state: State) -> bool:
        if state is State.TRY_PRIMARY:
            return self.settings.has_primary
        return self.settings.has_secondary

    def _attempt(self, state: State, selections: Selections) -> ProviderOutcome:
        try:
            code = self.adapters[state](selections, self.settings)
        except GenerationError as exc:
            return ProviderOutcome(provider=state.value, error=exc)
        except Exception as exc:
            log.exception("orchestrator: unexpected fault in %s", state.value)
            return ProviderOutcome(provider=state.value, error=exc)
        if not isinstance(code, GeneratedCode) or not code.html.strip():
            return ProviderOutcome(provider=state.value, error=GenerationError("adapter returned no html", state.value))
        return ProviderOutcome(provider=state.value, code=code)

    def _deterministic(self, selections: Selections) -> GeneratedCode:
        if self.settings.minimal_last_resort:
            return build_minimal_template(selections)
        return build_template(selections)

    def run(self, selections: Selections) -> Tuple[GeneratedCode, State, List[State]]:
        """Walk the chain; return the code, the state that produced it and the states tried."""
        state = self.entry_state()
        tried: List[State] = []
        result: Optional[GeneratedCode] = None
        source = state
        while state is not State.DONE:
            if state is State.DETERMINISTIC:
                log.info("orchestrator: using offline template")
                result, source = self._deterministic(selections), state
                state = State.DONE
                continue
            if not self._configured(state):
                log.info("orchestrator: %s not configured; skipping", state.value)
                state = _NEXT[state]
                continue
            tried.append(state)
            outcome = self._attempt(state, selections)
            if outcome.ok:
                log.info("orchestrator: chosen provider=%s", outcome.provider)
                result, source = outcome.code, state
                state = State.DONE
            else:
                log.warning("orchestrator: %s failed: %r", outcome.provider, outcome.error)
                state = _NEXT[state]
        return result, source, tried

    def generate(self, selections: Selections) -> GeneratedCode:
        code, _, _ = self.run(selections)
        return code
