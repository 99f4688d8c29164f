# dispatch.py
from __future__ import annotations
from typing import Any, Dict, Iterable, Mapping, Optional

from engine import WizardEngine
from errors import WizardError
from installed import InstallStatus, install_status
from logger import log
from messages import LANGUAGE_NAMES, intro_text, violation_text
from settings import InstallerSettings
from state import SECRET_FIELDS, WizardState
from validators import Violation

ACTIONS = ("advance", "retreat", "test", "selectLanguage")


def open_session(
    settings: InstallerSettings,
    status: InstallStatus = install_status,
    state: Optional[WizardState] = None,
) -> WizardEngine:
    """Entry point; raises AlreadyInstalledError so installed sites redirect away."""
    return WizardEngine(settings, state=state, status=status)


def _violations_payload(violations: Iterable[Violation], engine: WizardEngine):
    language = engine.state.selected_language
    return [
        {
            "field": v.field,
            "messageKey": v.message_key,
            "message": violation_text(v.message_key, language),
        }
        for v in sorted(violations)
    ]


def view_state(engine: WizardEngine) -> Dict[str, Any]:
    """JSON-only snapshot of the session for the presentation layer."""
    state = engine.state
    return {
        "step": state.step.name,
        "stepIndex": state.current_step,
        "language": state.selected_language.value,
        "languages": [
            {"tag": language.value, "name": name}
            for language, name in LANGUAGE_NAMES.items()
        ],
        "intro": intro_text(state.selected_language),
        "fields": {
            name: value
            for name, value in state.step_values(state.step).items()
            if name not in SECRET_FIELDS
        },
        "installed": state.installed,
        "violations": [],
    }


async def _apply(engine: WizardEngine, action: Any, request: Mapping[str, Any]) -> Dict[str, Any]:
    fields = request.get("fields") or {}

    if action == "advance":
        violations = await engine.advance(fields)
        payload = view_state(engine)
        payload["violations"] = _violations_payload(violations, engine)
        return payload

    if action == "retreat":
        engine.retreat()
        return view_state(engine)

    if action == "test":
        result = await engine.run_probe(fields)
        payload = view_state(engine)
        payload["probe"] = result.to_dict()
        return payload

    if action == "selectLanguage":
        engine.select_language(request.get("language", ""))
        return view_state(engine)

    raise ValueError(f"Unknown action '{action}'; expected one of {', '.join(ACTIONS)}.")


async def handle_request(engine: WizardEngine, request: Mapping[str, Any]) -> Dict[str, Any]:
    action = request.get("action")
    try:
        return await _apply(engine, action, request)
    except WizardError as e:
        log.warning("Request '%s' failed at %s: %s", action, e.stage, e)
        payload = view_state(engine)
        payload["error"] = {"stage": e.stage, "message": str(e), "fatal": e.fatal}
        return payload
