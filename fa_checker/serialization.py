from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

from .automata import Automaton, AutomatonDraft, AutomatonParseError, Kind, Transition


def to_payload(automaton: Union[Automaton, AutomatonDraft]) -> Dict[str, Any]:
    """Plain dict with every field of the automaton, ready for ``json.dump``."""
    draft = automaton.to_draft() if isinstance(automaton, Automaton) else automaton
    return {
        "type": draft.kind.value,
        "states": list(draft.states),
        "alphabet": list(draft.alphabet),
        "transitions": [
            {"from": t.source, "input": t.symbol, "to": t.destination} for t in draft.transitions
        ],
        "startState": draft.start,
        "acceptStates": list(draft.accept),
    }


def from_payload(payload: Mapping[str, Any]) -> AutomatonDraft:
    if not isinstance(payload, Mapping):
        raise AutomatonParseError("Automaton payload must be a mapping.")
    return AutomatonDraft(
        kind=Kind.parse(payload.get("type", "")),
        states=tuple(_require_string_sequence(payload, "states")),
        alphabet=tuple(_require_string_sequence(payload, "alphabet")),
        transitions=tuple(_require_transitions(payload)),
        start=_require_string(payload, "startState"),
        accept=tuple(_require_string_sequence(payload, "acceptStates")),
    )


def load_automaton(path: Union[str, Path]) -> AutomatonDraft:
    with open(path, "r", encoding="utf-8") as handle:
        payload = json.load(handle)
    return from_payload(payload)


def dump_automaton(automaton: Union[Automaton, AutomatonDraft], path: Union[str, Path]) -> Path:
    target = Path(path)
    with open(target, "w", encoding="utf-8") as handle:
        json.dump(to_payload(automaton), handle, indent=2)
        handle.write("\n")
    return target.resolve()


def _require_string_sequence(payload: Mapping[str, Any], key: str) -> List[str]:
    value = payload.get(key)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise AutomatonParseError(f"Payload field '{key}' must be a list of strings.")
    return list(value)


def _require_string(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise AutomatonParseError(f"Payload field '{key}' must be a string.")
    return value


def _require_transitions(payload: Mapping[str, Any]) -> List[Transition]:
    entries = payload.get("transitions")
    if not isinstance(entries, list):
        raise AutomatonParseError("Payload field 'transitions' must be a list.")
    transitions: List[Transition] = []
    for index, entry in enumerate(entries, start=1):
        if not isinstance(entry, Mapping):
            raise AutomatonParseError(f"Transition #{index} must be an object with 'from', 'input', 'to'.")
        fields = [entry.get(key) for key in ("from", "input", "to")]
        if not all(isinstance(field, str) for field in fields):
            raise AutomatonParseError(
                f"Transition #{index} needs string 'from', 'input' and 'to' fields."
            )
        transitions.append(Transition(*fields))
    return transitions
