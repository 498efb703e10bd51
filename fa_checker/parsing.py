"""Form-style text input.

States, alphabet and accept states are comma separated lists; transitions
are ``source,input,destination`` triples separated by semicolons::

    parse_form("DFA", "q0, q1, q2", "a, b", "q0,a,q1; q1,b,q2", "q0", "q2")
"""

from __future__ import annotations

import re
from typing import List, Sequence, Union

from .automata import AutomatonDraft, AutomatonParseError, Kind, Transition

TOKEN_SPLIT_RE = re.compile(r"[\s,]+")


def split_labels(text: str) -> List[str]:
    """Comma separated labels, trimmed, blanks dropped."""
    if not text:
        return []
    return [label.strip() for label in text.split(",") if label.strip()]


def parse_transitions(text: str) -> List[Transition]:
    transitions: List[Transition] = []
    if not text:
        return transitions
    for segment in text.split(";"):
        segment = segment.strip()
        if not segment:
            continue
        fields = [field.strip() for field in segment.split(",")]
        if len(fields) != 3 or not all(fields):
            raise AutomatonParseError(
                f"Transition '{segment}' must look like 'source,input,destination'."
            )
        transitions.append(Transition(*fields))
    return transitions


def parse_form(
    kind: Union[Kind, str],
    states: str,
    alphabet: str,
    transitions: str,
    start: str,
    accept: str,
) -> AutomatonDraft:
    return AutomatonDraft(
        kind=Kind.parse(kind),
        states=tuple(split_labels(states)),
        alphabet=tuple(split_labels(alphabet)),
        transitions=tuple(parse_transitions(transitions)),
        start=(start or "").strip(),
        accept=tuple(split_labels(accept)),
    )


def parse_input(raw: str, alphabet: Sequence[str]) -> List[str]:
    """Split a test string into symbols.

    Whitespace or commas separate tokens; otherwise a word is read one
    character per symbol when every alphabet symbol is a single character.
    """
    raw = raw.strip()
    if not raw:
        return []
    if TOKEN_SPLIT_RE.search(raw):
        return [token for token in TOKEN_SPLIT_RE.split(raw) if token]
    if all(len(symbol) == 1 for symbol in alphabet):
        return list(raw)
    return [raw]
