from __future__ import annotations

import logging
from typing import Iterable, Set, Tuple

from .automata import (
    DFA,
    NFA,
    AutomatonDraft,
    AutomatonValidationError,
    DuplicateState,
    DuplicateSymbol,
    EmptyAlphabet,
    EmptyStateSet,
    InvalidLabel,
    InvalidTransition,
    Kind,
    NonDeterministicTransition,
    Transition,
    UnknownAcceptState,
    UnknownStartState,
    ValidatedAutomaton,
)

logger = logging.getLogger(__name__)


def validate(draft: AutomatonDraft) -> ValidatedAutomaton:
    """Check ``draft`` and hand back the matching validated automaton.

    Checks run in a fixed order and stop at the first failure, raising the
    :class:`AutomatonValidationError` subclass that names the offending
    state, symbol or transition. Before these, states and alphabet must be
    non-empty, every label a non-empty string (:class:`InvalidLabel`), and
    no state or symbol declared twice.

    1. the start state is declared (:class:`UnknownStartState`)
    2. every accept state is declared (:class:`UnknownAcceptState`)
    3. every transition uses declared states and symbols (:class:`InvalidTransition`)
    4. a DFA has at most one transition per (source, symbol) pair
       (:class:`NonDeterministicTransition`)

    Missing transitions are fine for a DFA; they just reject at simulation time.
    The draft is never modified.
    """
    if not isinstance(draft, AutomatonDraft):
        raise TypeError(f"Expected an AutomatonDraft, got {type(draft).__name__}.")

    _validate_structure(draft)

    state_set = set(draft.states)
    if draft.start not in state_set:
        raise UnknownStartState(draft.start)

    for state in draft.accept:
        if state not in state_set:
            raise UnknownAcceptState(state)

    alphabet_set = set(draft.alphabet)
    for transition in draft.transitions:
        if (
            transition.source not in state_set
            or transition.symbol not in alphabet_set
            or transition.destination not in state_set
        ):
            raise InvalidTransition(transition)

    if draft.kind is Kind.DETERMINISTIC:
        _validate_determinism(draft.transitions)
        automaton: ValidatedAutomaton = DFA._from_checked(draft)
    else:
        automaton = NFA._from_checked(draft)

    logger.debug(
        "validated %s with %d states, %d symbols, %d transitions",
        draft.kind.value,
        len(draft.states),
        len(draft.alphabet),
        len(draft.transitions),
    )
    return automaton


def is_valid(draft: AutomatonDraft) -> bool:
    try:
        validate(draft)
    except AutomatonValidationError as exc:
        logger.debug("draft rejected: %s", exc)
        return False
    return True


def _validate_structure(draft: AutomatonDraft) -> None:
    if not draft.states:
        raise EmptyStateSet()
    if not draft.alphabet:
        raise EmptyAlphabet()
    _validate_labels("States", draft.states)
    _validate_labels("Alphabet symbols", draft.alphabet)
    _validate_labels("Start state", (draft.start,))
    _validate_labels("Accept states", draft.accept)
    for transition in draft.transitions:
        _validate_labels("Transition fields", transition)
    duplicate = _first_duplicate(draft.states)
    if duplicate is not None:
        raise DuplicateState(duplicate)
    duplicate = _first_duplicate(draft.alphabet)
    if duplicate is not None:
        raise DuplicateSymbol(duplicate)


def _validate_labels(role: str, labels: Iterable[object]) -> None:
    for label in labels:
        if not isinstance(label, str) or not label:
            raise InvalidLabel(role, label)


def _validate_determinism(transitions: Iterable[Transition]) -> None:
    # Counting matters, destinations do not: q0,a,q1 twice is still two edges.
    seen: Set[Tuple[str, str]] = set()
    for transition in transitions:
        pair = (transition.source, transition.symbol)
        if pair in seen:
            raise NonDeterministicTransition(*pair)
        seen.add(pair)


def _first_duplicate(values: Iterable[str]):
    seen: Set[str] = set()
    for value in values:
        if value in seen:
            return value
        seen.add(value)
    return None
