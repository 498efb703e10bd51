"""Acceptance checks for validated automata.

A DFA is walked one state at a time and halts on the first missing
transition. An NFA is explored level by level: the frontier is the set of
every state reachable after the prefix read so far, kept as a bitset, so the
cost stays at O(len(input) * |states|^2) no matter how many paths exist.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Sequence, Tuple, Union

from .automata import DFA, NFA, AutomatonDraft, ValidatedAutomaton
from .validation import validate

logger = logging.getLogger(__name__)

Step = Tuple[str, str, str]


class Verdict(enum.Enum):
    ACCEPTED = "accept"
    REJECTED = "reject"
    STUCK = "stuck"


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of one run.

    ``STUCK`` means the input could not be read to the end (a DFA hit a
    missing transition, or an NFA ran out of live states) after ``consumed``
    symbols. ``REJECTED`` means the whole input was read but no accept state
    was reached. Both count as rejection for :func:`accepts`.
    """

    verdict: Verdict
    final_states: FrozenSet[str]
    consumed: int

    @property
    def accepted(self) -> bool:
        return self.verdict is Verdict.ACCEPTED


def accepts(
    automaton: Union[ValidatedAutomaton, AutomatonDraft], input_symbols: Iterable[str]
) -> bool:
    return run(automaton, input_symbols).accepted


def run(
    automaton: Union[ValidatedAutomaton, AutomatonDraft], input_symbols: Iterable[str]
) -> SimulationResult:
    checked = _ensure_validated(automaton)
    tokens = checked.tokenize(input_symbols)
    symbol_ids = checked.encode(tokens)
    if isinstance(checked, DFA):
        return _walk(checked, symbol_ids)
    if isinstance(checked, NFA):
        return _explore(checked, symbol_ids)
    raise TypeError(f"Unsupported automaton type {type(checked).__name__}.")


def _ensure_validated(automaton: Union[ValidatedAutomaton, AutomatonDraft]) -> ValidatedAutomaton:
    if isinstance(automaton, (DFA, NFA)):
        return automaton
    if isinstance(automaton, AutomatonDraft):
        # Raises the typed validation error instead of simulating garbage.
        return validate(automaton)
    raise TypeError(f"Cannot simulate a {type(automaton).__name__}.")


def _walk(dfa: DFA, symbol_ids: Sequence[int]) -> SimulationResult:
    current = dfa.start_index
    for position, symbol_id in enumerate(symbol_ids):
        destination = dfa.next_index(current, symbol_id)
        if destination < 0:
            logger.debug(
                "DFA stuck in %s after %d of %d symbols",
                dfa.state_name(current),
                position,
                len(symbol_ids),
            )
            return SimulationResult(Verdict.STUCK, frozenset({dfa.state_name(current)}), position)
        current = destination
    verdict = Verdict.ACCEPTED if dfa.accept_mask & (1 << current) else Verdict.REJECTED
    return SimulationResult(verdict, frozenset({dfa.state_name(current)}), len(symbol_ids))


def _subset_step(nfa: NFA, frontier: int, symbol_id: int) -> int:
    mask = 0
    temp = frontier
    while temp:
        bit = temp & -temp
        temp ^= bit
        mask |= nfa.successors(bit.bit_length() - 1, symbol_id)
    return mask


def _explore(nfa: NFA, symbol_ids: Sequence[int]) -> SimulationResult:
    frontier = 1 << nfa.start_index
    for position, symbol_id in enumerate(symbol_ids):
        frontier = _subset_step(nfa, frontier, symbol_id)
        if not frontier:
            # An empty frontier never comes back, so the verdict is already known.
            logger.debug("NFA frontier emptied after %d of %d symbols", position, len(symbol_ids))
            return SimulationResult(Verdict.STUCK, frozenset(), position)
    verdict = Verdict.ACCEPTED if frontier & nfa.accept_mask else Verdict.REJECTED
    return SimulationResult(verdict, nfa.bitset_to_names(frontier), len(symbol_ids))


def transition_path(dfa: DFA, input_symbols: Iterable[str]) -> Tuple[List[Step], bool]:
    """Transitions taken by the DFA walk, plus whether the input was accepted.

    The path stops where the walk got stuck.
    """
    tokens = dfa.tokenize(input_symbols)
    path: List[Step] = []
    current = dfa.start_index
    for token, symbol_id in zip(tokens, dfa.encode(tokens)):
        destination = dfa.next_index(current, symbol_id)
        if destination < 0:
            return path, False
        path.append((dfa.state_name(current), token, dfa.state_name(destination)))
        current = destination
    return path, bool(dfa.accept_mask & (1 << current))


def frontiers(nfa: NFA, input_symbols: Iterable[str]) -> List[FrozenSet[str]]:
    """Frontier before any input and after each symbol; stops once it empties."""
    tokens = nfa.tokenize(input_symbols)
    frontier = 1 << nfa.start_index
    levels = [nfa.bitset_to_names(frontier)]
    for symbol_id in nfa.encode(tokens):
        frontier = _subset_step(nfa, frontier, symbol_id)
        levels.append(nfa.bitset_to_names(frontier))
        if not frontier:
            break
    return levels


def highlight_path(
    automaton: ValidatedAutomaton, input_symbols: Iterable[str]
) -> List[Tuple[str, str]]:
    """(source, destination) edges used while reading the input."""
    tokens = automaton.tokenize(input_symbols)
    if isinstance(automaton, DFA):
        path, _ = transition_path(automaton, tokens)
        return [(source, destination) for source, _, destination in path]
    edges: List[Tuple[str, str]] = []
    levels = frontiers(automaton, tokens)
    for token, here, there in zip(tokens, levels, levels[1:]):
        for source in sorted(here):
            for destination in sorted(automaton.transition_from(source, token) & there):
                if (source, destination) not in edges:
                    edges.append((source, destination))
    return edges
