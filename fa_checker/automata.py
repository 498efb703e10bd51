from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, NamedTuple, Sequence, Tuple, Union


class AutomatonError(Exception):
    """Base meltdown for automata drama."""


class AutomatonParseError(AutomatonError, ValueError):
    """Raw text or payload that never made it to a draft."""


class AutomatonValidationError(AutomatonError):
    """Draft is cursed: one of the structural invariants does not hold."""


class EmptyStateSet(AutomatonValidationError):
    def __init__(self) -> None:
        super().__init__("Need at least one state, shocker.")


class EmptyAlphabet(AutomatonValidationError):
    def __init__(self) -> None:
        super().__init__("Need at least one alphabet symbol.")


class InvalidLabel(AutomatonValidationError):
    def __init__(self, role: str, label: object) -> None:
        super().__init__(f"{role} must be non-empty strings, got {label!r}.")
        self.role = role
        self.label = label


class DuplicateState(AutomatonValidationError):
    def __init__(self, state: str) -> None:
        super().__init__(f"State '{state}' is declared more than once.")
        self.state = state


class DuplicateSymbol(AutomatonValidationError):
    def __init__(self, symbol: str) -> None:
        super().__init__(f"Alphabet symbol '{symbol}' is declared more than once.")
        self.symbol = symbol


class UnknownStartState(AutomatonValidationError):
    def __init__(self, state: str) -> None:
        super().__init__(f"Start state '{state}' must be one of the defined states.")
        self.state = state


class UnknownAcceptState(AutomatonValidationError):
    def __init__(self, state: str) -> None:
        super().__init__(f"Accept state '{state}' must be one of the defined states.")
        self.state = state


class InvalidTransition(AutomatonValidationError):
    def __init__(self, transition: "Transition") -> None:
        super().__init__(
            f"Transition '{transition}' is invalid. Ensure all states and inputs exist."
        )
        self.transition = transition


class NonDeterministicTransition(AutomatonValidationError):
    def __init__(self, source: str, symbol: str) -> None:
        super().__init__(
            f"DFA cannot have multiple transitions for '{source}' on input '{symbol}'."
        )
        self.source = source
        self.symbol = symbol


class Kind(enum.Enum):
    DETERMINISTIC = "DFA"
    NONDETERMINISTIC = "NFA"

    @classmethod
    def parse(cls, value: Union["Kind", str]) -> "Kind":
        if isinstance(value, Kind):
            return value
        if isinstance(value, str):
            text = value.strip().lower()
            if text in {"dfa", "deterministic"}:
                return cls.DETERMINISTIC
            if text in {"nfa", "nondeterministic"}:
                return cls.NONDETERMINISTIC
        raise AutomatonParseError(f"Automaton type must be either 'DFA' or 'NFA', got {value!r}.")


class Transition(NamedTuple):
    source: str
    symbol: str
    destination: str

    def __str__(self) -> str:
        return f"{self.source},{self.symbol},{self.destination}"


def _iter_bits(mask: int) -> Iterable[int]:
    while mask:
        low = mask & -mask
        yield low.bit_length() - 1
        mask ^= low


def _as_transition(entry: object) -> Transition:
    if isinstance(entry, Transition):
        return entry
    if isinstance(entry, str) or not isinstance(entry, (tuple, list)) or len(entry) != 3:
        raise AutomatonParseError(
            f"Transition {entry!r} must be a (source, input, destination) triple."
        )
    return Transition(*entry)


@dataclass(frozen=True)
class AutomatonDraft:
    """Unchecked automaton, straight from parsed input.

    Nothing here is guaranteed to make sense yet. Run it through
    :func:`fa_checker.validation.validate` (or :meth:`build`) to get a
    :class:`DFA` or :class:`NFA` that can actually be simulated.
    """

    kind: Kind
    states: Tuple[str, ...]
    alphabet: Tuple[str, ...]
    transitions: Tuple[Transition, ...]
    start: str
    accept: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", Kind.parse(self.kind))
        object.__setattr__(self, "states", tuple(self.states))
        object.__setattr__(self, "alphabet", tuple(self.alphabet))
        object.__setattr__(
            self, "transitions", tuple(_as_transition(entry) for entry in self.transitions)
        )
        object.__setattr__(self, "accept", tuple(self.accept))

    def build(self) -> "ValidatedAutomaton":
        from .validation import validate

        return validate(self)


_CONSTRUCT_KEY = object()


class Automaton:
    """Validated automaton. Only the validator hands these out."""

    __slots__ = (
        "_draft",
        "_state_to_idx",
        "_symbol_to_idx",
        "_start_idx",
        "_accept_mask",
        "_accept_states",
    )

    kind: Kind

    def __init__(self, draft: AutomatonDraft, *, _key: object = None) -> None:
        if _key is not _CONSTRUCT_KEY:
            raise TypeError(
                f"{type(self).__name__} instances come from fa_checker.validation.validate()."
            )
        self._draft = draft
        self._state_to_idx = {state: idx for idx, state in enumerate(draft.states)}
        self._symbol_to_idx = {symbol: idx for idx, symbol in enumerate(draft.alphabet)}
        self._start_idx = self._state_to_idx[draft.start]
        self._accept_states = frozenset(draft.accept)
        self._accept_mask = self.names_to_bitset(self._accept_states)

    @classmethod
    def _from_checked(cls, draft: AutomatonDraft) -> "Automaton":
        return cls(draft, _key=_CONSTRUCT_KEY)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(states={list(self.states)!r}, alphabet={list(self.alphabet)!r}, "
            f"start_state={self.start_state!r}, accept_states={sorted(self.accept_states)!r}, "
            f"transitions={len(self.transitions)})"
        )

    # ---------------------------------------------------------------
    @property
    def states(self) -> Sequence[str]:
        return self._draft.states

    @property
    def alphabet(self) -> Sequence[str]:
        return self._draft.alphabet

    @property
    def transitions(self) -> Sequence[Transition]:
        return self._draft.transitions

    @property
    def start_state(self) -> str:
        return self._draft.start

    @property
    def accept_states(self) -> FrozenSet[str]:
        return self._accept_states

    @property
    def start_index(self) -> int:
        return self._start_idx

    @property
    def accept_mask(self) -> int:
        return self._accept_mask

    def to_draft(self) -> AutomatonDraft:
        return self._draft

    # ---------------------------------------------------------------
    def transition_from(self, state: str, symbol: str) -> FrozenSet[str]:
        state_idx = self._state_to_idx.get(state)
        symbol_idx = self._symbol_to_idx.get(symbol)
        if state_idx is None or symbol_idx is None:
            return frozenset()
        return self.bitset_to_names(self.successors(state_idx, symbol_idx))

    def successors(self, state_idx: int, symbol_idx: int) -> int:
        """Bitset of the states reachable from ``state_idx`` on ``symbol_idx``."""
        raise NotImplementedError

    @staticmethod
    def tokenize(input_symbols: Iterable[str]) -> List[str]:
        """Plain strings are read one character at a time; symbols are never coerced."""
        return list(input_symbols)

    def encode(self, tokens: Sequence[str]) -> List[int]:
        """Symbol indices for ``tokens``; -1 marks a symbol outside the alphabet."""
        return [self._symbol_to_idx.get(token, -1) for token in tokens]

    def state_name(self, state_idx: int) -> str:
        return self._draft.states[state_idx]

    def names_to_bitset(self, names: Iterable[str]) -> int:
        mask = 0
        for name in names:
            mask |= 1 << self._state_to_idx[name]
        return mask

    def bitset_to_names(self, bitset: int) -> FrozenSet[str]:
        return frozenset(self._draft.states[idx] for idx in _iter_bits(bitset))


class DFA(Automaton):
    __slots__ = ("_delta",)

    kind = Kind.DETERMINISTIC

    def __init__(self, draft: AutomatonDraft, *, _key: object = None) -> None:
        super().__init__(draft, _key=_key)
        self._delta = self._build_delta()

    def _build_delta(self) -> Tuple[Tuple[int, ...], ...]:
        # -1 marks a missing transition; the walk halts there.
        table: List[List[int]] = [[-1] * len(self.alphabet) for _ in self.states]
        for source, symbol, destination in self.transitions:
            table[self._state_to_idx[source]][self._symbol_to_idx[symbol]] = self._state_to_idx[
                destination
            ]
        return tuple(tuple(row) for row in table)

    def next_index(self, state_idx: int, symbol_idx: int) -> int:
        if symbol_idx < 0:
            return -1
        return self._delta[state_idx][symbol_idx]

    def successors(self, state_idx: int, symbol_idx: int) -> int:
        destination = self.next_index(state_idx, symbol_idx)
        return 0 if destination < 0 else 1 << destination


class NFA(Automaton):
    __slots__ = ("_delta",)

    kind = Kind.NONDETERMINISTIC

    def __init__(self, draft: AutomatonDraft, *, _key: object = None) -> None:
        super().__init__(draft, _key=_key)
        self._delta = self._build_delta()

    def _build_delta(self) -> Tuple[Tuple[int, ...], ...]:
        table: List[List[int]] = [[0] * len(self.alphabet) for _ in self.states]
        for source, symbol, destination in self.transitions:
            table[self._state_to_idx[source]][self._symbol_to_idx[symbol]] |= (
                1 << self._state_to_idx[destination]
            )
        return tuple(tuple(row) for row in table)

    def successors(self, state_idx: int, symbol_idx: int) -> int:
        if symbol_idx < 0:
            return 0
        return self._delta[state_idx][symbol_idx]


ValidatedAutomaton = Union[DFA, NFA]
