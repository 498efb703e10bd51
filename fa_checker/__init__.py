"""Finite automaton checker.

``fa_checker.run`` is the command line entry point; the simulator's ``run``
is exported as ``simulate``.
"""

from .automata import (
    Automaton,
    AutomatonDraft,
    AutomatonError,
    AutomatonParseError,
    AutomatonValidationError,
    DFA,
    Kind,
    NFA,
    Transition,
)
from .cli import build_session_from_payload, run
from .simulation import SimulationResult, Verdict, accepts, run as simulate
from .validation import validate

__all__ = [
    "Automaton",
    "AutomatonDraft",
    "AutomatonError",
    "AutomatonParseError",
    "AutomatonValidationError",
    "DFA",
    "Kind",
    "NFA",
    "SimulationResult",
    "Transition",
    "Verdict",
    "accepts",
    "build_session_from_payload",
    "run",
    "simulate",
    "validate",
]
