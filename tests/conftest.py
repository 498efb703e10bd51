"""
Shared automata for the fa_checker test suite.

Drafts are returned unvalidated so tests can exercise the validator too.
"""

import pytest

from fa_checker.automata import AutomatonDraft, Kind, Transition


@pytest.fixture
def ab_dfa_draft():
    """DFA that accepts exactly "ab"; q0 has no transition on b."""
    return AutomatonDraft(
        kind=Kind.DETERMINISTIC,
        states=("q0", "q1", "q2"),
        alphabet=("a", "b"),
        transitions=(Transition("q0", "a", "q1"), Transition("q1", "b", "q2")),
        start="q0",
        accept=("q2",),
    )


@pytest.fixture
def branching_nfa_draft():
    """NFA where q0 branches on a to q1 and q2; only q2 accepts."""
    return AutomatonDraft(
        kind=Kind.NONDETERMINISTIC,
        states=("q0", "q1", "q2"),
        alphabet=("a",),
        transitions=(Transition("q0", "a", "q1"), Transition("q0", "a", "q2")),
        start="q0",
        accept=("q2",),
    )


@pytest.fixture
def ends_with_ab_nfa_draft():
    """NFA over {a, b} accepting strings ending in "ab"."""
    return AutomatonDraft(
        kind="NFA",
        states=("s", "m", "f"),
        alphabet=("a", "b"),
        transitions=(
            ("s", "a", "s"),
            ("s", "b", "s"),
            ("s", "a", "m"),
            ("m", "b", "f"),
        ),
        start="s",
        accept=("f",),
    )


@pytest.fixture
def parity_dfa_draft():
    """Total DFA accepting strings with an even number of 1s."""
    return AutomatonDraft(
        kind="DFA",
        states=("even", "odd"),
        alphabet=("0", "1"),
        transitions=(
            ("even", "0", "even"),
            ("even", "1", "odd"),
            ("odd", "0", "odd"),
            ("odd", "1", "even"),
        ),
        start="even",
        accept=("even",),
    )
