"""
Tests for validate(): ordered checks, typed errors, and the resulting types.
"""

import pytest

from fa_checker.automata import (
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
)
from fa_checker.validation import is_valid, validate


def _draft(kind="DFA", states=("q0", "q1"), alphabet=("a",), transitions=(), start="q0", accept=()):
    return AutomatonDraft(
        kind=kind,
        states=states,
        alphabet=alphabet,
        transitions=transitions,
        start=start,
        accept=accept,
    )


# ============================================================================
# Successful validation
# ============================================================================


class TestValidDrafts:
    """Well-formed drafts come back as the matching validated type."""

    def test_dfa_draft_gives_dfa(self, ab_dfa_draft):
        assert isinstance(validate(ab_dfa_draft), DFA)

    def test_nfa_draft_gives_nfa(self, branching_nfa_draft):
        assert isinstance(validate(branching_nfa_draft), NFA)

    def test_partial_dfa_is_valid(self):
        """Missing (state, symbol) pairs are legal for a DFA."""
        assert isinstance(validate(_draft(transitions=())), DFA)

    def test_empty_accept_set_is_valid(self):
        assert validate(_draft(accept=())).accept_states == frozenset()

    def test_draft_left_untouched(self, ab_dfa_draft):
        before = (ab_dfa_draft.states, ab_dfa_draft.transitions, ab_dfa_draft.accept)
        validate(ab_dfa_draft)
        assert (ab_dfa_draft.states, ab_dfa_draft.transitions, ab_dfa_draft.accept) == before

    def test_is_valid(self, ab_dfa_draft):
        assert is_valid(ab_dfa_draft)
        assert not is_valid(_draft(start="qX"))

    def test_rejects_non_draft(self):
        with pytest.raises(TypeError):
            validate({"states": ["q0"]})


# ============================================================================
# Individual failures
# ============================================================================


class TestValidationFailures:
    """Each broken invariant raises its own error carrying the culprit."""

    def test_unknown_start_state(self):
        with pytest.raises(UnknownStartState) as excinfo:
            validate(_draft(start="qX"))
        assert excinfo.value.state == "qX"
        assert "qX" in str(excinfo.value)

    def test_unknown_accept_state(self):
        with pytest.raises(UnknownAcceptState) as excinfo:
            validate(_draft(accept=("q9",)))
        assert excinfo.value.state == "q9"

    @pytest.mark.parametrize(
        "transition",
        [
            Transition("qX", "a", "q0"),
            Transition("q0", "z", "q1"),
            Transition("q0", "a", "qY"),
        ],
    )
    def test_invalid_transition(self, transition):
        with pytest.raises(InvalidTransition) as excinfo:
            validate(_draft(transitions=(Transition("q0", "a", "q1"), transition)))
        assert excinfo.value.transition == transition

    def test_nondeterministic_pair_in_dfa(self):
        transitions = (Transition("q0", "a", "q0"), Transition("q0", "a", "q1"))
        with pytest.raises(NonDeterministicTransition) as excinfo:
            validate(_draft(transitions=transitions))
        assert (excinfo.value.source, excinfo.value.symbol) == ("q0", "a")

    def test_same_pair_is_fine_for_nfa(self):
        transitions = (Transition("q0", "a", "q0"), Transition("q0", "a", "q1"))
        assert isinstance(validate(_draft(kind=Kind.NONDETERMINISTIC, transitions=transitions)), NFA)

    def test_identical_repeated_triple_counts_in_dfa(self):
        transitions = (Transition("q0", "a", "q1"), Transition("q0", "a", "q1"))
        with pytest.raises(NonDeterministicTransition):
            validate(_draft(transitions=transitions))

    def test_empty_states(self):
        with pytest.raises(EmptyStateSet):
            validate(_draft(states=(), start=""))

    def test_empty_alphabet(self):
        with pytest.raises(EmptyAlphabet):
            validate(_draft(alphabet=()))

    def test_duplicate_state(self):
        with pytest.raises(DuplicateState) as excinfo:
            validate(_draft(states=("q0", "q1", "q0")))
        assert excinfo.value.state == "q0"

    def test_duplicate_symbol(self):
        with pytest.raises(DuplicateSymbol) as excinfo:
            validate(_draft(alphabet=("a", "b", "a")))
        assert excinfo.value.symbol == "a"

    def test_all_errors_share_base_class(self):
        with pytest.raises(AutomatonValidationError):
            validate(_draft(start="qX"))


# ============================================================================
# Check order
# ============================================================================


class TestCheckOrder:
    """The first failing check in the documented order wins."""

    def test_start_checked_before_accept(self):
        with pytest.raises(UnknownStartState):
            validate(_draft(start="qX", accept=("q9",)))

    def test_accept_checked_before_transitions(self):
        with pytest.raises(UnknownAcceptState):
            validate(_draft(accept=("q9",), transitions=(Transition("qX", "a", "q0"),)))

    def test_transitions_checked_before_determinism(self):
        transitions = (
            Transition("q0", "a", "q0"),
            Transition("q0", "a", "q1"),
            Transition("q1", "z", "q0"),
        )
        with pytest.raises(InvalidTransition):
            validate(_draft(transitions=transitions))

    def test_first_offending_transition_reported(self):
        bad_one = Transition("q0", "x", "q1")
        bad_two = Transition("q0", "y", "q1")
        with pytest.raises(InvalidTransition) as excinfo:
            validate(_draft(transitions=(bad_one, bad_two)))
        assert excinfo.value.transition == bad_one


# ============================================================================
# Label types
# ============================================================================


class TestLabelTypes:
    """Labels must be non-empty strings; nothing is coerced."""

    def test_integer_alphabet_rejected(self):
        draft = _draft(
            states=("q0", "q1"),
            alphabet=(0, 1),
            transitions=(("q0", 0, "q1"),),
            accept=("q1",),
        )
        with pytest.raises(InvalidLabel) as excinfo:
            validate(draft)
        assert excinfo.value.label == 0
        assert excinfo.value.role == "Alphabet symbols"

    @pytest.mark.parametrize(
        "overrides, role",
        [
            ({"states": ("q0", None)}, "States"),
            ({"states": ("q0", "")}, "States"),
            ({"start": 7}, "Start state"),
            ({"accept": ("q1", 3)}, "Accept states"),
            ({"transitions": (("q0", "a", 1),)}, "Transition fields"),
            ({"transitions": (("", "a", "q1"),)}, "Transition fields"),
        ],
    )
    def test_non_string_or_blank_labels(self, overrides, role):
        with pytest.raises(InvalidLabel) as excinfo:
            validate(_draft(**overrides))
        assert excinfo.value.role == role

    def test_labels_checked_before_membership(self):
        with pytest.raises(InvalidLabel):
            validate(_draft(start=None, accept=("q9",)))
