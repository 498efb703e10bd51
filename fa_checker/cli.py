from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from .analysis import TestCase, TestResult, run_test_cases, summarize_results
from .automata import AutomatonDraft, AutomatonError, ValidatedAutomaton
from .graphviz import write_dot
from .parsing import parse_form, parse_input
from .serialization import dump_automaton, from_payload
from .simulation import SimulationResult, Verdict, highlight_path, run as simulate
from .validation import validate

logger = logging.getLogger(__name__)

EMPTY_INPUT_LABEL = "<empty>"


@dataclass
class Session:
    automaton: ValidatedAutomaton
    test_cases: List[TestCase] = field(default_factory=list)
    strings: List[Tuple[str, ...]] = field(default_factory=list)

    def first_input(self) -> Optional[Tuple[str, ...]]:
        if self.strings:
            return self.strings[0]
        if self.test_cases:
            return self.test_cases[0].tokens
        return None


def build_session_from_payload(payload: Mapping[str, Any]) -> Session:
    draft = from_payload(payload)
    automaton = validate(draft)
    test_cases = _load_test_cases_from_payload(payload.get("test_cases"), automaton.alphabet)
    return Session(automaton=automaton, test_cases=test_cases)


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="fa-checker",
        description="Validate a DFA/NFA and check which strings it accepts.",
    )
    parser.add_argument("--config", help="Path to a JSON file that defines the automaton.")
    form = parser.add_argument_group("form input", "Define the automaton inline instead of --config.")
    form.add_argument("--type", default="DFA", help="Automaton type: DFA or NFA (default: DFA).")
    form.add_argument("--states", help="Comma separated state names, e.g. 'q0,q1,q2'.")
    form.add_argument("--alphabet", help="Comma separated input symbols, e.g. 'a,b'.")
    form.add_argument(
        "--transitions",
        default="",
        help="Semicolon separated 'source,input,destination' triples, e.g. 'q0,a,q1;q1,b,q2'.",
    )
    form.add_argument("--start", help="Start state.")
    form.add_argument("--accept", default="", help="Comma separated accept states.")
    parser.add_argument(
        "--test",
        dest="strings",
        action="append",
        default=[],
        metavar="STRING",
        help="Input string to check; repeat for several. Use '' for the empty string.",
    )
    parser.add_argument(
        "--tests",
        help="Optional JSON file containing test cases with expected results.",
    )
    parser.add_argument("--dot", help="Write a Graphviz DOT file of the automaton here.")
    parser.add_argument("--save", help="Write the automaton as a JSON payload here.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    package_logger = logging.getLogger("fa_checker")
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def run(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    _configure_logging(args.verbose)
    try:
        session = _build_session(args)
        _display_summary(session.automaton)
        _check_strings(session)
        _run_tests(session)
        _write_outputs(session, args)
    except KeyboardInterrupt:
        print("\nAborted by user.", file=sys.stderr)
        return 130
    except (
        AutomatonError,
        ValueError,
        OSError,
        json.JSONDecodeError,
    ) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def _build_session(args: argparse.Namespace) -> Session:
    if args.config:
        session = _build_from_config(Path(args.config))
    else:
        session = Session(automaton=validate(_draft_from_form(args)))

    alphabet = session.automaton.alphabet
    session.strings.extend(tuple(parse_input(raw, alphabet)) for raw in args.strings)
    if args.tests:
        session.test_cases.extend(_load_test_cases_from_file(Path(args.tests), alphabet))
    logger.info("loaded %r", session.automaton)
    return session


def _build_from_config(path: Path) -> Session:
    with open(path, "r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        raise ValueError("Config file must define a JSON object.")
    return build_session_from_payload(payload)


def _draft_from_form(args: argparse.Namespace) -> AutomatonDraft:
    missing = [
        flag
        for flag, value in (("--states", args.states), ("--alphabet", args.alphabet), ("--start", args.start))
        if value is None
    ]
    if missing:
        raise ValueError(f"Provide --config or the form flags; missing {', '.join(missing)}.")
    return parse_form(args.type, args.states, args.alphabet, args.transitions, args.start, args.accept)


def _display_summary(automaton: ValidatedAutomaton) -> None:
    print("Automaton Summary")
    print(f"  Type: {automaton.kind.value}")
    print(f"  States: {', '.join(automaton.states)}")
    print(f"  Alphabet: {', '.join(automaton.alphabet)}")
    print(f"  Start state: {automaton.start_state}")
    accept_text = ", ".join(sorted(automaton.accept_states)) if automaton.accept_states else "<none>"
    print(f"  Accept states: {accept_text}")
    print("  Transitions:")
    if not automaton.transitions:
        print("    <none>")
    for transition in automaton.transitions:
        print(f"    {transition.source} --{transition.symbol}--> {transition.destination}")


def _describe(result: SimulationResult) -> str:
    if result.verdict is Verdict.STUCK:
        return f"reject (stuck after {result.consumed} symbol(s))"
    return result.verdict.value


def _check_strings(session: Session) -> None:
    if not session.strings:
        return
    print("\nChecking strings...")
    for tokens in session.strings:
        tokens_text = " ".join(tokens) if tokens else EMPTY_INPUT_LABEL
        print(f"    {tokens_text} -> {_describe(simulate(session.automaton, tokens))}")


def _run_tests(session: Session) -> List[TestResult]:
    if not session.test_cases:
        return []
    print("\nRunning test cases...")
    results = run_test_cases(session.automaton, session.test_cases)
    summary = summarize_results(results)
    print(f"  Passed {summary['passed']} of {summary['total']} test cases.")
    for result in results:
        tokens_text = " ".join(result.case.tokens) if result.case.tokens else EMPTY_INPUT_LABEL
        expected_text = "accept" if result.case.expected else "reject"
        status = "PASS" if result.passed else "FAIL"
        label_prefix = f"{result.case.label}: " if result.case.label else ""
        print(
            f"    [{status}] {label_prefix}{tokens_text} -> expected {expected_text}, got {_describe(result.result)}"
        )
    return results


def _write_outputs(session: Session, args: argparse.Namespace) -> None:
    if args.dot:
        tokens = session.first_input()
        path = highlight_path(session.automaton, tokens) if tokens is not None else []
        write_dot(session.automaton, args.dot, highlight_path=path)
        print(f"\nDOT file written: {Path(args.dot).resolve()}")
    if args.save:
        target = dump_automaton(session.automaton, args.save)
        print(f"\nAutomaton saved: {target}")


def _load_test_cases_from_file(path: Path, alphabet: Sequence[str]) -> List[TestCase]:
    with open(path, "r", encoding="utf-8") as handle:
        payload = json.load(handle)
    return _load_test_cases_from_payload(payload, alphabet)


def _load_test_cases_from_payload(data: Any, alphabet: Sequence[str]) -> List[TestCase]:
    if data is None:
        return []
    if isinstance(data, dict):
        entries = data.get("cases", [])
    else:
        entries = data
    if not isinstance(entries, list):
        raise ValueError("Test cases must be provided as a list.")
    cases: List[TestCase] = []
    for index, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            raise ValueError("Each test case must be an object with 'input' and 'expected'.")
        raw_tokens = entry.get("input", [])
        expected = bool(entry.get("expected", False))
        label = entry.get("label") or f"case {index}"
        tokens = _normalize_test_case_tokens(raw_tokens, alphabet)
        cases.append(TestCase(tokens=tokens, expected=expected, label=label))
    return cases


def _normalize_test_case_tokens(raw_tokens: Any, alphabet: Sequence[str]) -> Tuple[str, ...]:
    if isinstance(raw_tokens, str):
        return tuple(parse_input(raw_tokens, alphabet))
    if isinstance(raw_tokens, list):
        if not all(isinstance(token, str) for token in raw_tokens):
            raise ValueError("Test case symbols must be strings.")
        return tuple(token.strip() for token in raw_tokens)
    raise ValueError("Test case 'input' must be a string or a list of strings.")
