from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .automata import ValidatedAutomaton
from .simulation import SimulationResult, Verdict, run


@dataclass(frozen=True)
class TestCase:
    __test__ = False

    tokens: tuple[str, ...]
    expected: bool
    label: str = ""

    @staticmethod
    def from_raw(raw_tokens: Iterable[str] | str, expected: bool, label: str = "") -> "TestCase":
        return TestCase(tokens=tuple(raw_tokens), expected=expected, label=label)


@dataclass(frozen=True)
class TestResult:
    __test__ = False

    case: TestCase
    result: SimulationResult

    @property
    def actual(self) -> bool:
        return self.result.accepted

    @property
    def stuck(self) -> bool:
        return self.result.verdict is Verdict.STUCK

    @property
    def passed(self) -> bool:
        return self.actual == self.case.expected


def run_test_cases(automaton: ValidatedAutomaton, test_cases: Sequence[TestCase]) -> List[TestResult]:
    results: List[TestResult] = []
    for case in test_cases:
        results.append(TestResult(case=case, result=run(automaton, case.tokens)))
    return results


def summarize_results(results: Sequence[TestResult]) -> dict[str, int]:
    summary = {"total": len(results), "passed": 0, "failed": 0}
    for result in results:
        if result.passed:
            summary["passed"] += 1
        else:
            summary["failed"] += 1
    return summary
