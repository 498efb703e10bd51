from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

from .automata import Automaton


def _quote(label: str) -> str:
    return '"' + label.replace("\\", "\\\\").replace('"', '\\"') + '"'


def automaton_to_dot(
    automaton: Automaton,
    *,
    graph_name: str | None = None,
    rankdir: str = "LR",
    highlight_path: Sequence[Tuple[str, str]] = (),
) -> str:
    """Graphviz DOT text for ``automaton``; edges in ``highlight_path`` are drawn red."""
    highlighted = set(highlight_path)
    name = graph_name or automaton.kind.value

    lines: List[str] = [f"digraph {_quote(name)} {{", f"  rankdir={rankdir};"]
    lines.append("  node [shape=circle];")
    lines.append("  __start__ [shape=point];")
    lines.append(f"  __start__ -> {_quote(automaton.start_state)};")

    for state in automaton.states:
        if state in automaton.accept_states:
            lines.append(f"  {_quote(state)} [shape=doublecircle];")
        else:
            lines.append(f"  {_quote(state)};")

    for source, destination, labels in _grouped_edges(automaton):
        attributes = [f"label={_quote(', '.join(labels))}"]
        if (source, destination) in highlighted:
            attributes += ['color="red"', 'fontcolor="red"']
        lines.append(f"  {_quote(source)} -> {_quote(destination)} [{', '.join(attributes)}];")

    lines.append("}")
    return "\n".join(lines)


def _grouped_edges(automaton: Automaton) -> Iterable[Tuple[str, str, List[str]]]:
    # One arrow per (source, destination); symbols are merged into its label.
    grouped: Dict[Tuple[str, str], List[str]] = {}
    for source, symbol, destination in automaton.transitions:
        labels = grouped.setdefault((source, destination), [])
        if symbol not in labels:
            labels.append(symbol)
    for (source, destination), labels in sorted(grouped.items()):
        yield source, destination, sorted(labels)


def write_dot(automaton: Automaton, path: str, **kwargs) -> str:
    """Generate a DOT file at `path` and return the path."""
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(automaton_to_dot(automaton, **kwargs) + "\n")
    return path
