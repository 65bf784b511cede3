"""Display fields derived from raw edge-start payloads.

These are pure functions.  The compiler-name heuristic splits on the first
whitespace run only; it does not understand shell quoting or escapes, and
returns ``UNKNOWN_COMPILER`` instead of failing when nothing usable is found.
"""

from __future__ import annotations

from collections.abc import Iterable

from buildwatch.models.messages import InputBinding, InputKind, OutputBinding

UNKNOWN_COMPILER = "???"

_PATH_SEPARATORS = ("/", "\\")


def _final_component(path: str) -> str:
    for sep in _PATH_SEPARATORS:
        path = path.rsplit(sep, 1)[-1]
    return path


def compiler_name(command: str) -> str:
    """Return the short executable name of *command*.

    ``"/usr/bin/g++ -c a.cpp"`` gives ``"g++"``; an empty command, or a
    first token ending in a path separator, gives ``"???"``.
    """
    tokens = command.split(None, 1)
    if not tokens:
        return UNKNOWN_COMPILER
    name = _final_component(tokens[0])
    return name or UNKNOWN_COMPILER


def explicit_inputs(bindings: Iterable[InputBinding]) -> tuple[str, ...]:
    """Paths of the explicit inputs, in producer order."""
    return tuple(b.path for b in bindings if b.kind == InputKind.EXPLICIT)


def output_paths(bindings: Iterable[OutputBinding]) -> tuple[str, ...]:
    """Paths of every output, explicit or implicit, in producer order."""
    return tuple(b.path for b in bindings)


def file_label(path: str) -> str:
    """Short label for a path in the edge list: its file name."""
    return _final_component(path) or path
