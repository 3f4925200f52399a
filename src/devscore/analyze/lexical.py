"""Line-oriented heuristics shared by the per-language analyzers.

None of these helpers parse code. They scan text line by line and count
regex matches, so comments and string literals are treated like any other
text. Each helper is total: any string yields a non-negative integer.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

NESTING_THRESHOLD = 3
LONG_FUNCTION_LINES = 50
GENERIC_NAME_LIMIT = 2

LOOP_COUNTERS = frozenset({"i", "j", "k"})
GENERIC_NAMES = ("temp", "tmp", "data", "val", "foo", "bar", "test")

BRACE_LOOP_RE = re.compile(r"(?:for|while)\s*\([^)]*\)")
INDENT_LOOP_RE = re.compile(r"^\s*(?:for|while)\s+")
INDENT_DEF_RE = re.compile(r"^\s*def\s+\w+\s*\(")
DECLARATION_RE = re.compile(r"(?:const|let|var)\s+([a-z])\s*=")

_GENERIC_NAME_RES = tuple((name, re.compile(rf"\b{name}\b")) for name in GENERIC_NAMES)


class Probe(Protocol):
    def search(self, text: str) -> object: ...


@dataclass(frozen=True)
class OrderedTokenProbe:
    """Fires when one line holds every token in order.

    Same answer as ``re.search("A.*B.*C", text)`` without backtracking:
    taking the earliest occurrence of each token leaves the most room for
    the rest, so one left-to-right pass per line decides the match.
    """

    tokens: tuple[str, ...]

    def search(self, text: str) -> bool:
        for line in text.split("\n"):
            pos = 0
            for token in self.tokens:
                idx = line.find(token, pos)
                if idx < 0:
                    break
                pos = idx + len(token)
            else:
                return True
        return False


@dataclass(frozen=True)
class ErrorHandlingProbes:
    try_block: re.Pattern[str]
    catch_block: re.Pattern[str]
    risky_operation: re.Pattern[str]


def split_lines(src: str) -> list[str]:
    return src.split("\n")


def _indent_of(line: str) -> int:
    # Column of the first non-whitespace character, -1 for blank lines.
    stripped = line.lstrip()
    if not stripped:
        return -1
    return len(line) - len(stripped)


def _reported_depth(depth: int) -> int:
    return depth if depth >= NESTING_THRESHOLD else 0


def brace_nesting_depth(src: str) -> int:
    """Deepest loop nesting for brace-delimited code, 0 below the threshold.

    Coarse per-line balance: a loop header bumps the counter, a line holding
    any ``}`` drops it by one.
    """
    max_depth = 0
    depth = 0
    for line in split_lines(src):
        if BRACE_LOOP_RE.search(line):
            depth += 1
            max_depth = max(max_depth, depth)
        if "}" in line:
            depth = max(0, depth - 1)
    return _reported_depth(max_depth)


def indent_nesting_depth(src: str) -> int:
    """Deepest loop nesting for indentation-delimited code, 0 below the threshold."""
    max_depth = 0
    enclosing: list[int] = []
    for line in split_lines(src):
        indent = _indent_of(line)
        if indent < 0:
            continue
        while enclosing and indent <= enclosing[-1]:
            enclosing.pop()
        if INDENT_LOOP_RE.match(line):
            enclosing.append(indent)
            max_depth = max(max_depth, len(enclosing))
    return _reported_depth(max_depth)


def count_token(src: str, pattern: re.Pattern[str]) -> int:
    return sum(1 for _ in pattern.finditer(src))


def _brace_delta(line: str) -> int:
    return line.count("{") - line.count("}")


def count_long_brace_functions(src: str, signature: re.Pattern[str], limit: int = LONG_FUNCTION_LINES) -> int:
    count = 0
    in_function = False
    balance = 0
    span = 0
    for line in split_lines(src):
        if not in_function:
            if not signature.search(line):
                continue
            balance = _brace_delta(line)
            span = 1
            in_function = balance > 0
            continue
        span += 1
        balance += _brace_delta(line)
        if balance <= 0:
            if span > limit:
                count += 1
            in_function = False
    if in_function and span > limit:
        count += 1
    return count


def count_long_indent_functions(src: str, limit: int = LONG_FUNCTION_LINES) -> int:
    count = 0
    in_function = False
    def_indent = 0
    span = 0
    for line in split_lines(src):
        indent = _indent_of(line)
        if in_function and indent >= 0 and indent <= def_indent:
            if span > limit:
                count += 1
            in_function = False
        if not in_function:
            if INDENT_DEF_RE.match(line):
                in_function = True
                def_indent = indent
                span = 1
            continue
        span += 1
    if in_function and span > limit:
        count += 1
    return count


def count_matching_probes(src: str, probes: Iterable[Probe]) -> int:
    # Distinct probes that fire, not total matches.
    return sum(1 for probe in probes if probe.search(src))


def count_poor_naming(src: str) -> int:
    issues = sum(1 for m in DECLARATION_RE.finditer(src) if m.group(1) not in LOOP_COUNTERS)
    for _name, pattern in _GENERIC_NAME_RES:
        if count_token(src, pattern) > GENERIC_NAME_LIMIT:
            issues += 1
    return issues


def missing_error_handling(src: str, probes: ErrorHandlingProbes) -> int:
    risky = count_token(src, probes.risky_operation)
    if not risky:
        return 0
    tries = count_token(src, probes.try_block)
    catches = count_token(src, probes.catch_block)
    if tries == 0 or catches == 0:
        return 1
    return 0
