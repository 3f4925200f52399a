from __future__ import annotations

import re

from devscore.analyze.lexical import (
    ErrorHandlingProbes,
    OrderedTokenProbe,
    brace_nesting_depth,
    count_long_brace_functions,
    count_matching_probes,
    count_poor_naming,
    count_token,
    missing_error_handling,
)
from devscore.analyze.metrics import StaticMetrics

_CONSOLE_LOG_RE = re.compile(r"console\.log")

# function f(...) {  |  const f = (...) => {  |  f(...) {
_SIGNATURE_RE = re.compile(
    r"function\s+\w+\s*\([^)]*\)\s*\{"
    r"|const\s+\w+\s*=\s*\([^)]*\)\s*=>\s*\{"
    r"|\w+\s*\([^)]*\)\s*\{"
)

SECURITY_PROBES = (
    re.compile(r"password\s*=\s*[\"'][^\"']+[\"']", re.IGNORECASE),
    re.compile(r"api[_-]?key\s*=\s*[\"'][^\"']+[\"']", re.IGNORECASE),
    re.compile(r"secret\s*=\s*[\"'][^\"']+[\"']", re.IGNORECASE),
    re.compile(r"token\s*=\s*[\"'][^\"']+[\"']", re.IGNORECASE),
    re.compile(r"eval\s*\("),
    # SELECT ... FROM ... WHERE ... + on one line
    OrderedTokenProbe(("SELECT", "FROM", "WHERE", "+")),
)

ERROR_HANDLING = ErrorHandlingProbes(
    try_block=re.compile(r"try\s*\{"),
    catch_block=re.compile(r"catch\s*\("),
    risky_operation=re.compile(r"await|\.then\("),
)


def analyze_source(src: str) -> StaticMetrics:
    return StaticMetrics(
        nested_loops=brace_nesting_depth(src),
        console_logs=count_token(src, _CONSOLE_LOG_RE),
        long_functions=count_long_brace_functions(src, _SIGNATURE_RE),
        security_risks=count_matching_probes(src, SECURITY_PROBES),
        poor_naming=count_poor_naming(src),
        missing_error_handling=missing_error_handling(src, ERROR_HANDLING),
    )
