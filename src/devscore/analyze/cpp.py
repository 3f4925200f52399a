from __future__ import annotations

import re

from devscore.analyze.lexical import (
    ErrorHandlingProbes,
    brace_nesting_depth,
    count_long_brace_functions,
    count_matching_probes,
    count_poor_naming,
    count_token,
    missing_error_handling,
)
from devscore.analyze.metrics import StaticMetrics

_COUT_RE = re.compile(r"cout\s*<<")

# return-type name(...) {
_SIGNATURE_RE = re.compile(r"\w+\s+\w+\s*\([^)]*\)\s*\{")

SECURITY_PROBES = (
    re.compile(r"gets\s*\("),
    re.compile(r"strcpy\s*\("),
    re.compile(r"strcat\s*\("),
    re.compile(r"sprintf\s*\("),
)

ERROR_HANDLING = ErrorHandlingProbes(
    try_block=re.compile(r"try\s*\{"),
    catch_block=re.compile(r"catch\s*\("),
    risky_operation=re.compile(r"fopen|ifstream|ofstream"),
)


def analyze_source(src: str) -> StaticMetrics:
    return StaticMetrics(
        nested_loops=brace_nesting_depth(src),
        console_logs=count_token(src, _COUT_RE),
        long_functions=count_long_brace_functions(src, _SIGNATURE_RE),
        security_risks=count_matching_probes(src, SECURITY_PROBES),
        poor_naming=count_poor_naming(src),
        missing_error_handling=missing_error_handling(src, ERROR_HANDLING),
    )
