from __future__ import annotations

import re

from devscore.analyze.lexical import (
    ErrorHandlingProbes,
    count_long_indent_functions,
    count_matching_probes,
    count_poor_naming,
    count_token,
    indent_nesting_depth,
    missing_error_handling,
)
from devscore.analyze.metrics import StaticMetrics

_PRINT_RE = re.compile(r"print\s*\(")

SECURITY_PROBES = (
    re.compile(r"password\s*=\s*[\"'][^\"']+[\"']", re.IGNORECASE),
    re.compile(r"api[_-]?key\s*=\s*[\"'][^\"']+[\"']", re.IGNORECASE),
    re.compile(r"secret\s*=\s*[\"'][^\"']+[\"']", re.IGNORECASE),
    re.compile(r"eval\s*\("),
    re.compile(r"exec\s*\("),
    re.compile(r"pickle\.loads"),
)

# "except" also matches inside longer words such as Exception.
ERROR_HANDLING = ErrorHandlingProbes(
    try_block=re.compile(r"try:"),
    catch_block=re.compile(r"except"),
    risky_operation=re.compile(r"open\s*\("),
)


def analyze_source(src: str) -> StaticMetrics:
    return StaticMetrics(
        nested_loops=indent_nesting_depth(src),
        console_logs=count_token(src, _PRINT_RE),
        long_functions=count_long_indent_functions(src),
        security_risks=count_matching_probes(src, SECURITY_PROBES),
        poor_naming=count_poor_naming(src),
        missing_error_handling=missing_error_handling(src, ERROR_HANDLING),
    )
