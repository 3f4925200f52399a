from __future__ import annotations

import re

from devscore.analyze.lexical import (
    ErrorHandlingProbes,
    OrderedTokenProbe,
    brace_nesting_depth,
    count_long_brace_functions,
    count_long_indent_functions,
    count_matching_probes,
    count_poor_naming,
    indent_nesting_depth,
    missing_error_handling,
)

_JS_SIGNATURE = re.compile(r"function\s+\w+\s*\([^)]*\)\s*\{|\w+\s*\([^)]*\)\s*\{")


def test_brace_nesting_three_levels() -> None:
    src = """
for (let i = 0; i < n; i++) {
  for (let j = 0; j < n; j++) {
    for (let k = 0; k < n; k++) {
      total += i * j * k;
    }
  }
}
"""
    assert brace_nesting_depth(src) == 3


def test_brace_nesting_empty_headers() -> None:
    src = "for () {\nfor () {\nfor () {\n}\n}\n}\n"
    assert brace_nesting_depth(src) == 3


def test_brace_nesting_below_threshold_reports_zero() -> None:
    src = """
for (const a of xs) {
  while (ok(a)) {
    step();
  }
}
"""
    assert brace_nesting_depth(src) == 0


def test_brace_nesting_reports_true_depth_above_threshold() -> None:
    src = "\n".join(["while (x) {"] * 4 + ["}"] * 4)
    assert brace_nesting_depth(src) == 4


def test_brace_nesting_sequential_loops_do_not_stack() -> None:
    src = """
for (a) {
}
for (b) {
}
for (c) {
}
"""
    assert brace_nesting_depth(src) == 0


def test_indent_nesting_three_levels() -> None:
    src = """
def f(xs):
    for a in xs:
        for b in xs:
            for c in xs:
                pass
"""
    assert indent_nesting_depth(src) == 3


def test_indent_nesting_sibling_loops_are_not_nested() -> None:
    src = """
for a in xs:
    for b in xs:
        pass
    for c in xs:
        pass
"""
    assert indent_nesting_depth(src) == 0


def test_indent_nesting_while_loops_and_blank_lines() -> None:
    src = """
while a:
    while b:

        while c:
            while d:
                pass
"""
    assert indent_nesting_depth(src) == 4


def test_indent_nesting_resets_after_dedent() -> None:
    src = """
for a in xs:
    for b in xs:
        pass
x = 1
for c in xs:
    for d in xs:
        pass
"""
    assert indent_nesting_depth(src) == 0


def test_long_brace_function_counted() -> None:
    src = "function big() {\n" + "  x++;\n" * 60 + "}\n"
    assert count_long_brace_functions(src, _JS_SIGNATURE) == 1


def test_short_brace_function_not_counted() -> None:
    src = "function small() {\n" + "  x++;\n" * 10 + "}\n"
    assert count_long_brace_functions(src, _JS_SIGNATURE) == 0


def test_long_brace_function_with_inner_blocks() -> None:
    body = "  if (x) {\n    x--;\n  }\n" * 20
    src = "function big() {\n" + body + "}\n"
    assert count_long_brace_functions(src, _JS_SIGNATURE) == 1


def test_unclosed_brace_function_still_evaluated() -> None:
    src = "function big() {\n" + "  x++;\n" * 60
    assert count_long_brace_functions(src, _JS_SIGNATURE) == 1


def test_one_line_brace_function_is_short() -> None:
    src = "function f() { return 1; }\n" + "x++;\n" * 60
    assert count_long_brace_functions(src, _JS_SIGNATURE) == 0


def test_long_indent_function_counted_at_dedent() -> None:
    src = "def big():\n" + "    x = 1\n" * 55 + "def small():\n    return 1\n"
    assert count_long_indent_functions(src) == 1


def test_long_indent_function_open_at_end_of_input() -> None:
    src = "def big():\n" + "    x = 1\n" * 55
    assert count_long_indent_functions(src) == 1


def test_nested_def_is_part_of_enclosing_body() -> None:
    src = "def outer():\n    def inner():\n" + "        pass\n" * 55
    assert count_long_indent_functions(src) == 1


def test_exactly_fifty_lines_is_not_long() -> None:
    src = "def f():\n" + "    pass\n" * 48 + "    return 1"
    assert count_long_indent_functions(src) == 0


def test_probes_count_distinct_matches() -> None:
    probes = (re.compile(r"eval\s*\("), re.compile(r"exec\s*\("))
    assert count_matching_probes("eval(a)\neval(b)\neval(c)", probes) == 1
    assert count_matching_probes("eval(a)\nexec(b)", probes) == 2
    assert count_matching_probes("", probes) == 0


def test_poor_naming_single_letters_exempt_loop_counters() -> None:
    src = "const x = 1;\nlet y = 2;\nvar i = 0;\nlet j = 0;\nlet k = 0;"
    assert count_poor_naming(src) == 2


def test_poor_naming_generic_names_over_limit() -> None:
    assert count_poor_naming("data = data + data") == 1
    assert count_poor_naming("data = data") == 0
    assert count_poor_naming("database database database") == 0


def test_poor_naming_sums_both_kinds() -> None:
    src = "const a = temp + temp + temp;\nfoo(); foo(); foo();"
    assert count_poor_naming(src) == 3


def test_missing_error_handling_presence_check() -> None:
    probes = ErrorHandlingProbes(
        try_block=re.compile(r"try\s*\{"),
        catch_block=re.compile(r"catch\s*\("),
        risky_operation=re.compile(r"await|\.then\("),
    )
    assert missing_error_handling("const r = await fetch(url);", probes) == 1
    assert missing_error_handling("try {\n  await fetch(url);\n} catch (e) {}", probes) == 0
    assert missing_error_handling("try {\n  await fetch(url);\n} finally {}", probes) == 1
    assert missing_error_handling("const r = compute();", probes) == 0
    # Any try/catch in the file satisfies the check.
    assert missing_error_handling("try { a(); } catch (e) {}\nload().then(go);", probes) == 0


def test_ordered_tokens_match_on_one_line() -> None:
    sql_concat = OrderedTokenProbe(("SELECT", "FROM", "WHERE", "+"))
    assert sql_concat.search('q = "SELECT * FROM users WHERE id = " + id')
    assert sql_concat.search("SELECTFROMWHERE+")
    assert not sql_concat.search('q = "SELECT * FROM users WHERE id = 1"')
    assert not sql_concat.search("WHERE + FROM SELECT")
    # Tokens split across lines do not count.
    assert not sql_concat.search('q = "SELECT * FROM users"\n + " WHERE id = " + id')
    assert not sql_concat.search("")


def test_ordered_tokens_mix_with_regexes() -> None:
    probes = (OrderedTokenProbe(("SELECT", "FROM", "WHERE", "+")), re.compile(r"eval\s*\("))
    assert count_matching_probes('eval(x)\n"SELECT a FROM b WHERE c=" + d', probes) == 2
