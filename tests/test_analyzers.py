from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from devscore.analyze import dispatch
from devscore.analyze.dispatch import analyze, analyze_file
from devscore.analyze.metrics import StaticMetrics
from devscore.analyze.scoring import applied_penalty, static_penalty

JS_SECRETS = """
const password = "abc123";
const result = eval(userInput);
"""

PY_CLEAN = """
def add(left, right):
    return left + right
"""


def test_js_password_and_eval_scenario() -> None:
    metrics = analyze(JS_SECRETS, "javascript")
    assert metrics.security_risks == 2
    penalty = static_penalty(metrics)
    assert penalty == 3
    assert applied_penalty(penalty) == 6


def test_python_password_and_eval_scenario() -> None:
    metrics = analyze('password = "abc123"\nresult = eval(expr)\n', "python")
    assert metrics.security_risks == 2
    assert applied_penalty(static_penalty(metrics)) == 6


def test_js_sixty_line_function() -> None:
    src = "function big() {\n" + "  total += 1;\n" * 60 + "}\n"
    metrics = analyze(src, "javascript")
    assert metrics.long_functions == 1
    assert static_penalty(metrics) == 2


def test_js_arrow_function_signature() -> None:
    src = "const handler = (req, res) => {\n" + "  total += 1;\n" * 55 + "};\n"
    assert analyze(src, "javascript").long_functions == 1


def test_js_console_logs_and_sql_concat() -> None:
    src = '\n'.join(["console.log(1);"] * 7 + ['const q = "SELECT * FROM users WHERE id = " + id;'])
    metrics = analyze(src, "javascript")
    assert metrics.console_logs == 7
    assert metrics.security_risks == 1
    # console > 5 and a security risk
    assert static_penalty(metrics) == 4


def test_js_missing_error_handling() -> None:
    assert analyze("const r = await fetch(url);", "javascript").missing_error_handling == 1
    guarded = "try {\n  const r = await fetch(url);\n} catch (err) {\n  report(err);\n}"
    assert analyze(guarded, "javascript").missing_error_handling == 0


def test_typescript_uses_js_rules() -> None:
    assert analyze(JS_SECRETS, "ts") == analyze(JS_SECRETS, "javascript")
    assert analyze(JS_SECRETS, "TypeScript") == analyze(JS_SECRETS, "javascript")


def test_python_clean_source() -> None:
    assert analyze(PY_CLEAN, "python").is_clean


def test_python_prints_and_file_handling() -> None:
    src = "print('a')\nprint ('b')\nwith open('f') as fh:\n    body = fh.read()\n"
    metrics = analyze(src, "python")
    assert metrics.console_logs == 2
    assert metrics.missing_error_handling == 1

    guarded = "try:\n    fh = open('f')\nexcept OSError:\n    fh = None\n"
    assert analyze(guarded, "python").missing_error_handling == 0


def test_python_pickle_and_exec() -> None:
    metrics = analyze("obj = pickle.loads(blob)\nexec(code)\n", "python")
    assert metrics.security_risks == 2


def test_python_nested_loops() -> None:
    src = """
for a in xs:
    for b in ys:
        for c in zs:
            total += 1
"""
    metrics = analyze(src, "python")
    assert metrics.nested_loops == 3
    assert static_penalty(metrics) == 2


def test_cpp_unsafe_calls_and_cout() -> None:
    src = """
#include <cstring>
int main() {
    char buf[16];
    gets(buf);
    strcpy(buf, "x");
    cout << buf;
    return 0;
}
"""
    metrics = analyze(src, "cpp")
    assert metrics.security_risks == 2
    assert metrics.console_logs == 1
    assert metrics.long_functions == 0
    assert metrics.missing_error_handling == 0


def test_cpp_stream_without_try() -> None:
    assert analyze('std::ifstream in("f.txt");', "c++").missing_error_handling == 1


def test_cpp_long_function() -> None:
    src = "int main() {\n" + "    total += 1;\n" * 55 + "}\n"
    assert analyze(src, "cpp").long_functions == 1


def test_unrouted_language_yields_zero_metrics() -> None:
    assert analyze("eval(x);", "java") == StaticMetrics.zero()
    assert analyze("eval(x);", "ruby") == StaticMetrics.zero()
    assert analyze("eval(x);", None) == StaticMetrics.zero()
    assert analyze("eval(x);", "") == StaticMetrics.zero()


def test_routes_map_language_to_family() -> None:
    assert analyze("eval(x);", "java", {"java": "js"}).security_risks == 1
    assert analyze("eval(x);", "java", {"java": "javascript"}).security_risks == 1


def test_unrouted_language_warns_once(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="devscore.analyze.dispatch"):
        analyze("x", "brainfuck")
        analyze("y", "brainfuck")
    warnings = [r for r in caplog.records if "brainfuck" in r.getMessage()]
    assert len(warnings) == 1


def test_degenerate_inputs_never_raise() -> None:
    assert analyze("", "python") == StaticMetrics.zero()
    assert analyze(None, "cpp") == StaticMetrics.zero()
    metrics = analyze(b"\xff\xfe\x00 eval(x) \x80", "javascript")
    assert metrics.security_risks == 1


def test_analysis_is_idempotent() -> None:
    assert analyze(JS_SECRETS, "javascript") == analyze(JS_SECRETS, "javascript")


def test_analyze_file_uses_extension(tmp_path: Path) -> None:
    path = tmp_path / "app.py"
    path.write_text('password = "hunter2"\n', encoding="utf-8")
    assert analyze_file(path).security_risks == 1


def test_analyze_file_missing_path(tmp_path: Path) -> None:
    assert analyze_file(tmp_path / "gone.js") == StaticMetrics.zero()


def test_metrics_wire_form() -> None:
    metrics = StaticMetrics(nested_loops=3, missing_error_handling=1)
    data = metrics.to_dict()
    assert data["nestedLoops"] == 3
    assert data["missingErrorHandling"] == 1
    assert StaticMetrics.from_dict(data) == metrics
    assert StaticMetrics.from_dict({"missingErrorHandling": 4, "consoleLogs": "x"}) == StaticMetrics(
        missing_error_handling=1
    )
    assert StaticMetrics.from_dict(None) == StaticMetrics.zero()


def test_sql_concat_check_is_linear_on_long_lines() -> None:
    src = "SELECT FROM WHERE " * 2000
    started = time.perf_counter()
    metrics = analyze(src, "javascript")
    assert time.perf_counter() - started < 2.0
    assert metrics.security_risks == 0


def test_non_string_language_yields_zero_metrics() -> None:
    assert analyze("eval(x);", 5) == StaticMetrics.zero()  # type: ignore[arg-type]


def test_unrouted_language_warns_once_across_threads(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="devscore.analyze.dispatch"):
        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(lambda _: analyze("x", "befunge"), range(64)))
    warnings = [r for r in caplog.records if "befunge" in r.getMessage()]
    assert len(warnings) == 1


def test_warned_languages_stay_bounded() -> None:
    for idx in range(dispatch._WARNED_LIMIT + 10):
        analyze("x", f"lang{idx}")
    assert len(dispatch._WARNED) <= dispatch._WARNED_LIMIT
