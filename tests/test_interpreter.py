import math

import pytest

from formengine.errors import EvaluationError, ScriptThrow, UnresolvedNameError
from formengine.executor import execute_program
from formengine.parser import parse_source
from formengine.runtime.placeholder import Placeholder
from formengine.runtime.stdlib import build_standard_globals
from formengine.runtime.values import UNDEFINED


def run(source: str, **env):
    program = parse_source(source)
    return execute_program(program, {**build_standard_globals(), **env}).value


def test_arithmetic_and_string_concatenation():
    assert run("return 1 + 2 * 3;") == 7
    assert run("return 'a' + 1;") == "a1"
    assert run("return 7 / 2;") == 3.5
    assert run("return 2 ** 10;") == 1024
    assert run("return -7 % 3;") == -1
    assert math.isinf(run("return 1 / 0;"))


def test_number_formatting_in_strings():
    assert run("return '' + 0.1 + 0.2;") == "0.10.2"
    assert run("return String(0.1 + 0.2);") == "0.30000000000000004"
    assert run("return `${10 / 2}`;") == "5"


def test_template_literals():
    assert run("const name = 'Ann'; return `Hi ${name}, ${1 + 1} items`;") == "Hi Ann, 2 items"


def test_equality_semantics():
    assert run("return 1 == '1';") is True
    assert run("return 1 === '1';") is False
    assert run("return null == undefined;") is True
    assert run("return null === undefined;") is False
    assert run("return NaN === NaN;") is False


def test_typeof():
    assert run("return typeof notDeclaredAnywhere;") == "undefined"
    assert run("return typeof (() => 1);") == "function"
    assert run("return typeof null;") == "object"
    assert run("return typeof [];") == "object"
    assert run("return typeof 'x';") == "string"


def test_closures_keep_their_own_state():
    source = """
    function counter() {
      let count = 0;
      return () => { count += 1; return count; };
    }
    const a = counter();
    const b = counter();
    a(); a();
    return [a(), b()];
    """
    assert run(source) == [3, 1]


def test_destructuring_with_defaults_and_rest():
    source = """
    const { name, age = 40, ...rest } = { name: 'Ann', city: 'Oslo', zip: '0150' };
    const [first, , third = 'c'] = ['a', 'b'];
    return [name, age, Object.keys(rest), first, third];
    """
    assert run(source) == ["Ann", 40, ["city", "zip"], "a", "c"]


def test_array_methods():
    assert run("return [1, 2, 3].map(x => x * 2).filter(x => x > 2);") == [4, 6]
    assert run("return [1, 2, 3, 4].reduce((sum, x) => sum + x, 0);") == 10
    assert run("return ['a', 'b'].join('-');") == "a-b"
    assert run("return [3, 1, 2].sort();") == [1, 2, 3]
    assert run("return [1, [2, [3]]].flat(Infinity);") == [1, 2, 3]
    assert run("return [1, 2, 3].includes(2);") is True


def test_string_methods():
    assert run("return 'Hello'.toUpperCase();") == "HELLO"
    assert run("return 'a,b,c'.split(',');") == ["a", "b", "c"]
    assert run("return '  x '.trim();") == "x"
    assert run("return '5'.padStart(3, '0');") == "005"
    assert run("return 'abc'.length;") == 3


def test_object_spread_and_shorthand():
    assert run("const a = { x: 1 }; const y = 2; return { ...a, y };") == {"x": 1, "y": 2}


def test_optional_chaining_and_nullish():
    assert run("const o = null; return o?.a?.b;") is UNDEFINED
    assert run("const o = { a: { b: 5 } }; return o?.a?.b;") == 5
    assert run("return null ?? 'fallback';") == "fallback"
    assert run("return 0 ?? 'fallback';") == 0
    assert run("return 0 || 'fallback';") == "fallback"


def test_control_flow():
    source = """
    const out = [];
    for (const item of [1, 2, 3, 4, 5]) {
      if (item === 2) continue;
      if (item === 5) break;
      out.push(item);
    }
    for (const key in { a: 1, b: 2 }) out.push(key);
    let i = 0;
    while (i < 3) i++;
    do { i--; } while (i > 1);
    out.push(i);
    return out;
    """
    assert run(source) == [1, 3, 4, "a", "b", 1]


def test_switch_falls_through_until_break():
    source = """
    const seen = [];
    switch (2) {
      case 1: seen.push('one');
      case 2: seen.push('two');
      case 3: seen.push('three'); break;
      default: seen.push('default');
    }
    return seen;
    """
    assert run(source) == ["two", "three"]


def test_try_catch_finally():
    source = """
    const log = [];
    try {
      throw new Error('boom');
    } catch (e) {
      log.push(e.message);
    } finally {
      log.push('done');
    }
    return log;
    """
    assert run(source) == ["boom", "done"]


def test_catch_binds_reference_errors():
    assert run("try { missingThing(); } catch (e) { return e.name; }") == "ReferenceError"


def test_uncaught_throw_propagates():
    with pytest.raises(ScriptThrow) as excinfo:
        run("throw 'plain';")
    assert excinfo.value.value == "plain"


def test_const_reassignment_is_an_error():
    with pytest.raises(EvaluationError):
        run("const a = 1; a = 2;")


def test_static_resolution_rejects_unbound_names():
    with pytest.raises(UnresolvedNameError) as excinfo:
        run("return Unknown;")
    assert excinfo.value.name == "Unknown"
    assert str(excinfo.value).startswith("Unknown is not defined")


def test_script_functions_are_python_callable():
    add = run("return (a, b) => a + b;")
    assert add(2, 3) == 5


def test_environment_bindings_are_visible():
    assert run("return double(21);", double=lambda x: x * 2) == 42


def test_json_and_math_globals():
    assert run("return JSON.stringify({ a: [1, 2], b: 'x' });") == '{"a":[1,2],"b":"x"}'
    assert run("return JSON.parse('{\"a\": 1}').a;") == 1
    assert run("return Math.max(1, 5, 3);") == 5
    assert run("return parseInt('42px');") == 42


def test_dynamic_lookup_substitutes_placeholders():
    execution = execute_program(parse_source("return Missing.Thing;"), {}, dynamic=True, warn_missing=False)
    assert execution.value == Placeholder("Missing.Thing")
    assert execution.misses == ["Missing"]


def test_dynamic_lookup_logs_missing_names(caplog):
    with caplog.at_level("WARNING"):
        execute_program(parse_source("const a = Absent;"), {}, dynamic=True)
    assert "[Form] Missing: Absent" in caplog.text


def test_dynamic_lookup_does_not_log_optional_names(caplog):
    with caplog.at_level("WARNING"):
        execute_program(parse_source("const a = InitialData;"), {}, dynamic=True)
    assert "Missing" not in caplog.text


def test_undeclared_assignment_lands_in_module_frame():
    env = {"x": 1}
    execution = execute_program(parse_source("FormComponent = 1; x = 2;"), env, dynamic=True)
    assert execution.module.vars["FormComponent"] == 1
    assert execution.module.vars["x"] == 2
    assert env["x"] == 1


def test_string_growth_is_bounded():
    with pytest.raises(EvaluationError) as excinfo:
        run("return 'ab'.repeat(1e9);")
    assert "Invalid string length" in excinfo.value.message
    with pytest.raises(EvaluationError):
        run("return 'x'.padEnd(Infinity);")
    assert run("return 'ab'.repeat(2);") == "abab"
    assert run("try { 'a'.repeat(-1); } catch (e) { return e.name; }") == "RangeError"


def test_object_helpers_reject_nullish_input():
    with pytest.raises(EvaluationError) as excinfo:
        run("return Object.keys(null);")
    assert "Cannot convert undefined or null to object" in excinfo.value.message
    with pytest.raises(EvaluationError):
        run("return Object.entries(undefined);")
    assert run("try { Object.keys(null); } catch (e) { return e.name; }") == "TypeError"
    assert run("return Object.keys('ab');") == ["0", "1"]