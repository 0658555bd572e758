"""
Tree-walking interpreter for parsed form scripts.

`Interpreter.run_program` executes a Program inside a module scope and
returns the value of a top-level `return` (or undefined). Script functions
close over their defining scope and are plain Python callables, so the
renderer and host helpers can invoke them directly.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterator, List, Optional

from .. import ast_nodes
from ..errors import SCRIPT_FAILURES, EvaluationError, FormEngineError, ScriptThrow, UnresolvedNameError
from ..ui.elements import Fragment, create_element
from .functions import ScriptFunction, call_value, construct_value
from .members import delete_member, get_member, has_property, iterate, set_member, spread_object
from .scope import Scope
from .stdlib import is_instance, power
from .values import (
    NAN,
    INFINITY,
    UNDEFINED,
    ErrorObject,
    is_nullish,
    loose_equals,
    normalize_number,
    object_keys,
    strict_equals,
    to_int32,
    to_number,
    to_primitive,
    to_property_key,
    to_string,
    to_uint32,
    truthy,
    typeof,
)

logger = logging.getLogger(__name__)


class _Signal(Exception):
    pass


class ReturnSignal(_Signal):
    def __init__(self, value: Any) -> None:
        super().__init__()
        self.value = value


class BreakSignal(_Signal):
    pass


class ContinueSignal(_Signal):
    pass


class ShortCircuit(_Signal):
    """Raised inside an optional chain when `?.` meets null or undefined."""


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


def _divide(left: Any, right: Any) -> Any:
    if right == 0:
        if left == 0 or left != left:
            return NAN
        negative = (left < 0) != (math.copysign(1, right) < 0)
        return -INFINITY if negative else INFINITY
    return normalize_number(left / right)


def _remainder(left: Any, right: Any) -> Any:
    if right == 0 or left != left or right != right or (isinstance(left, float) and math.isinf(left)):
        return NAN
    if isinstance(right, float) and math.isinf(right):
        return left
    if isinstance(left, int) and isinstance(right, int):
        result = abs(left) % abs(right)
        return -result if left < 0 else result
    return normalize_number(math.fmod(left, right))


def add(left: Any, right: Any) -> Any:
    left = to_primitive(left)
    right = to_primitive(right)
    if isinstance(left, str) or isinstance(right, str):
        return to_string(left) + to_string(right)
    return normalize_number(to_number(left) + to_number(right))


def compare(op: str, left: Any, right: Any) -> bool:
    left = to_primitive(left, "number")
    right = to_primitive(right, "number")
    if not (isinstance(left, str) and isinstance(right, str)):
        left, right = to_number(left), to_number(right)
    if op == "<":
        return left < right
    if op == ">":
        return left > right
    if op == "<=":
        return left <= right
    return left >= right


def binary_op(op: str, left: Any, right: Any) -> Any:
    if op == "+":
        return add(left, right)
    if op in {"<", ">", "<=", ">="}:
        return compare(op, left, right)
    if op == "===":
        return strict_equals(left, right)
    if op == "!==":
        return not strict_equals(left, right)
    if op == "==":
        return loose_equals(left, right)
    if op == "!=":
        return not loose_equals(left, right)
    if op == "in":
        return has_property(right, left)
    if op == "instanceof":
        return is_instance(left, right)
    if op in {"&", "|", "^", "<<", ">>", ">>>"}:
        shift = to_uint32(right) & 31
        if op == "&":
            return to_int32(left) & to_int32(right)
        if op == "|":
            return to_int32(left) | to_int32(right)
        if op == "^":
            return to_int32(left) ^ to_int32(right)
        if op == "<<":
            return to_int32(to_int32(left) << shift)
        if op == ">>":
            return to_int32(left) >> shift
        return to_uint32(left) >> shift
    a, b = to_number(left), to_number(right)
    if op == "-":
        return normalize_number(a - b)
    if op == "*":
        return normalize_number(a * b)
    if op == "/":
        return _divide(a, b)
    if op == "%":
        return _remainder(a, b)
    if op == "**":
        return power(a, b)
    raise EvaluationError(f"Unsupported operator '{op}'")


def describe(node: Any) -> str:
    """Source-like name of a callee, for `X is not a function` messages."""
    if isinstance(node, ast_nodes.Identifier):
        return node.name
    if isinstance(node, ast_nodes.ThisExpr):
        return "this"
    if isinstance(node, ast_nodes.Member):
        base = describe(node.object)
        if not node.computed and isinstance(node.property, ast_nodes.Literal):
            return f"{base}.{node.property.value}"
        return f"{base}[...]"
    if isinstance(node, ast_nodes.ChainExpr):
        return describe(node.expression)
    if isinstance(node, ast_nodes.Call):
        return f"{describe(node.callee)}(...)"
    return "expression"


def pattern_names(pattern: Any) -> Iterator[str]:
    if isinstance(pattern, ast_nodes.Identifier):
        yield pattern.name
    elif isinstance(pattern, ast_nodes.AssignmentPattern):
        yield from pattern_names(pattern.target)
    elif isinstance(pattern, ast_nodes.RestElement):
        yield from pattern_names(pattern.argument)
    elif isinstance(pattern, ast_nodes.ObjectPattern):
        for prop in pattern.properties:
            yield from pattern_names(prop.value)
        if pattern.rest is not None:
            yield from pattern_names(pattern.rest)
    elif isinstance(pattern, ast_nodes.ArrayPattern):
        for element in pattern.elements:
            if element is not None:
                yield from pattern_names(element)
        if pattern.rest is not None:
            yield from pattern_names(pattern.rest)


def _var_names(statements: List[Any]) -> Iterator[str]:
    for stmt in statements:
        if isinstance(stmt, ast_nodes.VarDecl):
            if stmt.kind == "var":
                for declarator in stmt.declarations:
                    yield from pattern_names(declarator.target)
        elif isinstance(stmt, ast_nodes.Block):
            yield from _var_names(stmt.body)
        elif isinstance(stmt, ast_nodes.If):
            yield from _var_names([stmt.consequent] + ([stmt.alternate] if stmt.alternate else []))
        elif isinstance(stmt, ast_nodes.For):
            yield from _var_names(([stmt.init] if isinstance(stmt.init, ast_nodes.VarDecl) else []) + [stmt.body])
        elif isinstance(stmt, ast_nodes.ForIn):
            if stmt.kind == "var":
                yield from pattern_names(stmt.target)
            yield from _var_names([stmt.body])
        elif isinstance(stmt, (ast_nodes.While, ast_nodes.DoWhile)):
            yield from _var_names([stmt.body])
        elif isinstance(stmt, ast_nodes.Switch):
            for case in stmt.cases:
                yield from _var_names(case.body)
        elif isinstance(stmt, ast_nodes.Try):
            for block in (stmt.block, stmt.handler, stmt.finalizer):
                if block is not None:
                    yield from _var_names([block])


def _copy_scope(source: Scope) -> Scope:
    copy = Scope(source.parent, source.kind)
    copy.vars = dict(source.vars)
    copy.constants = set(source.constants)
    return copy


# Message fragments of host failures and the script error name they surface as.
_ERROR_NAMES = (
    ("not a function", "TypeError"),
    ("Cannot convert undefined or null", "TypeError"),
    ("Invalid string length", "RangeError"),
    ("Invalid count value", "RangeError"),
)


def _error_name(message: str) -> str:
    for fragment, name in _ERROR_NAMES:
        if fragment in message:
            return name
    return "Error"


class Interpreter:
    """Evaluates statements and expressions against a Scope chain."""

    def __init__(self) -> None:
        self._var_cache: Dict[int, List[str]] = {}

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def run_program(self, program: ast_nodes.Program, scope: Scope) -> Any:
        self.hoist_vars(program.body, scope)
        self.hoist_functions(program.body, scope)
        try:
            for stmt in program.body:
                self.execute(stmt, scope)
        except ReturnSignal as signal:
            return signal.value
        except (BreakSignal, ContinueSignal) as exc:
            raise EvaluationError("Illegal break or continue outside a loop") from exc
        return UNDEFINED

    def call_script_function(self, fn: ScriptFunction, this: Any, args: List[Any]) -> Any:
        node = fn.node
        scope = fn.closure.child("function")
        if not node.is_arrow:
            if node.name and fn.name == node.name:
                scope.vars[node.name] = fn
            scope.vars["this"] = this
            scope.vars["arguments"] = list(args)
        for index, param in enumerate(node.params):
            if isinstance(param, ast_nodes.RestElement):
                self.bind_pattern(param.argument, list(args[index:]), scope, "let")
                break
            value = args[index] if index < len(args) else UNDEFINED
            self.bind_pattern(param, value, scope, "let")
        if node.expression_body:
            return self.evaluate(node.body, scope)
        body = node.body.body
        self.hoist_vars(body, scope, cache_key=id(node))
        self.hoist_functions(body, scope)
        try:
            for stmt in body:
                self.execute(stmt, scope)
        except ReturnSignal as signal:
            return signal.value
        return UNDEFINED

    # ------------------------------------------------------------------
    # Hoisting
    # ------------------------------------------------------------------

    def hoist_vars(self, body: List[Any], scope: Scope, cache_key: Optional[int] = None) -> None:
        names = self._var_cache.get(cache_key) if cache_key is not None else None
        if names is None:
            names = list(dict.fromkeys(_var_names(body)))
            if cache_key is not None:
                self._var_cache[cache_key] = names
        target = scope.function_scope()
        for name in names:
            if name not in target.vars:
                target.vars[name] = UNDEFINED

    def hoist_functions(self, body: List[Any], scope: Scope) -> None:
        for stmt in body:
            if isinstance(stmt, ast_nodes.FunctionDecl):
                scope.declare(stmt.name, ScriptFunction(stmt.function, scope, self, stmt.name), "let")
            elif isinstance(stmt, ast_nodes.Block) and not stmt.scoped:
                self.hoist_functions(stmt.body, scope)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def execute(self, stmt: ast_nodes.Stmt, scope: Scope) -> None:
        try:
            self._execute(stmt, scope)
        except FormEngineError as exc:
            span = getattr(stmt, "span", None)
            if exc.line is None and span is not None:
                exc.line = span.line
                exc.column = span.column
            raise

    def _execute(self, stmt: ast_nodes.Stmt, scope: Scope) -> None:
        if isinstance(stmt, ast_nodes.ExpressionStatement):
            self.evaluate(stmt.expression, scope)
        elif isinstance(stmt, ast_nodes.VarDecl):
            self.declare_vars(stmt, scope)
        elif isinstance(stmt, ast_nodes.FunctionDecl):
            return
        elif isinstance(stmt, ast_nodes.Return):
            value = UNDEFINED if stmt.argument is None else self.evaluate(stmt.argument, scope)
            raise ReturnSignal(value)
        elif isinstance(stmt, ast_nodes.If):
            if truthy(self.evaluate(stmt.test, scope)):
                self.execute(stmt.consequent, scope)
            elif stmt.alternate is not None:
                self.execute(stmt.alternate, scope)
        elif isinstance(stmt, ast_nodes.Block):
            if stmt.scoped:
                self.execute_block(stmt.body, scope.child())
            else:
                for inner in stmt.body:
                    self.execute(inner, scope)
        elif isinstance(stmt, ast_nodes.For):
            self.execute_for(stmt, scope)
        elif isinstance(stmt, ast_nodes.ForIn):
            self.execute_for_in(stmt, scope)
        elif isinstance(stmt, ast_nodes.While):
            while truthy(self.evaluate(stmt.test, scope)):
                try:
                    self.execute(stmt.body, scope)
                except BreakSignal:
                    break
                except ContinueSignal:
                    continue
        elif isinstance(stmt, ast_nodes.DoWhile):
            while True:
                try:
                    self.execute(stmt.body, scope)
                except BreakSignal:
                    break
                except ContinueSignal:
                    pass
                if not truthy(self.evaluate(stmt.test, scope)):
                    break
        elif isinstance(stmt, ast_nodes.Break):
            raise BreakSignal()
        elif isinstance(stmt, ast_nodes.Continue):
            raise ContinueSignal()
        elif isinstance(stmt, ast_nodes.Switch):
            self.execute_switch(stmt, scope)
        elif isinstance(stmt, ast_nodes.Try):
            self.execute_try(stmt, scope)
        elif isinstance(stmt, ast_nodes.Throw):
            value = self.evaluate(stmt.argument, scope)
            message = value.message if isinstance(value, ErrorObject) else to_string(value)
            raise ScriptThrow(message, value=value)
        elif isinstance(stmt, ast_nodes.Empty):
            return
        else:
            raise EvaluationError(f"Unsupported statement {type(stmt).__name__}")

    def execute_block(self, body: List[Any], scope: Scope) -> None:
        self.hoist_functions(body, scope)
        for stmt in body:
            self.execute(stmt, scope)

    def declare_vars(self, stmt: ast_nodes.VarDecl, scope: Scope) -> None:
        for declarator in stmt.declarations:
            if declarator.init is None:
                if stmt.kind == "var":
                    continue
                value = UNDEFINED
            else:
                value = self.evaluate_named(declarator.init, scope, declarator.target)
            self.bind_pattern(declarator.target, value, scope, stmt.kind)

    def execute_for(self, stmt: ast_nodes.For, scope: Scope) -> None:
        loop_scope = scope.child()
        if isinstance(stmt.init, ast_nodes.VarDecl):
            self.declare_vars(stmt.init, loop_scope)
        elif stmt.init is not None:
            self.evaluate(stmt.init, loop_scope)
        # let/const loop variables get a fresh binding per iteration
        per_iteration = isinstance(stmt.init, ast_nodes.VarDecl) and stmt.init.kind != "var"
        current = _copy_scope(loop_scope) if per_iteration else loop_scope
        while True:
            if stmt.test is not None and not truthy(self.evaluate(stmt.test, current)):
                break
            try:
                self.execute(stmt.body, current)
            except BreakSignal:
                break
            except ContinueSignal:
                pass
            if per_iteration:
                current = _copy_scope(current)
            if stmt.update is not None:
                self.evaluate(stmt.update, current)

    def execute_for_in(self, stmt: ast_nodes.ForIn, scope: Scope) -> None:
        value = self.evaluate(stmt.iterable, scope)
        if stmt.of:
            items = iterate(value)
        elif is_nullish(value):
            items = []
        else:
            items = object_keys(value)
        for item in items:
            iteration = scope.child()
            self.bind_pattern(stmt.target, item, iteration, stmt.kind)
            try:
                self.execute(stmt.body, iteration)
            except BreakSignal:
                break
            except ContinueSignal:
                continue

    def execute_switch(self, stmt: ast_nodes.Switch, scope: Scope) -> None:
        value = self.evaluate(stmt.discriminant, scope)
        block = scope.child()
        start = None
        for index, case in enumerate(stmt.cases):
            if case.test is not None and strict_equals(value, self.evaluate(case.test, block)):
                start = index
                break
        if start is None:
            start = next((index for index, case in enumerate(stmt.cases) if case.test is None), None)
        if start is None:
            return
        body = [inner for case in stmt.cases[start:] for inner in case.body]
        try:
            self.execute_block(body, block)
        except BreakSignal:
            return

    def execute_try(self, stmt: ast_nodes.Try, scope: Scope) -> None:
        try:
            try:
                self.execute_block(stmt.block.body, scope.child())
            except SCRIPT_FAILURES as exc:
                if stmt.handler is None:
                    raise
                handler_scope = scope.child()
                if stmt.param is not None:
                    self.bind_pattern(stmt.param, self.error_value(exc), handler_scope, "let")
                self.execute_block(stmt.handler.body, handler_scope)
        finally:
            if stmt.finalizer is not None:
                self.execute_block(stmt.finalizer.body, scope.child())

    def error_value(self, exc: BaseException) -> Any:
        """The value a `catch (e)` clause binds for a host or script failure."""
        if isinstance(exc, ScriptThrow):
            return exc.value
        if isinstance(exc, UnresolvedNameError):
            return ErrorObject(exc.message, "ReferenceError")
        if isinstance(exc, FormEngineError):
            return ErrorObject(exc.message, _error_name(exc.message))
        logger.debug("Host exception surfaced to script catch: %r", exc)
        return ErrorObject(str(exc), "Error")

    # ------------------------------------------------------------------
    # Patterns
    # ------------------------------------------------------------------

    def bind_pattern(self, pattern: Any, value: Any, scope: Scope, kind: Optional[str]) -> None:
        """Bind a declaration (`kind` set) or perform a destructuring assignment (`kind` None)."""
        if isinstance(pattern, ast_nodes.Identifier):
            if kind is None:
                scope.assign(pattern.name, value)
            else:
                scope.declare(pattern.name, value, kind)
        elif isinstance(pattern, ast_nodes.Member):
            obj = self.evaluate(pattern.object, scope)
            set_member(obj, self.member_key(pattern, scope), value)
        elif isinstance(pattern, ast_nodes.AssignmentPattern):
            if value is UNDEFINED:
                value = self.evaluate_named(pattern.default, scope, pattern.target)
            self.bind_pattern(pattern.target, value, scope, kind)
        elif isinstance(pattern, ast_nodes.ObjectPattern):
            if is_nullish(value):
                raise EvaluationError(f"Cannot destructure '{to_string(value)}' as it is {to_string(value)}.")
            used = []
            for prop in pattern.properties:
                key = to_property_key(self.evaluate(prop.key, scope) if prop.computed else prop.key.value)
                used.append(key)
                self.bind_pattern(prop.value, get_member(value, key), scope, kind)
            if pattern.rest is not None:
                rest = {key: item for key, item in spread_object(value).items() if key not in used}
                self.bind_pattern(pattern.rest, rest, scope, kind)
        elif isinstance(pattern, ast_nodes.ArrayPattern):
            items = iterate(value)
            for index, element in enumerate(pattern.elements):
                if element is not None:
                    self.bind_pattern(element, items[index] if index < len(items) else UNDEFINED, scope, kind)
            if pattern.rest is not None:
                self.bind_pattern(pattern.rest, items[len(pattern.elements):], scope, kind)
        elif isinstance(pattern, ast_nodes.RestElement):
            self.bind_pattern(pattern.argument, value, scope, kind)
        else:
            raise EvaluationError("Invalid assignment target")

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def evaluate_named(self, expr: Any, scope: Scope, target: Any) -> Any:
        """Evaluate, naming anonymous functions after the binding they initialise."""
        if isinstance(expr, ast_nodes.FunctionExpr) and not expr.name and isinstance(target, ast_nodes.Identifier):
            return ScriptFunction(expr, scope, self, target.name)
        return self.evaluate(expr, scope)

    def member_key(self, node: ast_nodes.Member, scope: Scope) -> Any:
        if node.computed:
            return self.evaluate(node.property, scope)
        return node.property.value

    def evaluate(self, expr: Any, scope: Scope) -> Any:
        if isinstance(expr, ast_nodes.Literal):
            return expr.value
        if isinstance(expr, ast_nodes.Identifier):
            if expr.name == "undefined" and not scope.has("undefined"):
                return UNDEFINED
            return scope.lookup(expr.name)
        if isinstance(expr, ast_nodes.Member):
            obj = self.evaluate(expr.object, scope)
            if expr.optional and is_nullish(obj):
                raise ShortCircuit()
            return get_member(obj, self.member_key(expr, scope))
        if isinstance(expr, ast_nodes.Call):
            return self.evaluate_call(expr, scope)
        if isinstance(expr, (ast_nodes.JsxElement, ast_nodes.JsxFragment)):
            return self.evaluate_markup(expr, scope)
        if isinstance(expr, ast_nodes.TemplateLiteral):
            parts = [expr.quasis[0]]
            for index, inner in enumerate(expr.expressions):
                parts.append(to_string(to_primitive(self.evaluate(inner, scope), "string")))
                parts.append(expr.quasis[index + 1])
            return "".join(parts)
        if isinstance(expr, ast_nodes.Binary):
            return binary_op(expr.op, self.evaluate(expr.left, scope), self.evaluate(expr.right, scope))
        if isinstance(expr, ast_nodes.Logical):
            left = self.evaluate(expr.left, scope)
            if expr.op == "&&":
                return self.evaluate(expr.right, scope) if truthy(left) else left
            if expr.op == "||":
                return left if truthy(left) else self.evaluate(expr.right, scope)
            return self.evaluate(expr.right, scope) if is_nullish(left) else left
        if isinstance(expr, ast_nodes.Conditional):
            branch = expr.consequent if truthy(self.evaluate(expr.test, scope)) else expr.alternate
            return self.evaluate(branch, scope)
        if isinstance(expr, ast_nodes.Unary):
            return self.evaluate_unary(expr, scope)
        if isinstance(expr, ast_nodes.Assign):
            return self.evaluate_assign(expr, scope)
        if isinstance(expr, ast_nodes.Update):
            return self.evaluate_update(expr, scope)
        if isinstance(expr, ast_nodes.FunctionExpr):
            return ScriptFunction(expr, scope, self)
        if isinstance(expr, ast_nodes.ArrayLiteral):
            items: List[Any] = []
            for element in expr.elements:
                if element is None:
                    items.append(UNDEFINED)
                elif isinstance(element, ast_nodes.Spread):
                    items.extend(iterate(self.evaluate(element.argument, scope)))
                else:
                    items.append(self.evaluate(element, scope))
            return items
        if isinstance(expr, ast_nodes.ObjectLiteral):
            return self.evaluate_object(expr, scope)
        if isinstance(expr, ast_nodes.ChainExpr):
            try:
                return self.evaluate(expr.expression, scope)
            except ShortCircuit:
                return UNDEFINED
        if isinstance(expr, ast_nodes.ThisExpr):
            return scope.lookup_this()
        if isinstance(expr, ast_nodes.New):
            callee = self.evaluate(expr.callee, scope)
            return construct_value(callee, self.evaluate_args(expr.args, scope), describe(expr.callee))
        if isinstance(expr, ast_nodes.Sequence):
            result = UNDEFINED
            for inner in expr.expressions:
                result = self.evaluate(inner, scope)
            return result
        if isinstance(expr, ast_nodes.Spread):
            raise EvaluationError("Spread syntax is not valid here")
        raise EvaluationError(f"Unsupported expression {type(expr).__name__}")

    def evaluate_args(self, args: List[Any], scope: Scope) -> List[Any]:
        values: List[Any] = []
        for arg in args:
            if isinstance(arg, ast_nodes.Spread):
                values.extend(iterate(self.evaluate(arg.argument, scope)))
            else:
                values.append(self.evaluate(arg, scope))
        return values

    def evaluate_call(self, expr: ast_nodes.Call, scope: Scope) -> Any:
        callee = expr.callee
        this: Any = UNDEFINED
        if isinstance(callee, ast_nodes.Member):
            this = self.evaluate(callee.object, scope)
            if callee.optional and is_nullish(this):
                raise ShortCircuit()
            func = get_member(this, self.member_key(callee, scope))
        else:
            func = self.evaluate(callee, scope)
        if expr.optional and is_nullish(func):
            raise ShortCircuit()
        if not callable(func):
            raise EvaluationError(f"{describe(callee)} is not a function")
        return call_value(func, self.evaluate_args(expr.args, scope), this, describe(callee))

    def evaluate_object(self, expr: ast_nodes.ObjectLiteral, scope: Scope) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for prop in expr.properties:
            if isinstance(prop, ast_nodes.Spread):
                result.update(spread_object(self.evaluate(prop.argument, scope)))
                continue
            if prop.shorthand and isinstance(prop.value, ast_nodes.Assign):
                raise EvaluationError("Invalid shorthand property initializer")
            key = to_property_key(self.evaluate(prop.key, scope) if prop.computed else prop.key.value)
            value_node = prop.value
            if isinstance(value_node, ast_nodes.FunctionExpr) and not value_node.name:
                result[key] = ScriptFunction(value_node, scope, self, key)
            else:
                result[key] = self.evaluate(value_node, scope)
        return result

    def evaluate_unary(self, expr: ast_nodes.Unary, scope: Scope) -> Any:
        op = expr.op
        if op == "typeof":
            operand = expr.operand
            if isinstance(operand, ast_nodes.Identifier) and not scope.has(operand.name):
                return "undefined"
            return typeof(self.evaluate(operand, scope))
        if op == "delete":
            target = expr.operand
            if isinstance(target, ast_nodes.ChainExpr):
                target = target.expression
            if isinstance(target, ast_nodes.Member):
                return delete_member(self.evaluate(target.object, scope), self.member_key(target, scope))
            return True
        value = self.evaluate(expr.operand, scope)
        if op == "!":
            return not truthy(value)
        if op == "-":
            number = to_number(value)
            return normalize_number(-number) if isinstance(number, float) else -number
        if op == "+":
            return to_number(value)
        if op == "~":
            return ~to_int32(value)
        if op == "void":
            return UNDEFINED
        raise EvaluationError(f"Unsupported unary operator '{op}'")

    def evaluate_assign(self, expr: ast_nodes.Assign, scope: Scope) -> Any:
        target = expr.target
        if isinstance(target, (ast_nodes.ObjectPattern, ast_nodes.ArrayPattern)):
            value = self.evaluate(expr.value, scope)
            self.bind_pattern(target, value, scope, None)
            return value
        if isinstance(target, ast_nodes.Identifier):
            def read() -> Any:
                return scope.lookup(target.name)

            def write(value: Any) -> None:
                scope.assign(target.name, value)

        elif isinstance(target, ast_nodes.Member):
            obj = self.evaluate(target.object, scope)
            key = self.member_key(target, scope)

            def read() -> Any:
                return get_member(obj, key)

            def write(value: Any) -> None:
                set_member(obj, key, value)

        else:
            raise EvaluationError("Invalid left-hand side in assignment")

        op = expr.op
        if op == "=":
            value = self.evaluate_named(expr.value, scope, target)
        elif op in {"&&=", "||=", "??="}:
            current = read()
            if op == "&&=" and not truthy(current):
                return current
            if op == "||=" and truthy(current):
                return current
            if op == "??=" and not is_nullish(current):
                return current
            value = self.evaluate_named(expr.value, scope, target)
        else:
            value = binary_op(op[:-1], read(), self.evaluate(expr.value, scope))
        write(value)
        return value

    def evaluate_update(self, expr: ast_nodes.Update, scope: Scope) -> Any:
        target = expr.target
        delta = 1 if expr.op == "++" else -1
        if isinstance(target, ast_nodes.Identifier):
            old = to_number(scope.lookup(target.name))
            new = normalize_number(old + delta)
            scope.assign(target.name, new)
        elif isinstance(target, ast_nodes.Member):
            obj = self.evaluate(target.object, scope)
            key = self.member_key(target, scope)
            old = to_number(get_member(obj, key))
            new = normalize_number(old + delta)
            set_member(obj, key, new)
        else:
            raise EvaluationError("Invalid left-hand side expression in update operation")
        return new if expr.prefix else old

    # ------------------------------------------------------------------
    # Markup
    # ------------------------------------------------------------------

    def evaluate_markup(self, expr: Any, scope: Scope) -> Any:
        children = self.evaluate_children(expr.children, scope)
        if isinstance(expr, ast_nodes.JsxFragment):
            return create_element(Fragment, None, *children)
        if isinstance(expr.tag, ast_nodes.Literal):
            element_type = expr.tag.value
        else:
            element_type = self.evaluate(expr.tag, scope)
        props: Dict[str, Any] = {}
        for attribute in expr.attributes:
            if isinstance(attribute, ast_nodes.JsxSpreadAttribute):
                props.update(spread_object(self.evaluate(attribute.argument, scope)))
            elif attribute.value is None:
                props[attribute.name] = True
            else:
                props[attribute.name] = self.evaluate(attribute.value, scope)
        if element_type is UNDEFINED or element_type is None:
            raise EvaluationError(
                f"Element type is invalid: expected a string or a component but got: {to_string(element_type)}"
            )
        return create_element(element_type, props, *children)

    def evaluate_children(self, children: List[Any], scope: Scope) -> List[Any]:
        values: List[Any] = []
        for child in children:
            if isinstance(child, ast_nodes.Spread):
                values.extend(iterate(self.evaluate(child.argument, scope)))
            else:
                values.append(self.evaluate(child, scope))
        return values
