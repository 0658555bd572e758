"""Expression parsing helpers attached to `Parser` as methods.

Binary operators are parsed by precedence climbing. Arrow functions are
recognised by trying a parameter list and backtracking when no `=>` follows.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from .. import ast_nodes
from ..errors import ParseError

__all__ = [
    "parse_expression",
    "parse_assignment",
    "parse_conditional",
    "parse_binary",
    "parse_unary",
    "parse_postfix",
    "parse_call_member",
    "parse_new",
    "parse_arguments",
    "parse_primary",
    "parse_template",
    "parse_array_literal",
    "parse_object_literal",
    "parse_property_key",
    "parse_function_expr",
    "parse_function_rest",
    "parse_params",
    "parse_function_body",
    "try_parse_arrow",
    "parse_arrow_body",
    "parse_binding_target",
    "parse_binding_element",
    "parse_object_pattern",
    "parse_array_pattern",
    "to_pattern",
]

BINARY_PRECEDENCE = {
    "??": 1,
    "||": 2,
    "&&": 3,
    "|": 4,
    "^": 5,
    "&": 6,
    "==": 7,
    "!=": 7,
    "===": 7,
    "!==": 7,
    "<": 8,
    ">": 8,
    "<=": 8,
    ">=": 8,
    "in": 8,
    "instanceof": 8,
    "<<": 9,
    ">>": 9,
    ">>>": 9,
    "+": 10,
    "-": 10,
    "*": 11,
    "/": 11,
    "%": 11,
    "**": 12,
}

LOGICAL_OPERATORS = {"&&", "||", "??"}

ASSIGNMENT_OPERATORS = {
    "=",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "**=",
    "<<=",
    ">>=",
    ">>>=",
    "&=",
    "|=",
    "^=",
    "&&=",
    "||=",
    "??=",
}


def _node_error(message: str, node: Any) -> ParseError:
    span = getattr(node, "span", None)
    if span is None:
        return ParseError(message)
    return ParseError(message, span.line, span.column)


def parse_expression(self) -> ast_nodes.Expr:
    start = self.peek()
    expr = self.parse_assignment()
    if not self.check_punct(","):
        return expr
    expressions = [expr]
    while self.match_punct(","):
        expressions.append(self.parse_assignment())
    return ast_nodes.Sequence(expressions=expressions, span=self._span(start))


def parse_assignment(self) -> ast_nodes.Expr:
    start = self.peek()
    arrow = self.try_parse_arrow()
    if arrow is not None:
        return arrow
    left = self.parse_conditional()
    token = self.peek()
    if token.type == "PUNCT" and token.value in ASSIGNMENT_OPERATORS:
        op = self.advance().value
        if op == "=":
            target = self.to_pattern(left)
        elif isinstance(left, (ast_nodes.Identifier, ast_nodes.Member)):
            target = left
        else:
            raise self.error("Invalid left-hand side in assignment", token)
        value = self.parse_assignment()
        return ast_nodes.Assign(op=op, target=target, value=value, span=self._span(start))
    return left


def parse_conditional(self) -> ast_nodes.Expr:
    start = self.peek()
    test = self.parse_binary(0)
    if not self.match_punct("?"):
        return test
    saved_no_in = self.no_in
    self.no_in = False
    try:
        consequent = self.parse_assignment()
    finally:
        self.no_in = saved_no_in
    self.consume_punct(":")
    alternate = self.parse_assignment()
    return ast_nodes.Conditional(test=test, consequent=consequent, alternate=alternate, span=self._span(start))


def parse_binary(self, min_precedence: int) -> ast_nodes.Expr:
    start = self.peek()
    left = self.parse_unary()
    while True:
        token = self.peek()
        if token.type == "PUNCT" or (token.type == "KEYWORD" and token.value in {"in", "instanceof"}):
            op = token.value
        else:
            break
        if op == "in" and self.no_in:
            break
        precedence = BINARY_PRECEDENCE.get(op)
        if precedence is None or precedence < min_precedence:
            break
        self.advance()
        # exponentiation is right-associative
        right = self.parse_binary(precedence if op == "**" else precedence + 1)
        if op in LOGICAL_OPERATORS:
            left = ast_nodes.Logical(op=op, left=left, right=right, span=self._span(start))
        else:
            left = ast_nodes.Binary(op=op, left=left, right=right, span=self._span(start))
    return left


def parse_unary(self) -> ast_nodes.Expr:
    token = self.peek()
    if token.type == "PUNCT" and token.value in {"!", "-", "+", "~"}:
        self.advance()
        return ast_nodes.Unary(op=token.value, operand=self.parse_unary(), span=self._span(token))
    if token.type == "PUNCT" and token.value in {"++", "--"}:
        self.advance()
        target = self.parse_unary()
        if not isinstance(target, (ast_nodes.Identifier, ast_nodes.Member)):
            raise self.error("Invalid left-hand side expression in prefix operation", token)
        return ast_nodes.Update(op=token.value, prefix=True, target=target, span=self._span(token))
    if token.type == "KEYWORD" and token.value in {"typeof", "void", "delete"}:
        self.advance()
        return ast_nodes.Unary(op=token.value, operand=self.parse_unary(), span=self._span(token))
    return self.parse_postfix()


def parse_postfix(self) -> ast_nodes.Expr:
    expr = self.parse_call_member()
    token = self.peek()
    if token.type == "PUNCT" and token.value in {"++", "--"} and not token.newline_before:
        if not isinstance(expr, (ast_nodes.Identifier, ast_nodes.Member)):
            raise self.error("Invalid left-hand side expression in postfix operation", token)
        self.advance()
        return ast_nodes.Update(op=token.value, prefix=False, target=expr, span=self._span(token))
    return expr


def _property_name(self) -> ast_nodes.Literal:
    token = self.peek()
    if token.type not in {"NAME", "KEYWORD"}:
        raise self.error("Expected property name", token)
    self.advance()
    return ast_nodes.Literal(value=token.value, span=self._span(token))


def _computed_property(self) -> ast_nodes.Expr:
    saved_no_in = self.no_in
    self.no_in = False
    try:
        prop = self.parse_expression()
    finally:
        self.no_in = saved_no_in
    self.consume_punct("]")
    return prop


def parse_call_member(self) -> ast_nodes.Expr:
    start = self.peek()
    if self.check_keyword("new"):
        expr = self.parse_new()
    else:
        expr = self.parse_primary()
    in_chain = False
    while True:
        token = self.peek()
        if self.match_punct("."):
            prop = _property_name(self)
            expr = ast_nodes.Member(object=expr, property=prop, span=self._span(token))
        elif self.match_punct("?."):
            in_chain = True
            if self.check_punct("("):
                args = self.parse_arguments()
                expr = ast_nodes.Call(callee=expr, args=args, optional=True, span=self._span(token))
            elif self.match_punct("["):
                prop = _computed_property(self)
                expr = ast_nodes.Member(object=expr, property=prop, computed=True, optional=True, span=self._span(token))
            else:
                prop = _property_name(self)
                expr = ast_nodes.Member(object=expr, property=prop, optional=True, span=self._span(token))
        elif self.match_punct("["):
            prop = _computed_property(self)
            expr = ast_nodes.Member(object=expr, property=prop, computed=True, span=self._span(token))
        elif self.check_punct("("):
            args = self.parse_arguments()
            expr = ast_nodes.Call(callee=expr, args=args, span=self._span(start))
        elif token.type == "TEMPLATE" and not token.newline_before:
            raise self.error("Tagged templates are not supported", token)
        else:
            break
    if in_chain:
        expr = ast_nodes.ChainExpr(expression=expr, span=self._span(start))
    return expr


def parse_new(self) -> ast_nodes.Expr:
    start = self.consume("KEYWORD", "new")
    if self.check_punct("."):
        raise self.error("new.target is not supported", self.peek())
    if self.check_keyword("new"):
        callee = self.parse_new()
    else:
        callee = self.parse_primary()
    while True:
        token = self.peek()
        if self.match_punct("."):
            callee = ast_nodes.Member(object=callee, property=_property_name(self), span=self._span(token))
        elif self.match_punct("["):
            callee = ast_nodes.Member(object=callee, property=_computed_property(self), computed=True, span=self._span(token))
        else:
            break
    args = self.parse_arguments() if self.check_punct("(") else []
    return ast_nodes.New(callee=callee, args=args, span=self._span(start))


def parse_arguments(self) -> List[ast_nodes.Expr]:
    self.consume_punct("(")
    saved_no_in = self.no_in
    self.no_in = False
    args: List[ast_nodes.Expr] = []
    try:
        while not self.check_punct(")"):
            token = self.peek()
            if self.match_punct("..."):
                args.append(ast_nodes.Spread(argument=self.parse_assignment(), span=self._span(token)))
            else:
                args.append(self.parse_assignment())
            if not self.check_punct(")"):
                self.consume_punct(",")
    finally:
        self.no_in = saved_no_in
    self.consume_punct(")")
    return args


def parse_primary(self) -> ast_nodes.Expr:
    token = self.peek()
    if token.type in {"NUMBER", "STRING"}:
        self.advance()
        return ast_nodes.Literal(value=token.value, span=self._span(token))
    if token.type == "TEMPLATE":
        self.advance()
        return self.parse_template(token)
    if token.type == "NAME":
        self.advance()
        return ast_nodes.Identifier(name=token.value, span=self._span(token))
    if token.type == "KEYWORD":
        if token.value in {"true", "false"}:
            self.advance()
            return ast_nodes.Literal(value=token.value == "true", span=self._span(token))
        if token.value == "null":
            self.advance()
            return ast_nodes.Literal(value=None, span=self._span(token))
        if token.value == "this":
            self.advance()
            return ast_nodes.ThisExpr(span=self._span(token))
        if token.value == "function":
            return self.parse_function_expr()
        if token.value == "new":
            return self.parse_new()
        if token.value == "class":
            raise self.error("Class expressions are not supported", token)
    if token.type == "PUNCT":
        if token.value == "(":
            self.advance()
            saved_no_in = self.no_in
            self.no_in = False
            try:
                expr = self.parse_expression()
            finally:
                self.no_in = saved_no_in
            self.consume_punct(")")
            return expr
        if token.value == "[":
            return self.parse_array_literal()
        if token.value == "{":
            return self.parse_object_literal()
        if token.value in {"<", "<<", "<=", "<<="}:
            return self.parse_markup(token)
        if token.value in {"/", "/="}:
            raise self.error("Regular expression literals are not supported", token)
    raise self.unexpected(token)


def parse_template(self, token) -> ast_nodes.TemplateLiteral:
    parts = token.value
    expressions: List[ast_nodes.Expr] = []
    for source, offset in parts.expressions:
        line, _ = self.lexer.location(offset)
        sub = type(self).from_source(source, line_offset=line - 1)
        expression = sub.parse_expression()
        if not sub.check("EOF"):
            raise sub.unexpected()
        expressions.append(expression)
    return ast_nodes.TemplateLiteral(quasis=list(parts.quasis), expressions=expressions, span=self._span(token))


def parse_array_literal(self) -> ast_nodes.ArrayLiteral:
    start = self.consume_punct("[")
    elements: List[Optional[ast_nodes.Expr]] = []
    while not self.check_punct("]"):
        token = self.peek()
        if self.match_punct(","):
            elements.append(None)
            continue
        if self.match_punct("..."):
            elements.append(ast_nodes.Spread(argument=self.parse_assignment(), span=self._span(token)))
        else:
            elements.append(self.parse_assignment())
        if not self.check_punct("]"):
            self.consume_punct(",")
    self.consume_punct("]")
    return ast_nodes.ArrayLiteral(elements=elements, span=self._span(start))


def parse_property_key(self) -> Tuple[ast_nodes.Expr, bool]:
    token = self.peek()
    if self.match_punct("["):
        key = self.parse_assignment()
        self.consume_punct("]")
        return key, True
    if token.type in {"NAME", "KEYWORD", "STRING", "NUMBER"}:
        self.advance()
        return ast_nodes.Literal(value=token.value, span=self._span(token)), False
    raise self.error("Expected property name", token)


def parse_object_literal(self) -> ast_nodes.ObjectLiteral:
    start = self.consume_punct("{")
    properties: List[Any] = []
    while not self.check_punct("}"):
        token = self.peek()
        if self.match_punct("..."):
            properties.append(ast_nodes.Spread(argument=self.parse_assignment(), span=self._span(token)))
        else:
            if token.type == "NAME" and token.value in {"get", "set", "async"}:
                nxt = self.peek_offset(1)
                if nxt.type in {"NAME", "KEYWORD", "STRING", "NUMBER"} or (nxt.type == "PUNCT" and nxt.value == "["):
                    raise self.error(f"'{token.value}' methods are not supported", token)
            key, computed = self.parse_property_key()
            if self.check_punct("("):
                name = None if computed else str(key.value)
                value = self.parse_function_rest(name, token)
                properties.append(ast_nodes.Property(key=key, value=value, computed=computed, span=self._span(token)))
            elif self.match_punct(":"):
                value = self.parse_assignment()
                properties.append(ast_nodes.Property(key=key, value=value, computed=computed, span=self._span(token)))
            else:
                if token.type != "NAME" or computed:
                    raise self.error("Expected ':'", self.peek())
                value = ast_nodes.Identifier(name=token.value, span=self._span(token))
                if self.match_punct("="):
                    # only meaningful once the literal is converted into a pattern
                    default = self.parse_assignment()
                    value = ast_nodes.Assign(op="=", target=value, value=default, span=self._span(token))
                properties.append(
                    ast_nodes.Property(key=key, value=value, shorthand=True, span=self._span(token))
                )
        if not self.check_punct("}"):
            self.consume_punct(",")
    self.consume_punct("}")
    return ast_nodes.ObjectLiteral(properties=properties, span=self._span(start))


def parse_function_expr(self) -> ast_nodes.FunctionExpr:
    start = self.consume("KEYWORD", "function")
    if self.match_punct("*"):
        raise self.error("Generator functions are not supported", start)
    name = None
    if self.check("NAME"):
        name = self.advance().value
    return self.parse_function_rest(name, start)


def parse_function_rest(self, name: Optional[str], start) -> ast_nodes.FunctionExpr:
    params = self.parse_params()
    body = self.parse_function_body()
    return ast_nodes.FunctionExpr(name=name, params=params, body=body, span=self._span(start))


def parse_params(self) -> List[ast_nodes.Pattern]:
    self.consume_punct("(")
    params: List[Any] = []
    while not self.check_punct(")"):
        token = self.peek()
        if self.match_punct("..."):
            params.append(ast_nodes.RestElement(argument=self.parse_binding_target(), span=self._span(token)))
            break
        params.append(self.parse_binding_element())
        if not self.check_punct(")"):
            self.consume_punct(",")
    self.consume_punct(")")
    return params


def parse_function_body(self) -> ast_nodes.Block:
    saved_no_in = self.no_in
    self.no_in = False
    try:
        return self.parse_block()
    finally:
        self.no_in = saved_no_in


def try_parse_arrow(self) -> Optional[ast_nodes.FunctionExpr]:
    token = self.peek()
    if token.type == "NAME":
        nxt = self.peek_offset(1)
        if nxt.type == "PUNCT" and nxt.value == "=>" and not nxt.newline_before:
            self.advance()
            self.advance()
            return self.parse_arrow_body([ast_nodes.Identifier(name=token.value, span=self._span(token))], token)
        return None
    if not self.check_punct("("):
        return None
    state = self.save()
    try:
        params = self.parse_params()
    except ParseError:
        self.restore(state)
        return None
    arrow = self.peek()
    if arrow.type == "PUNCT" and arrow.value == "=>" and not arrow.newline_before:
        self.advance()
        return self.parse_arrow_body(params, token)
    self.restore(state)
    return None


def parse_arrow_body(self, params: List[ast_nodes.Pattern], start) -> ast_nodes.FunctionExpr:
    if self.check_punct("{"):
        body = self.parse_function_body()
        return ast_nodes.FunctionExpr(name=None, params=params, body=body, is_arrow=True, span=self._span(start))
    body = self.parse_assignment()
    return ast_nodes.FunctionExpr(
        name=None, params=params, body=body, is_arrow=True, expression_body=True, span=self._span(start)
    )


def parse_binding_target(self) -> ast_nodes.Pattern:
    token = self.peek()
    if token.type == "NAME":
        self.advance()
        return ast_nodes.Identifier(name=token.value, span=self._span(token))
    if self.check_punct("{"):
        return self.parse_object_pattern()
    if self.check_punct("["):
        return self.parse_array_pattern()
    raise self.error("Expected binding name or pattern", token)


def parse_binding_element(self) -> ast_nodes.Pattern:
    token = self.peek()
    target = self.parse_binding_target()
    if self.match_punct("="):
        default = self.parse_assignment()
        return ast_nodes.AssignmentPattern(target=target, default=default, span=self._span(token))
    return target


def parse_object_pattern(self) -> ast_nodes.ObjectPattern:
    start = self.consume_punct("{")
    properties: List[ast_nodes.PatternProperty] = []
    rest = None
    while not self.check_punct("}"):
        token = self.peek()
        if self.match_punct("..."):
            rest = self.parse_binding_target()
            break
        key, computed = self.parse_property_key()
        if self.match_punct(":"):
            value = self.parse_binding_element()
        else:
            if token.type != "NAME" or computed:
                raise self.error("Expected ':'", self.peek())
            value = ast_nodes.Identifier(name=token.value, span=self._span(token))
            if self.match_punct("="):
                value = ast_nodes.AssignmentPattern(target=value, default=self.parse_assignment(), span=self._span(token))
        properties.append(ast_nodes.PatternProperty(key=key, value=value, computed=computed, span=self._span(token)))
        if not self.check_punct("}"):
            self.consume_punct(",")
    self.consume_punct("}")
    return ast_nodes.ObjectPattern(properties=properties, rest=rest, span=self._span(start))


def parse_array_pattern(self) -> ast_nodes.ArrayPattern:
    start = self.consume_punct("[")
    elements: List[Optional[ast_nodes.Pattern]] = []
    rest = None
    while not self.check_punct("]"):
        if self.match_punct(","):
            elements.append(None)
            continue
        if self.match_punct("..."):
            rest = self.parse_binding_target()
            break
        elements.append(self.parse_binding_element())
        if not self.check_punct("]"):
            self.consume_punct(",")
    self.consume_punct("]")
    return ast_nodes.ArrayPattern(elements=elements, rest=rest, span=self._span(start))


def to_pattern(self, node: Any) -> ast_nodes.Pattern:
    """Reinterpret an already-parsed expression as an assignment target."""
    if isinstance(
        node,
        (ast_nodes.Identifier, ast_nodes.Member, ast_nodes.ObjectPattern, ast_nodes.ArrayPattern, ast_nodes.AssignmentPattern),
    ):
        return node
    if isinstance(node, ast_nodes.Assign) and node.op == "=":
        return ast_nodes.AssignmentPattern(target=self.to_pattern(node.target), default=node.value, span=node.span)
    if isinstance(node, ast_nodes.ArrayLiteral):
        elements: List[Optional[ast_nodes.Pattern]] = []
        rest = None
        for index, element in enumerate(node.elements):
            if isinstance(element, ast_nodes.Spread):
                if index != len(node.elements) - 1:
                    raise _node_error("Rest element must be last element", element)
                rest = self.to_pattern(element.argument)
            elif element is None:
                elements.append(None)
            else:
                elements.append(self.to_pattern(element))
        return ast_nodes.ArrayPattern(elements=elements, rest=rest, span=node.span)
    if isinstance(node, ast_nodes.ObjectLiteral):
        properties: List[ast_nodes.PatternProperty] = []
        rest = None
        for index, prop in enumerate(node.properties):
            if isinstance(prop, ast_nodes.Spread):
                if index != len(node.properties) - 1:
                    raise _node_error("Rest element must be last element", prop)
                rest = self.to_pattern(prop.argument)
                continue
            properties.append(
                ast_nodes.PatternProperty(
                    key=prop.key, value=self.to_pattern(prop.value), computed=prop.computed, span=prop.span
                )
            )
        return ast_nodes.ObjectPattern(properties=properties, rest=rest, span=node.span)
    raise _node_error("Invalid assignment target", node)
