"""Statement parsing helpers attached to `Parser` as methods."""

from __future__ import annotations

from typing import List

from .. import ast_nodes

__all__ = [
    "parse_program",
    "parse_value_program",
    "parse_statement",
    "parse_block",
    "parse_var_decl",
    "parse_function_decl",
    "parse_if",
    "parse_for",
    "parse_while",
    "parse_do_while",
    "parse_switch",
    "parse_try",
    "parse_import",
    "parse_export",
    "consume_semicolon",
]


def parse_program(self) -> ast_nodes.Program:
    body: List[ast_nodes.Stmt] = []
    while not self.check("EOF"):
        body.append(self.parse_statement())
    return ast_nodes.Program(body=body)


def parse_value_program(self) -> ast_nodes.Program:
    """Parse `<expression> [statements...]` as a body that returns the expression."""
    start = self.peek()
    if self.check("EOF"):
        raise self.error("Expected expression", start)
    value = self.parse_expression()
    self.consume_semicolon()
    body: List[ast_nodes.Stmt] = [ast_nodes.Return(argument=value, span=self._span(start))]
    while not self.check("EOF"):
        body.append(self.parse_statement())
    return ast_nodes.Program(body=body)


def consume_semicolon(self) -> None:
    if self.match_punct(";"):
        return
    token = self.peek()
    if token.type == "EOF" or token.newline_before or self.check_punct("}"):
        return
    raise self.error("Expected ';'", token)


def parse_statement(self) -> ast_nodes.Stmt:
    token = self.peek()
    if token.type == "PUNCT":
        if token.value == "{":
            return self.parse_block()
        if token.value == ";":
            self.advance()
            return ast_nodes.Empty(span=self._span(token))
    if token.type == "KEYWORD":
        value = token.value
        if value in {"const", "let", "var"}:
            decl = self.parse_var_decl()
            self.consume_semicolon()
            return decl
        if value == "function":
            return self.parse_function_decl()
        if value == "return":
            self.advance()
            argument = None
            nxt = self.peek()
            if not (nxt.type == "EOF" or nxt.newline_before or self.check_punct(";", "}")):
                argument = self.parse_expression()
            self.consume_semicolon()
            return ast_nodes.Return(argument=argument, span=self._span(token))
        if value == "if":
            return self.parse_if()
        if value == "for":
            return self.parse_for()
        if value == "while":
            return self.parse_while()
        if value == "do":
            return self.parse_do_while()
        if value in {"break", "continue"}:
            self.advance()
            label = None
            if self.check("NAME") and not self.peek().newline_before:
                label = self.advance().value
            self.consume_semicolon()
            node_cls = ast_nodes.Break if value == "break" else ast_nodes.Continue
            return node_cls(label=label, span=self._span(token))
        if value == "switch":
            return self.parse_switch()
        if value == "try":
            return self.parse_try()
        if value == "throw":
            self.advance()
            if self.peek().newline_before:
                raise self.error("Illegal newline after throw", self.peek())
            argument = self.parse_expression()
            self.consume_semicolon()
            return ast_nodes.Throw(argument=argument, span=self._span(token))
        if value == "import" and self.peek_offset(1).value not in {"(", "."}:
            return self.parse_import()
        if value == "export":
            return self.parse_export()
        if value == "class":
            raise self.error("Class declarations are not supported", token)
    expression = self.parse_expression()
    self.consume_semicolon()
    return ast_nodes.ExpressionStatement(expression=expression, span=self._span(token))


def parse_block(self) -> ast_nodes.Block:
    start = self.consume_punct("{")
    body: List[ast_nodes.Stmt] = []
    while not self.check_punct("}"):
        if self.check("EOF"):
            raise self.error("Expected '}'", self.peek())
        body.append(self.parse_statement())
    self.consume_punct("}")
    return ast_nodes.Block(body=body, span=self._span(start))


def parse_var_decl(self) -> ast_nodes.VarDecl:
    kind_tok = self.advance()
    declarations: List[ast_nodes.VarDeclarator] = []
    while True:
        target_tok = self.peek()
        target = self.parse_binding_target()
        init = None
        in_loop_head = self.check_keyword("in") or self.check_value("NAME", "of")
        if self.match_punct("="):
            init = self.parse_assignment()
        elif kind_tok.value == "const" and not in_loop_head:
            raise self.error("Missing initializer in const declaration", self.peek())
        elif not isinstance(target, ast_nodes.Identifier) and not in_loop_head:
            raise self.error("Missing initializer in destructuring declaration", self.peek())
        declarations.append(ast_nodes.VarDeclarator(target=target, init=init, span=self._span(target_tok)))
        if not self.match_punct(","):
            break
    return ast_nodes.VarDecl(kind=kind_tok.value, declarations=declarations, span=self._span(kind_tok))


def parse_function_decl(self) -> ast_nodes.FunctionDecl:
    start = self.consume("KEYWORD", "function")
    if self.match_punct("*"):
        raise self.error("Generator functions are not supported", start)
    name_tok = self.consume_name()
    function = self.parse_function_rest(name_tok.value, start)
    return ast_nodes.FunctionDecl(name=name_tok.value, function=function, span=self._span(start))


def parse_if(self) -> ast_nodes.If:
    start = self.consume("KEYWORD", "if")
    self.consume_punct("(")
    test = self.parse_expression()
    self.consume_punct(")")
    consequent = self.parse_statement()
    alternate = None
    if self.match_value("KEYWORD", "else"):
        alternate = self.parse_statement()
    return ast_nodes.If(test=test, consequent=consequent, alternate=alternate, span=self._span(start))


def parse_for(self) -> ast_nodes.Stmt:
    start = self.consume("KEYWORD", "for")
    self.consume_punct("(")
    init = None
    if not self.check_punct(";"):
        self.no_in = True
        try:
            if self.check_keyword("const", "let", "var"):
                init = self.parse_var_decl()
            else:
                init = self.parse_expression()
        finally:
            self.no_in = False
        is_of = self.check_value("NAME", "of")
        if is_of or self.check_keyword("in"):
            self.advance()
            if isinstance(init, ast_nodes.VarDecl):
                if len(init.declarations) != 1:
                    raise self.error("Invalid left-hand side in for loop", start)
                kind = init.kind
                target = init.declarations[0].target
            else:
                kind = None
                target = self.to_pattern(init)
            iterable = self.parse_assignment() if is_of else self.parse_expression()
            self.consume_punct(")")
            body = self.parse_statement()
            return ast_nodes.ForIn(
                kind=kind, target=target, iterable=iterable, body=body, of=is_of, span=self._span(start)
            )
    self.consume_punct(";")
    test = None if self.check_punct(";") else self.parse_expression()
    self.consume_punct(";")
    update = None if self.check_punct(")") else self.parse_expression()
    self.consume_punct(")")
    body = self.parse_statement()
    return ast_nodes.For(init=init, test=test, update=update, body=body, span=self._span(start))


def parse_while(self) -> ast_nodes.While:
    start = self.consume("KEYWORD", "while")
    self.consume_punct("(")
    test = self.parse_expression()
    self.consume_punct(")")
    body = self.parse_statement()
    return ast_nodes.While(test=test, body=body, span=self._span(start))


def parse_do_while(self) -> ast_nodes.DoWhile:
    start = self.consume("KEYWORD", "do")
    body = self.parse_statement()
    self.consume("KEYWORD", "while")
    self.consume_punct("(")
    test = self.parse_expression()
    self.consume_punct(")")
    self.match_punct(";")
    return ast_nodes.DoWhile(body=body, test=test, span=self._span(start))


def parse_switch(self) -> ast_nodes.Switch:
    start = self.consume("KEYWORD", "switch")
    self.consume_punct("(")
    discriminant = self.parse_expression()
    self.consume_punct(")")
    self.consume_punct("{")
    cases: List[ast_nodes.SwitchCase] = []
    while not self.match_punct("}"):
        if self.match_value("KEYWORD", "case"):
            test = self.parse_expression()
        elif self.match_value("KEYWORD", "default"):
            test = None
        else:
            raise self.unexpected()
        self.consume_punct(":")
        body: List[ast_nodes.Stmt] = []
        while not (self.check_keyword("case", "default") or self.check_punct("}")):
            if self.check("EOF"):
                raise self.error("Expected '}'", self.peek())
            body.append(self.parse_statement())
        cases.append(ast_nodes.SwitchCase(test=test, body=body))
    return ast_nodes.Switch(discriminant=discriminant, cases=cases, span=self._span(start))


def parse_try(self) -> ast_nodes.Try:
    start = self.consume("KEYWORD", "try")
    block = self.parse_block()
    param = None
    handler = None
    finalizer = None
    if self.match_value("KEYWORD", "catch"):
        if self.match_punct("("):
            param = self.parse_binding_target()
            self.consume_punct(")")
        handler = self.parse_block()
    if self.match_value("KEYWORD", "finally"):
        finalizer = self.parse_block()
    if handler is None and finalizer is None:
        raise self.error("Missing catch or finally after try", self.peek())
    return ast_nodes.Try(block=block, param=param, handler=handler, finalizer=finalizer, span=self._span(start))


def parse_import(self) -> ast_nodes.Stmt:
    """Module imports have no meaning inside a form; the statement is skipped."""
    start = self.consume("KEYWORD", "import")
    while not self.check("STRING"):
        if self.check("EOF"):
            raise self.error("Expected module specifier", self.peek())
        self.advance()
    self.advance()
    self.consume_semicolon()
    return ast_nodes.Empty(span=self._span(start))


def parse_export(self) -> ast_nodes.Stmt:
    start = self.consume("KEYWORD", "export")
    if self.match_value("KEYWORD", "default"):
        if self.check_keyword("function") and self.peek_offset(1).type == "NAME":
            decl = self.parse_function_decl()
            return ast_nodes.Block(
                body=[
                    decl,
                    ast_nodes.VarDecl(
                        kind="var",
                        declarations=[
                            ast_nodes.VarDeclarator(
                                target=ast_nodes.Identifier("default"),
                                init=ast_nodes.Identifier(decl.name),
                            )
                        ],
                    ),
                ],
                scoped=False,
                span=self._span(start),
            )
        value = self.parse_assignment()
        self.consume_semicolon()
        return ast_nodes.VarDecl(
            kind="var",
            declarations=[ast_nodes.VarDeclarator(target=ast_nodes.Identifier("default"), init=value)],
            span=self._span(start),
        )
    # `export { A, B }` and re-exports carry no bindings of their own
    if self.match_punct("*"):
        while not self.check("STRING"):
            if self.check("EOF"):
                raise self.error("Expected module specifier", self.peek())
            self.advance()
        self.advance()
        self.consume_semicolon()
        return ast_nodes.Empty(span=self._span(start))
    if self.match_punct("{"):
        while not self.match_punct("}"):
            if self.check("EOF"):
                raise self.error("Expected '}'", self.peek())
            self.advance()
        if self.match_value("NAME", "from"):
            self.consume("STRING")
        self.consume_semicolon()
        return ast_nodes.Empty(span=self._span(start))
    return self.parse_statement()
