"""
AST node definitions for the form script language.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Union


@dataclass
class Span:
    """Location span for diagnostics."""

    line: int
    column: int


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass
class Identifier:
    name: str
    span: Optional[Span] = None


@dataclass
class Literal:
    value: Any
    span: Optional[Span] = None


@dataclass
class TemplateLiteral:
    quasis: List[str]
    expressions: List["Expr"]
    span: Optional[Span] = None


@dataclass
class ThisExpr:
    span: Optional[Span] = None


@dataclass
class Spread:
    argument: "Expr"
    span: Optional[Span] = None


@dataclass
class ArrayLiteral:
    """Elements may be None for holes (`[a, , b]`)."""

    elements: List[Optional["Expr"]] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass
class Property:
    key: "Expr"
    value: "Expr"
    computed: bool = False
    shorthand: bool = False
    span: Optional[Span] = None


@dataclass
class ObjectLiteral:
    properties: List[Union[Property, Spread]] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass
class FunctionExpr:
    """Function expression, declaration body, or arrow function."""

    name: Optional[str]
    params: List["Pattern"]
    body: Union["Block", "Expr"]
    is_arrow: bool = False
    expression_body: bool = False
    span: Optional[Span] = None


@dataclass
class Call:
    callee: "Expr"
    args: List["Expr"] = field(default_factory=list)
    optional: bool = False
    span: Optional[Span] = None


@dataclass
class New:
    callee: "Expr"
    args: List["Expr"] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass
class Member:
    object: "Expr"
    property: "Expr"
    computed: bool = False
    optional: bool = False
    span: Optional[Span] = None


@dataclass
class ChainExpr:
    """Boundary of an optional chain; a short-circuit inside yields undefined here."""

    expression: "Expr"
    span: Optional[Span] = None


@dataclass
class Unary:
    op: str
    operand: "Expr"
    span: Optional[Span] = None


@dataclass
class Update:
    op: str
    prefix: bool
    target: "Expr"
    span: Optional[Span] = None


@dataclass
class Binary:
    op: str
    left: "Expr"
    right: "Expr"
    span: Optional[Span] = None


@dataclass
class Logical:
    op: str
    left: "Expr"
    right: "Expr"
    span: Optional[Span] = None


@dataclass
class Conditional:
    test: "Expr"
    consequent: "Expr"
    alternate: "Expr"
    span: Optional[Span] = None


@dataclass
class Assign:
    op: str
    target: Union["Expr", "Pattern"]
    value: "Expr"
    span: Optional[Span] = None


@dataclass
class Sequence:
    expressions: List["Expr"]
    span: Optional[Span] = None


# ---------------------------------------------------------------------------
# Markup
# ---------------------------------------------------------------------------


@dataclass
class JsxAttribute:
    name: str
    value: Optional["Expr"]
    span: Optional[Span] = None


@dataclass
class JsxSpreadAttribute:
    argument: "Expr"
    span: Optional[Span] = None


@dataclass
class JsxElement:
    """`tag` is a Literal for host tags, otherwise an Identifier/Member expression."""

    tag: "Expr"
    attributes: List[Union[JsxAttribute, JsxSpreadAttribute]] = field(default_factory=list)
    children: List["Expr"] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass
class JsxFragment:
    children: List["Expr"] = field(default_factory=list)
    span: Optional[Span] = None


# ---------------------------------------------------------------------------
# Binding patterns
# ---------------------------------------------------------------------------


@dataclass
class AssignmentPattern:
    target: "Pattern"
    default: "Expr"
    span: Optional[Span] = None


@dataclass
class RestElement:
    argument: "Pattern"
    span: Optional[Span] = None


@dataclass
class PatternProperty:
    key: "Expr"
    value: "Pattern"
    computed: bool = False
    span: Optional[Span] = None


@dataclass
class ObjectPattern:
    properties: List[PatternProperty] = field(default_factory=list)
    rest: Optional["Pattern"] = None
    span: Optional[Span] = None


@dataclass
class ArrayPattern:
    elements: List[Optional["Pattern"]] = field(default_factory=list)
    rest: Optional["Pattern"] = None
    span: Optional[Span] = None


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


@dataclass
class VarDeclarator:
    target: "Pattern"
    init: Optional["Expr"] = None
    span: Optional[Span] = None


@dataclass
class VarDecl:
    kind: str
    declarations: List[VarDeclarator] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass
class FunctionDecl:
    name: str
    function: FunctionExpr
    span: Optional[Span] = None


@dataclass
class Return:
    argument: Optional["Expr"] = None
    span: Optional[Span] = None


@dataclass
class If:
    test: "Expr"
    consequent: "Stmt"
    alternate: Optional["Stmt"] = None
    span: Optional[Span] = None


@dataclass
class For:
    init: Optional[Union[VarDecl, "Expr"]]
    test: Optional["Expr"]
    update: Optional["Expr"]
    body: "Stmt"
    span: Optional[Span] = None


@dataclass
class ForIn:
    """`for (x of xs)` when `of` is True, `for (k in obj)` otherwise."""

    kind: Optional[str]
    target: "Pattern"
    iterable: "Expr"
    body: "Stmt"
    of: bool = True
    span: Optional[Span] = None


@dataclass
class While:
    test: "Expr"
    body: "Stmt"
    span: Optional[Span] = None


@dataclass
class DoWhile:
    body: "Stmt"
    test: "Expr"
    span: Optional[Span] = None


@dataclass
class Break:
    label: Optional[str] = None
    span: Optional[Span] = None


@dataclass
class Continue:
    label: Optional[str] = None
    span: Optional[Span] = None


@dataclass
class SwitchCase:
    test: Optional["Expr"]
    body: List["Stmt"] = field(default_factory=list)


@dataclass
class Switch:
    discriminant: "Expr"
    cases: List[SwitchCase] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass
class Try:
    block: "Block"
    param: Optional["Pattern"] = None
    handler: Optional["Block"] = None
    finalizer: Optional["Block"] = None
    span: Optional[Span] = None


@dataclass
class Throw:
    argument: "Expr"
    span: Optional[Span] = None


@dataclass
class Block:
    """`scoped=False` groups statements without opening a lexical block."""

    body: List["Stmt"] = field(default_factory=list)
    scoped: bool = True
    span: Optional[Span] = None


@dataclass
class ExpressionStatement:
    expression: "Expr"
    span: Optional[Span] = None


@dataclass
class Empty:
    span: Optional[Span] = None


@dataclass
class Program:
    body: List["Stmt"] = field(default_factory=list)


Expr = Union[
    Identifier,
    Literal,
    TemplateLiteral,
    ThisExpr,
    ArrayLiteral,
    ObjectLiteral,
    FunctionExpr,
    Call,
    New,
    Member,
    ChainExpr,
    Unary,
    Update,
    Binary,
    Logical,
    Conditional,
    Assign,
    Sequence,
    JsxElement,
    JsxFragment,
]

Pattern = Union[Identifier, ObjectPattern, ArrayPattern, AssignmentPattern, Member]

Stmt = Union[
    VarDecl,
    FunctionDecl,
    Return,
    If,
    For,
    ForIn,
    While,
    DoWhile,
    Break,
    Continue,
    Switch,
    Try,
    Throw,
    Block,
    ExpressionStatement,
    Empty,
]
