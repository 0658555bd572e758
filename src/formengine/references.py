"""
Free-identifier collection for compiled programs (diagnostics only).
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from typing import Any, Iterator, List, Set, Tuple

from . import ast_nodes
from .runtime.interpreter import pattern_names


def _declared(node: Any) -> Iterator[str]:
    if isinstance(node, ast_nodes.VarDeclarator):
        yield from pattern_names(node.target)
    elif isinstance(node, ast_nodes.FunctionDecl):
        yield node.name
    elif isinstance(node, ast_nodes.FunctionExpr):
        if node.name:
            yield node.name
        for param in node.params:
            yield from pattern_names(param)
    elif isinstance(node, ast_nodes.Try) and node.param is not None:
        yield from pattern_names(node.param)
    elif isinstance(node, ast_nodes.ForIn):
        yield from pattern_names(node.target)


def _children(node: Any) -> Iterator[Any]:
    skip = set()
    if isinstance(node, ast_nodes.Member) and not node.computed:
        skip.add("property")
    elif isinstance(node, (ast_nodes.Property, ast_nodes.PatternProperty)) and not node.computed:
        skip.add("key")
    for item in fields(node):
        if item.name in skip or item.name == "span":
            continue
        value = getattr(node, item.name)
        if isinstance(value, list):
            yield from value
        else:
            yield value


def free_names(program: ast_nodes.Program) -> Tuple[str, ...]:
    """Identifiers the program reads without declaring them anywhere.

    Declarations are pooled across all nesting levels, so a name declared
    in any function hides every use of it.
    """
    used: List[str] = []
    seen: Set[str] = set()
    declared: Set[str] = set()
    stack: List[Any] = list(reversed(program.body))
    while stack:
        node = stack.pop()
        if node is None or not is_dataclass(node):
            continue
        declared.update(_declared(node))
        if isinstance(node, ast_nodes.Identifier):
            if node.name not in seen:
                seen.add(node.name)
                used.append(node.name)
            continue
        stack.extend(reversed(list(_children(node))))
    return tuple(name for name in used if name not in declared)
