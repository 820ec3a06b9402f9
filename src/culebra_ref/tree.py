"""Shared helpers for working with the Lark Tree/Token nodes the evaluator consumes."""
from __future__ import annotations
from typing import Any, List, Optional

from lark import Token, Tree
from typing_extensions import TypeAlias, TypeGuard


Node: TypeAlias = Tree | Token


def is_tree(node: Any) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: Any) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: Any) -> Optional[str]:
    return node.data if is_tree(node) else None

def tree_children(node: Any) -> List[Node]:
    if not is_tree(node):
        return []

    children = getattr(node, "children", None)
    if children is None:
        return []

    return list(children)

def node_meta(node: Any) -> Optional[Any]:
    """Return the object carrying line/column info for a node.

    Tokens carry their own position; trees carry it on `meta` when the parser
    was built with `propagate_positions`.
    """
    if is_token(node):
        return node

    if not is_tree(node):
        return None

    meta = node.meta
    if getattr(meta, "empty", True):
        return None

    return meta

def node_position(node: Any) -> tuple[int, int]:
    meta = node_meta(node)
    line = getattr(meta, "line", None)
    column = getattr(meta, "column", None)

    return (line or 0, column or 0)


def token_kind(node: Any) -> Optional[str]:
    if not is_token(node):
        return None

    return str(node.type)
