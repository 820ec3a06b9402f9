from __future__ import annotations

from typing import Callable

from lark import Tree

from ..runtime import CulArray, CulObject, CulValue, Environment, CulebraInternalError
from ..tree import Node, tree_children, tree_label
from .common import expect_ident_token as _expect_ident_token

EvalFunc = Callable[[Node, Environment], CulValue]

def eval_object(n: Tree, env: Environment, eval_func: EvalFunc) -> CulObject:
    obj = CulObject()

    for prop in tree_children(n):
        if tree_label(prop) != 'property':
            raise CulebraInternalError(f"unexpected node in object literal: {prop!r}")

        key_tok, value_node = prop.children
        # duplicate keys: last write wins
        obj.props[_expect_ident_token(key_tok, "property name")] = eval_func(value_node, env)

    return obj

def eval_array(n: Tree, env: Environment, eval_func: EvalFunc) -> CulArray:
    return CulArray([eval_func(c, env) for c in tree_children(n)])
