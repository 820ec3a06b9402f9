from __future__ import annotations

from typing import Any, List

from lark import Tree

from ..runtime import CulFn, Environment, Param, CulebraInternalError
from ..tree import token_kind, tree_children, tree_label
from .common import expect_ident_token as _expect_ident_token

def extract_params(params_node: Any) -> List[Param]:
    if tree_label(params_node) != 'parameters':
        raise CulebraInternalError("function literal is missing its parameter list")

    params: List[Param] = []

    for p in tree_children(params_node):
        if tree_label(p) != 'parameter':
            raise CulebraInternalError(f"unsupported parameter node: {p!r}")

        mut_tok, name_tok = p.children
        params.append(Param(
            name=_expect_ident_token(name_tok, "parameter name"),
            mutable=token_kind(mut_tok) == 'MUTABLE',
        ))

    return params

def eval_function(n: Tree, env: Environment) -> CulFn:
    params_node, body_node = tree_children(n)

    return CulFn(params=extract_params(params_node), body=body_node, closure=env)
