from __future__ import annotations

from typing import Any

from lark import Token

from ..types import (
    CulArray,
    CulBool,
    CulFn,
    CulInt,
    CulNull,
    CulObject,
    CulString,
    CulValue,
    CulebraInternalError,
    CulebraTypeError,
    type_name,
)
from ..tree import is_token, token_kind

def expect_ident_token(node: Any, context: str) -> str:
    if is_token(node) and token_kind(node) == 'IDENTIFIER':
        return str(node.value)

    raise CulebraInternalError(f"{context} must be an identifier")

def to_integer(value: CulValue) -> int:
    if isinstance(value, CulInt):
        return value.value

    raise CulebraTypeError(f"expected integer, got {type_name(value)}")

def to_function(value: CulValue) -> CulFn:
    if isinstance(value, CulFn):
        return value

    raise CulebraTypeError(f"expected function, got {type_name(value)}")

def to_array(value: CulValue) -> CulArray:
    if isinstance(value, CulArray):
        return value

    raise CulebraTypeError(f"expected array, got {type_name(value)}")

def to_object(value: CulValue) -> CulObject:
    if isinstance(value, CulObject):
        return value

    raise CulebraTypeError(f"expected object, got {type_name(value)}")

def stringify(value: CulValue) -> str:
    """Display form used by interpolation and `puts`."""
    if isinstance(value, CulString):
        return value.value

    if isinstance(value, CulInt):
        return str(value.value)

    if isinstance(value, CulBool):
        return "true" if value.value else "false"

    if value is None or isinstance(value, CulNull):
        return "null"

    return repr(value)

def token_number(token: Token, _: Any) -> CulInt:
    return CulInt(int(token.value))

def token_boolean(token: Token, _: Any) -> CulBool:
    return CulBool(token.value == "true")

def token_text(token: Token, _: Any) -> CulString:
    return CulString(str(token.value))
