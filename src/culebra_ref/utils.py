from __future__ import annotations

from typing import Optional, Set, Tuple

from .types import (
    CulValue,
    CulNull,
    CulInt,
    CulBool,
    CulString,
    CulArray,
    CulObject,
    CulFn,
    CulebraInternalError,
    CulebraTypeError,
    type_name,
)


def cul_equals(lhs: CulValue, rhs: CulValue, _seen: Optional[Set[Tuple[int, int]]]=None) -> bool:
    """Structural equality; values of different variants are never equal.

    Composite pairs already under comparison are assumed equal, so
    self-referential arrays and objects terminate.
    """
    match (lhs, rhs):
        case (CulNull(), CulNull()):
            return True
        case (CulInt(value=a), CulInt(value=b)):
            return a == b
        case (CulBool(value=a), CulBool(value=b)):
            return a == b
        case (CulString(value=a), CulString(value=b)):
            return a == b
        case (CulArray(items=a), CulArray(items=b)):
            if a is b:
                return True
            if len(a) != len(b):
                return False
            seen = _enter(lhs, rhs, _seen)
            if seen is None:
                return True
            return all(cul_equals(x, y, seen) for x, y in zip(a, b))
        case (CulObject(props=a), CulObject(props=b)):
            if a is b:
                return True
            if a.keys() != b.keys():
                return False
            seen = _enter(lhs, rhs, _seen)
            if seen is None:
                return True
            return all(cul_equals(a[k], b[k], seen) for k in a)
        case (CulFn(), CulFn()):
            return lhs is rhs
        case _:
            return False


def _enter(lhs: CulValue, rhs: CulValue, seen: Optional[Set[Tuple[int, int]]]) -> Optional[Set[Tuple[int, int]]]:
    """Record the pair; None means it is already being compared."""
    if seen is None:
        seen = set()

    key = (id(lhs), id(rhs))
    if key in seen:
        return None

    seen.add(key)
    return seen


def cul_less(lhs: CulValue, rhs: CulValue) -> bool:
    match (lhs, rhs):
        case (CulInt(value=a), CulInt(value=b)):
            return a < b
        case (CulString(value=a), CulString(value=b)):
            return a < b
        case (CulBool(value=a), CulBool(value=b)):
            return a < b

    raise CulebraTypeError(f"cannot order {type_name(lhs)} and {type_name(rhs)}")


def compare_values(op: str, lhs: CulValue, rhs: CulValue) -> bool:
    match op:
        case '==':
            return cul_equals(lhs, rhs)
        case '!=':
            return not cul_equals(lhs, rhs)
        case '<':
            return cul_less(lhs, rhs)
        case '<=':
            return not cul_less(rhs, lhs)
        case '>':
            return cul_less(rhs, lhs)
        case '>=':
            return not cul_less(lhs, rhs)

    raise CulebraInternalError(f"invalid comparison operator {op!r}")
