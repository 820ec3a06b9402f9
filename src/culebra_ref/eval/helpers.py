from __future__ import annotations

from ..types import CulBool, CulNull, CulValue

def is_truthy(val: CulValue) -> bool:
    match val:
        case CulBool(value=b):
            return b
        case CulNull():
            return False
        case _:
            return True
