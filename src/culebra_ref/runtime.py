from __future__ import annotations

from typing import Dict, List, Sequence, Tuple
from .types import (
    CulNull, CulInt, CulString, CulBool, CulArray, CulObject, CulFn,
    CulValue, Environment, Param, NativeFn,
    CulebraRuntimeError, CulebraTypeError, CulebraArityError, CulebraUndefinedVariable,
    CulebraImmutableError, CulebraDivisionByZero, CulebraAssertionError, CulebraInternalError,
    CulebraSyntaxError, Builtins, PropertyRegistry, type_name,
)
from .eval.common import stringify, to_array
from .eval.helpers import is_truthy

def register_property(registry: PropertyRegistry, name: str, params: Sequence[str]=()):
    def dec(fn: NativeFn):
        registry[name] = CulFn(
            params=[Param(p) for p in params],
            body=None,
            closure=None,
            native=fn,
            name=name,
        )
        return fn

    return dec

def register_array(name: str, params: Sequence[str]=()):
    return register_property(Builtins.array_props, name, params)

def register_string(name: str, params: Sequence[str]=()):
    return register_property(Builtins.string_props, name, params)

def register_object(name: str, params: Sequence[str]=()):
    return register_property(Builtins.object_props, name, params)

def register_prelude(name: str, params: Sequence[str]=()):
    return register_property(Builtins.prelude, name, params)

@register_array("size")
def _array_size(env: Environment) -> CulInt:
    return CulInt(len(to_array(env.get("this")).items))

@register_array("push", params=("value",))
def _array_push(env: Environment) -> CulNull:
    to_array(env.get("this")).items.append(env.get("value"))

    return CulNull()

@register_string("size")
def _string_size(env: Environment) -> CulInt:
    recv = env.get("this")
    if not isinstance(recv, CulString):
        raise CulebraTypeError(f"expected string, got {type_name(recv)}")

    return CulInt(len(recv.value))

@register_object("size")
def _object_size(env: Environment) -> CulInt:
    recv = env.get("this")
    if not isinstance(recv, CulObject):
        raise CulebraTypeError(f"expected object, got {type_name(recv)}")

    return CulInt(len(recv.props))

@register_prelude("puts", params=("value",))
def _puts(env: Environment) -> CulNull:
    print(stringify(env.get("value")))

    return CulNull()

@register_prelude("assert", params=("cond",))
def _assert(env: Environment) -> CulNull:
    if not is_truthy(env.get("cond")):
        line = env.get("__LINE__")
        raise CulebraAssertionError(f"assertion failed at line {stringify(line)}")

    return CulNull()

def root_environment() -> Environment:
    """Fresh root scope pre-populated with the prelude functions."""
    env = Environment()

    for name, fn in Builtins.prelude.items():
        env.initialize(name, fn, False)

    return env

def get_property(recv: CulValue, name: str) -> CulValue:
    registry_by_type: Dict[type, PropertyRegistry] = {
        CulArray: Builtins.array_props,
        CulString: Builtins.string_props,
        CulObject: Builtins.object_props,
    }

    if isinstance(recv, CulObject) and name in recv.props:
        return recv.props[name]

    registry = registry_by_type.get(type(recv))
    if registry:
        prop = registry.get(name)
        if prop is not None:
            return prop

    if isinstance(recv, CulObject):
        return CulNull()

    raise CulebraTypeError(f"{type_name(recv)} has no property '{name}'")

def call_culfn(fn: CulFn, args: List[CulValue], position: Tuple[int, int]) -> CulValue:
    """
    Calling convention:
    - a fresh call environment gets `self`, the parameters and the call site
      position (`__LINE__`, `__COLUMN__`), all immutable except parameters
      declared `mut`;
    - bound methods add `this` and, for object receivers, route bare property
      names to the receiver;
    - the closure becomes the outer scope of the call environment.
    """
    from .evaluator import eval_node  # local import to avoid cycle

    if len(args) < len(fn.params):
        raise CulebraArityError(f"function expects {len(fn.params)} argument(s); got {len(args)}")

    call_env = Environment()
    call_env.initialize("self", fn, False)

    for param, val in zip(fn.params, args):
        call_env.initialize(param.name, val, param.mutable)

    line, column = position
    call_env.initialize("__LINE__", CulInt(line), False)
    call_env.initialize("__COLUMN__", CulInt(column), False)

    if fn.receiver is not None:
        call_env.initialize("this", fn.receiver, False)

        if isinstance(fn.receiver, CulObject):
            call_env.associate_object(fn.receiver)

    if fn.native is not None:
        return fn.native(call_env)

    if fn.closure is None or fn.body is None:
        raise CulebraInternalError("function has neither a body nor a native implementation")

    call_env.append_outer(fn.closure)

    return eval_node(fn.body, call_env)
