from __future__ import annotations

import reprlib
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
from typing_extensions import TypeAlias
from .tree import Node

# ---------- Value Model ----------

@dataclass(frozen=True)
class CulNull:
    def __repr__(self) -> str:
        return "null"

@dataclass(frozen=True)
class CulInt:
    value: int
    def __repr__(self) -> str:
        return str(self.value)

@dataclass(frozen=True)
class CulBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass(frozen=True)
class CulString:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass
class CulArray:
    items: List['CulValue'] = field(default_factory=list)
    @reprlib.recursive_repr("[...]")
    def __repr__(self) -> str:
        return "[" + ", ".join(repr(x) for x in self.items) + "]"

@dataclass
class CulObject:
    props: Dict[str, 'CulValue'] = field(default_factory=dict)
    @reprlib.recursive_repr("{...}")
    def __repr__(self) -> str:
        pairs = []

        for k, v in self.props.items():
            pairs.append(f"{k}: {repr(v)}")

        return "{" + ", ".join(pairs) + "}"

@dataclass(frozen=True)
class Param:
    name: str
    mutable: bool = False

NativeFn = Callable[['Environment'], 'CulValue']

@dataclass(eq=False)
class CulFn:
    params: List[Param]
    body: Optional[Node]                   # None for native built-ins
    closure: Optional['Environment']       # defining environment
    receiver: Optional['CulValue'] = None  # set on bound methods
    native: Optional[NativeFn] = None
    name: Optional[str] = None

    def bind(self, receiver: 'CulValue') -> 'CulFn':
        """Return a new function that supplies `receiver` as `this` when called.

        An already bound function keeps its original receiver.
        """
        return CulFn(
            params=self.params,
            body=self.body,
            closure=self.closure,
            receiver=self.receiver if self.receiver is not None else receiver,
            native=self.native,
            name=self.name,
        )

    def __repr__(self) -> str:
        return "[function]"

CulValue: TypeAlias = (
    CulNull
    | CulInt
    | CulBool
    | CulString
    | CulArray
    | CulObject
    | CulFn
)

def type_name(value: CulValue) -> str:
    match value:
        case CulNull():
            return "null"
        case CulInt():
            return "integer"
        case CulBool():
            return "boolean"
        case CulString():
            return "string"
        case CulArray():
            return "array"
        case CulObject():
            return "object"
        case CulFn():
            return "function"
    return type(value).__name__

# ---------- Environment ----------

@dataclass
class Binding:
    value: CulValue
    mutable: bool

class Environment:
    """One scope frame.

    Lookups try this frame's bindings, then the properties of the associated
    object (method calls), then every outer frame in the order it was
    appended, depth-first.
    """

    def __init__(self, outers: Optional[List['Environment']]=None):
        self.bindings: Dict[str, Binding] = {}
        self.outers: List[Environment] = list(outers) if outers else []
        self.obj: Optional[CulObject] = None

    def initialize(self, name: str, val: CulValue, mutable: bool) -> None:
        self.bindings[name] = Binding(val, mutable)

    def has(self, name: str) -> bool:
        return self._owner(name) is not None

    def get(self, name: str) -> CulValue:
        owner = self._owner(name)
        if owner is None:
            raise CulebraUndefinedVariable(name)

        binding = owner.bindings.get(name)
        if binding is not None:
            return binding.value

        if owner.obj is None:
            raise CulebraInternalError(f"binding for '{name}' vanished during lookup")

        return owner.obj.props[name]

    def assign(self, name: str, val: CulValue) -> None:
        owner = self._owner(name)
        if owner is None:
            raise CulebraUndefinedVariable(name)

        binding = owner.bindings.get(name)
        if binding is None:
            if owner.obj is None:
                raise CulebraInternalError(f"binding for '{name}' vanished during assignment")

            owner.obj.props[name] = val
            return

        if not binding.mutable:
            raise CulebraImmutableError(name)

        binding.value = val

    def append_outer(self, env: 'Environment') -> None:
        self.outers.append(env)

    def associate_object(self, obj: CulObject) -> None:
        self.obj = obj

    def _owner(self, name: str) -> Optional['Environment']:
        if name in self.bindings:
            return self

        if self.obj is not None and name in self.obj.props:
            return self

        for outer in self.outers:
            found = outer._owner(name)
            if found is not None:
                return found

        return None

# ---------- Exceptions ----------

class CulebraSyntaxError(Exception):
    """Raised by the parser; never reaches the evaluator."""

    def __init__(self, message: str, line: int, column: int):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self) -> str:
        return f"{self.line}:{self.column}: {self.message}"

class CulebraRuntimeError(Exception):
    meta: Optional[object]

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.meta = None

    @property
    def line(self) -> Optional[int]:
        return getattr(self.meta, "line", None)

    @property
    def column(self) -> Optional[int]:
        return getattr(self.meta, "column", None)

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        msg = self.message
        line = self.line
        col = self.column

        if line is None:
            return msg

        if col is None:
            return f"{msg} (line {line})"

        return f"{msg} (line {line}, col {col})"

class CulebraUndefinedVariable(CulebraRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"undefined variable '{name}'")
        self.name = name

class CulebraImmutableError(CulebraRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"cannot assign to immutable variable '{name}'")
        self.name = name

class CulebraTypeError(CulebraRuntimeError):
    pass

class CulebraArityError(CulebraRuntimeError):
    pass

class CulebraDivisionByZero(CulebraRuntimeError):
    def __init__(self, message: str = "division by zero"):
        super().__init__(message)

class CulebraAssertionError(CulebraRuntimeError):
    pass

class CulebraInternalError(Exception):
    """The tree does not have the shape the evaluator expects."""

# ---------- Built-in registries ----------

PropertyRegistry = Dict[str, CulFn]

class Builtins:
    array_props: PropertyRegistry = {}
    string_props: PropertyRegistry = {}
    object_props: PropertyRegistry = {}
    prelude: Dict[str, CulFn] = {}
