"""
backend/accessor-core/jtree/types.py

Resolved Java types attached to tree nodes by attribution.

Two notions of equality live side by side here:
  - identity (`is`): the same resolved type instance, as handed out by a
    single JavaTypeCache during one attribution run
  - structural (`==`): dataclass equality on names / type arguments

Primitive members are enum singletons, so both notions coincide for them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional


class JavaType:
    """Marker base class for every resolved type."""


class Primitive(JavaType, Enum):
    Boolean = "boolean"
    Byte = "byte"
    Char = "char"
    Double = "double"
    Float = "float"
    Int = "int"
    Long = "long"
    Short = "short"
    Void = "void"
    String = "String"

    @property
    def keyword(self) -> str:
        return self.value

    @classmethod
    def from_keyword(cls, keyword: str | None) -> Optional["Primitive"]:
        if not keyword:
            return None
        for p in cls:
            # String is only a literal type, never a keyword
            if p is not cls.String and p.value == keyword:
                return p
        return None


class FullyQualified(JavaType):
    fully_qualified_name: str

    @property
    def class_name(self) -> str:
        simple = self.fully_qualified_name.split(".")[-1]
        return simple.split("$")[-1]

    @property
    def package_name(self) -> str:
        parts = self.fully_qualified_name.split(".")
        return ".".join(parts[:-1])


@dataclass(eq=True)
class Class(FullyQualified):
    fully_qualified_name: str
    kind: str = "Class"  # Class | Interface | Enum | Annotation
    owning_class: Optional["Class"] = field(default=None, compare=False, repr=False)
    supertype: Optional["FullyQualified"] = field(default=None, compare=False, repr=False)


@dataclass(eq=True)
class Parameterized(FullyQualified):
    type: FullyQualified
    type_parameters: List[Optional[JavaType]] = field(default_factory=list)

    @property
    def fully_qualified_name(self) -> str:  # type: ignore[override]
        return self.type.fully_qualified_name


@dataclass(eq=True)
class GenericTypeVariable(JavaType):
    name: str


@dataclass(eq=True)
class Array(JavaType):
    elem_type: Optional[JavaType]


@dataclass(eq=True)
class Variable(JavaType):
    """A resolved field reference; `owner` is the declaring type."""

    name: str
    owner: Optional[JavaType] = field(default=None, repr=False)
    type: Optional[JavaType] = None


@dataclass(eq=True)
class Method(JavaType):
    declaring_type: FullyQualified
    name: str
    return_type: Optional[JavaType] = None
    parameter_types: List[Optional[JavaType]] = field(default_factory=list)


def signature(t: Optional[JavaType]) -> str:
    if t is None:
        return "<unknown>"
    if isinstance(t, Primitive):
        return t.keyword
    if isinstance(t, Parameterized):
        args = ",".join(signature(p) for p in t.type_parameters)
        return f"{t.type.fully_qualified_name}<{args}>"
    if isinstance(t, FullyQualified):
        return t.fully_qualified_name
    if isinstance(t, GenericTypeVariable):
        return f"Generic{{{t.name}}}"
    if isinstance(t, Array):
        return f"{signature(t.elem_type)}[]"
    if isinstance(t, Variable):
        return f"{signature(t.owner)}{{name={t.name},type={signature(t.type)}}}"
    if isinstance(t, Method):
        params = ",".join(signature(p) for p in t.parameter_types)
        return f"{signature(t.declaring_type)}{{name={t.name},return={signature(t.return_type)},param=[{params}]}}"
    return type(t).__name__


class JavaTypeCache:
    """
    Interns resolved types by signature so that two references to the same
    type resolve to the same instance.
    """

    def __init__(self) -> None:
        self._types: Dict[str, JavaType] = {}

    def get(self, sig: str) -> Optional[JavaType]:
        return self._types.get(sig)

    def put(self, sig: str, t: JavaType) -> JavaType:
        self._types[sig] = t
        return t

    def compute_if_absent(self, sig: str, factory: Callable[[], JavaType]) -> JavaType:
        existing = self._types.get(sig)
        if existing is not None:
            return existing
        return self.put(sig, factory())

    def __len__(self) -> int:
        return len(self._types)
