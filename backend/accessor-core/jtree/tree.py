"""
backend/accessor-core/jtree/tree.py

Attributed Java syntax tree.

Nodes are plain dataclasses forming closed families that callers dispatch on
with isinstance():

  Expression: Identifier | FieldAccess | TypeTree | Unknown
  Statement:  Return | Assignment | Block | UnknownStatement
  Parameter:  Empty | VariableDeclarations

The tree is produced once by the Java adapter and only read afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Union

from jtree.types import Class, JavaType, Method, Variable


# ---------------- Expressions ----------------

class Expression:
    type: Optional[JavaType] = None


@dataclass
class Identifier(Expression):
    simple_name: str
    type: Optional[JavaType] = None
    field_type: Optional[Variable] = None


@dataclass
class FieldAccess(Expression):
    target: Expression
    simple_name: str
    type: Optional[JavaType] = None


@dataclass
class TypeTree(Expression):
    """A type written in source, e.g. a return type or parameter type."""

    name: str
    type: Optional[JavaType] = None


@dataclass
class Unknown(Expression):
    """Any expression shape the accessor checks never need to look into."""

    kind: str
    type: Optional[JavaType] = None


# ---------------- Statements ----------------

class Statement:
    pass


@dataclass
class Return(Statement):
    expression: Optional[Expression] = None


@dataclass
class Assignment(Statement):
    variable: Expression
    assignment: Expression
    type: Optional[JavaType] = None


@dataclass
class Block(Statement):
    statements: List[Statement] = field(default_factory=list)


@dataclass
class UnknownStatement(Statement):
    kind: str


# ---------------- Declarations ----------------

class ModifierType(Enum):
    Default = "default"
    Public = "public"
    Protected = "protected"
    Private = "private"
    Abstract = "abstract"
    Static = "static"
    Final = "final"
    Transient = "transient"
    Volatile = "volatile"
    Synchronized = "synchronized"
    Native = "native"
    Strictfp = "strictfp"

    @classmethod
    def from_keyword(cls, keyword: str) -> Optional["ModifierType"]:
        for m in cls:
            if m.value == keyword:
                return m
        return None


@dataclass
class Modifier:
    type: ModifierType

    @property
    def keyword(self) -> str:
        return self.type.value


@dataclass
class Empty:
    """Sole entry of the parameter list of a method without parameters."""


@dataclass
class NamedVariable:
    simple_name: str
    type: Optional[JavaType] = None
    initializer: Optional[Expression] = None


@dataclass
class VariableDeclarations:
    type_expression: Optional[TypeTree]
    variables: List[NamedVariable] = field(default_factory=list)
    modifiers: List[Modifier] = field(default_factory=list)

    @property
    def type(self) -> Optional[JavaType]:
        return self.type_expression.type if self.type_expression else None


Parameter = Union[Empty, VariableDeclarations]


@dataclass
class MethodDeclaration:
    simple_name: str
    modifiers: List[Modifier] = field(default_factory=list)
    return_type_expression: Optional[TypeTree] = None
    parameters: List[Parameter] = field(default_factory=lambda: [Empty()])
    body: Optional[Block] = None
    method_type: Optional[Method] = None
    line: Optional[int] = None

    @property
    def type(self) -> Optional[JavaType]:
        """Resolved return type; None when the method is not attributed."""
        if self.method_type is None:
            return None
        return self.method_type.return_type

    def has_modifier(self, modifier_type: ModifierType) -> bool:
        return any(m.type is modifier_type for m in self.modifiers)


@dataclass
class ClassDeclaration:
    simple_name: str
    kind: str = "Class"
    type: Optional[Class] = None
    modifiers: List[Modifier] = field(default_factory=list)
    fields: List[VariableDeclarations] = field(default_factory=list)
    methods: List[MethodDeclaration] = field(default_factory=list)
    classes: List["ClassDeclaration"] = field(default_factory=list)

    def has_modifier(self, modifier_type: ModifierType) -> bool:
        return any(m.type is modifier_type for m in self.modifiers)


@dataclass
class CompilationUnit:
    package_name: Optional[str] = None
    classes: List[ClassDeclaration] = field(default_factory=list)
    source_path: Optional[str] = None

    def walk_classes(self) -> Iterator[ClassDeclaration]:
        """Depth-first, declaration order, nested classes after their owner."""

        def _walk(c: ClassDeclaration) -> Iterator[ClassDeclaration]:
            yield c
            for inner in c.classes:
                yield from _walk(inner)

        for c in self.classes:
            yield from _walk(c)
