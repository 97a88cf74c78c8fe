from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Literal, Optional

from accessors.access_level import AccessLevel, get_access_level
from accessors.classifier import is_getter, is_setter
from jtree.tree import (
    Assignment,
    ClassDeclaration,
    CompilationUnit,
    FieldAccess,
    Identifier,
    MethodDeclaration,
    Return,
)

AccessorKind = Literal["getter", "setter"]


@dataclass
class AccessorCandidate:
    declaring_type: str
    method_name: str
    field_name: str
    kind: AccessorKind
    access_level: AccessLevel
    annotation: str
    line: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["access_level"] = self.access_level.value
        return data


def lombok_annotation(kind: AccessorKind, access_level: AccessLevel) -> str:
    """
    @Getter / @Setter for public accessors, otherwise the annotation
    carries the access level, e.g. @Getter(AccessLevel.PROTECTED).
    """
    name = "@Getter" if kind == "getter" else "@Setter"
    if access_level is AccessLevel.PUBLIC:
        return name
    return f"{name}(AccessLevel.{access_level.value})"


def accessor_field_name(method: MethodDeclaration) -> Optional[str]:
    """Simple name of the field an already classified accessor reads or writes."""
    if method.body is None or not method.body.statements:
        return None
    statement = method.body.statements[0]
    if isinstance(statement, Return):
        expr = statement.expression
    elif isinstance(statement, Assignment):
        expr = statement.variable
    else:
        return None
    if isinstance(expr, (Identifier, FieldAccess)):
        return expr.simple_name
    return None


def classify_method(method: MethodDeclaration, declaring_type: str = "") -> Optional[AccessorCandidate]:
    if is_getter(method):
        kind: AccessorKind = "getter"
    elif is_setter(method):
        kind = "setter"
    else:
        return None

    field_name = accessor_field_name(method)
    if field_name is None:
        return None

    if not declaring_type and method.method_type is not None:
        declaring_type = method.method_type.declaring_type.fully_qualified_name

    access_level = get_access_level(method)
    return AccessorCandidate(
        declaring_type=declaring_type,
        method_name=method.simple_name,
        field_name=field_name,
        kind=kind,
        access_level=access_level,
        annotation=lombok_annotation(kind, access_level),
        line=method.line,
    )


def find_accessors_in_class(class_decl: ClassDeclaration) -> List[AccessorCandidate]:
    fqn = class_decl.type.fully_qualified_name if class_decl.type else class_decl.simple_name
    candidates: List[AccessorCandidate] = []
    for method in class_decl.methods:
        candidate = classify_method(method, fqn)
        if candidate is not None:
            candidates.append(candidate)
    return candidates


def find_accessors(cu: CompilationUnit) -> List[AccessorCandidate]:
    candidates: List[AccessorCandidate] = []
    for class_decl in cu.walk_classes():
        candidates.extend(find_accessors_in_class(class_decl))
    return candidates
