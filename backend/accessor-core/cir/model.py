from dataclasses import dataclass
from typing import Literal, Optional, Tuple

Visibility = Literal["public", "protected", "private", "package"]
AccessorKind = Literal["getter", "setter"]

@dataclass
class TypeDecl:
    id: str
    name: str
    fully_qualified_name: str
    kind: Literal["class", "interface", "enum"]
    visibility: Visibility = "package"
    package: Optional[str] = None
    modifiers: Tuple[str, ...] = ()

@dataclass
class Field:
    id: str
    name: str
    type_name: str            # resolved type signature (e.g. java.util.List<java.lang.String>)
    visibility: Visibility = "package"
    modifiers: Tuple[str, ...] = ()

@dataclass
class Method:
    id: str
    name: str
    return_type: str          # resolved type signature, "void" for setters
    visibility: Visibility = "package"
    access_level: str = "PACKAGE"   # lombok.AccessLevel name
    modifiers: Tuple[str, ...] = ()
    accessor: Optional[AccessorKind] = None
    field_name: Optional[str] = None
    line: Optional[int] = None
