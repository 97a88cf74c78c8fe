from __future__ import annotations

from enum import Enum

from jtree.tree import MethodDeclaration, ModifierType


class AccessLevel(Enum):
    """Mirrors lombok.AccessLevel; MODULE and NONE are never derived from modifiers."""

    PUBLIC = "PUBLIC"
    MODULE = "MODULE"
    PROTECTED = "PROTECTED"
    PACKAGE = "PACKAGE"
    PRIVATE = "PRIVATE"
    NONE = "NONE"


def get_access_level(method: MethodDeclaration) -> AccessLevel:
    if method.has_modifier(ModifierType.Public):
        return AccessLevel.PUBLIC
    elif method.has_modifier(ModifierType.Protected):
        return AccessLevel.PROTECTED
    elif method.has_modifier(ModifierType.Private):
        return AccessLevel.PRIVATE
    return AccessLevel.PACKAGE
