from __future__ import annotations

import re
from typing import Optional

from jtree.strings import capitalize
from jtree.types import JavaType, Primitive

_ALREADY_IS_PREFIXED = re.compile(r"is[A-Z]")


def derive_getter_method_name(type: Optional[JavaType], field_name: str) -> str:
    """
    Bean getter name for a field.

    Only the primitive `boolean` gets the `is` prefix; a field already named
    like `isActive` is its own getter name. Boxed Boolean and unresolved types
    fall back to `get`.
    """
    if type is Primitive.Boolean:
        if _ALREADY_IS_PREFIXED.match(field_name):
            return field_name
        return "is" + capitalize(field_name)
    return "get" + capitalize(field_name)


def derive_setter_method_name(field_name: str) -> str:
    return "set" + capitalize(field_name)
