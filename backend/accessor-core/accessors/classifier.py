"""
backend/accessor-core/accessors/classifier.py

Decides whether a single attributed method declaration is a plain bean
getter or setter of a field declared on the method's own type.

Both checks are total: any missing attribution or unexpected node shape
answers False instead of raising.

Getter shapes accepted:
    T getX() { return x; }
    T getX() { return this.x; }
    boolean isFlag() { return flag; }

Setter shapes accepted:
    void setX(T x) { this.x = x; }

Qualified outer access (`Outer.this.x`) is never accepted.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from accessors.naming import derive_getter_method_name, derive_setter_method_name
from jtree.tree import (
    Assignment,
    Empty,
    Expression,
    FieldAccess,
    Identifier,
    MethodDeclaration,
    Return,
    Statement,
    VariableDeclarations,
)
from jtree.types import JavaType, Primitive

logger = logging.getLogger(__name__)


def _single_statement(method: MethodDeclaration) -> Optional[Statement]:
    # abstract and interface methods have no body
    if method.body is None or len(method.body.statements) != 1:
        return None
    return method.body.statements[0]


def _is_owned_by(identifier: Expression, declaring_type: Optional[JavaType]) -> bool:
    if not isinstance(identifier, Identifier) or identifier.field_type is None:
        return False
    return declaring_type is not None and identifier.field_type.owner is declaring_type


def _returned_field(
    expression: Optional[Expression], declaring_type: Optional[JavaType]
) -> Union[Identifier, FieldAccess, None]:
    if isinstance(expression, Identifier):
        if _is_owned_by(expression, declaring_type):
            return expression
    elif isinstance(expression, FieldAccess):
        if _is_owned_by(expression.target, declaring_type):
            return expression
    return None


def _has_matching_type_and_name(method: MethodDeclaration, type: Optional[JavaType], simple_name: str) -> bool:
    if type is None or method.type is not type:
        return False
    return method.simple_name == derive_getter_method_name(type, simple_name)


def is_getter(method: MethodDeclaration) -> bool:
    if method.method_type is None:
        return False
    # Check signature: no parameters, declared return type
    if not method.parameters or not isinstance(method.parameters[0], Empty):
        return False
    if method.return_type_expression is None:
        return False
    # Check body: just a return statement
    statement = _single_statement(method)
    if not isinstance(statement, Return):
        return False
    # Check field is declared on method type
    field = _returned_field(statement.expression, method.method_type.declaring_type)
    if field is None:
        return False
    return _has_matching_type_and_name(method, field.type, field.simple_name)


def is_setter(method: MethodDeclaration) -> bool:
    # Check return type: void
    if method.type is not Primitive.Void:
        return False
    # Check signature: single parameter
    if len(method.parameters) != 1 or isinstance(method.parameters[0], Empty):
        return False
    # Check body: just an assignment
    statement = _single_statement(method)
    if not isinstance(statement, Assignment):
        return False
    assigned_field = statement.variable
    if not isinstance(assigned_field, FieldAccess):
        return False
    if method.simple_name != derive_setter_method_name(assigned_field.simple_name):
        return False

    param_decl = method.parameters[0]
    if not isinstance(param_decl, VariableDeclarations) or not param_decl.variables:
        logger.debug("setter candidate %s has a malformed parameter: %r", method.simple_name, param_decl)
        return False
    param = param_decl.variables[0]

    # type of parameter and field have to match; structurally, not by identity
    if param.type is None or assigned_field.type is None:
        return False
    if param.type != assigned_field.type:
        return False

    # Check field is declared on method type
    if method.method_type is None:
        return False
    declaring_type = method.method_type.declaring_type
    target = assigned_field.target
    if isinstance(target, Identifier):
        return _is_owned_by(target, declaring_type)
    elif isinstance(target, FieldAccess):
        return _is_owned_by(target.target, declaring_type)
    return False
