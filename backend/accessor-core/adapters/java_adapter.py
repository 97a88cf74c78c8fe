import logging
import javalang  # type: ignore
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Set

from accessors.access_level import get_access_level
from accessors.scan import AccessorCandidate, classify_method, find_accessors
from cir.model import TypeDecl, Field, Method
from cir.graph import CIRGraph
from jtree import tree as J
from jtree.types import (
    Array,
    Class,
    GenericTypeVariable,
    JavaType,
    JavaTypeCache,
    Method as MethodType,
    Parameterized,
    Primitive,
    Variable,
    signature,
)

logger = logging.getLogger(__name__)

JAVA_LANG_TYPES = {
    "Boolean", "Byte", "Character", "Class", "CharSequence", "Comparable",
    "Double", "Enum", "Error", "Exception", "Float", "Integer", "Iterable",
    "Long", "Math", "Number", "Object", "Override", "Record", "Runnable",
    "RuntimeException", "Short", "String", "StringBuilder", "System",
    "Thread", "Throwable", "Void",
}

_KINDS = {
    "ClassDeclaration": "Class",
    "InterfaceDeclaration": "Interface",
    "EnumDeclaration": "Enum",
    "AnnotationDeclaration": "Annotation",
}


class _ParenthesesAwareParser(javalang.parser.Parser):
    """javalang parser that marks expressions written inside parentheses."""

    def parse_par_expression(self):
        expression = super().parse_par_expression()
        expression._parenthesized = True
        return expression


@dataclass(eq=False)
class _ClassInfo:
    node: Any
    decl: J.ClassDeclaration
    type: Class
    outer: Optional["_ClassInfo"] = None
    generics: Set[str] = field(default_factory=set)
    fields: Dict[str, Variable] = field(default_factory=dict)
    this_var: Optional[Variable] = None
    nested: Dict[str, "_ClassInfo"] = field(default_factory=dict)
    superclass: Optional["_ClassInfo"] = None


class _Attribution:
    """
    One attribution run over one javalang compilation unit.

    Declares every type first, then fields, then methods, so that forward
    references between classes of the unit resolve. All resolved types go
    through a single JavaTypeCache, so equal signatures resolve to the same
    instance.
    """

    def __init__(self, unit, source_path: str | None = None) -> None:
        self.unit = unit
        self.source_path = source_path
        self.cache = JavaTypeCache()
        self.package = getattr(getattr(unit, "package", None), "name", None)
        self.imports: Dict[str, str] = {}
        for imp in getattr(unit, "imports", None) or []:
            if imp.static or imp.wildcard:
                continue
            self.imports[imp.path.split(".")[-1]] = imp.path
        self.top_level: Dict[str, _ClassInfo] = {}
        self.infos: List[_ClassInfo] = []

    # ---------------- Driver ----------------

    def run(self) -> J.CompilationUnit:
        cu = J.CompilationUnit(package_name=self.package, source_path=self.source_path)
        for t in self.unit.types:
            info = self._declare(t, outer=None)
            if info is None:
                continue
            self.top_level[t.name] = info
            cu.classes.append(info.decl)

        for info in self.infos:
            self._attribute_supertype(info)
        for info in self.infos:
            self._attribute_fields(info)
        for info in self.infos:
            self._attribute_methods(info)

        logger.debug(
            "attributed %s: %d types, %d interned types",
            self.source_path or "<memory>", len(self.infos), len(self.cache),
        )
        return cu

    # ---------------- Declarations ----------------

    @staticmethod
    def _members(node) -> List[Any]:
        body = getattr(node, "body", None)
        if body is None:
            return []
        # enums keep their members in EnumBody.declarations
        if hasattr(body, "declarations"):
            return list(body.declarations or [])
        return list(body)

    @staticmethod
    def _modifiers(mods) -> List[J.Modifier]:
        mods = mods or set()
        return [J.Modifier(m) for m in J.ModifierType if m.value in mods]

    def _declare(self, node, outer: Optional[_ClassInfo]) -> Optional[_ClassInfo]:
        kind = _KINDS.get(type(node).__name__)
        if kind is None:
            return None

        if outer is not None:
            fqn = f"{outer.type.fully_qualified_name}${node.name}"
        elif self.package:
            fqn = f"{self.package}.{node.name}"
        else:
            fqn = node.name

        class_type = self.cache.compute_if_absent(fqn, lambda: Class(fqn, kind))
        assert isinstance(class_type, Class)
        class_type.kind = kind
        class_type.owning_class = outer.type if outer else None

        decl = J.ClassDeclaration(
            simple_name=node.name,
            kind=kind,
            type=class_type,
            modifiers=self._modifiers(node.modifiers),
        )
        info = _ClassInfo(
            node=node,
            decl=decl,
            type=class_type,
            outer=outer,
            generics={tp.name for tp in (getattr(node, "type_parameters", None) or [])},
        )
        info.this_var = Variable("this", owner=class_type, type=class_type)
        self.infos.append(info)

        for member in self._members(node):
            inner = self._declare(member, outer=info)
            if inner is not None:
                info.nested[member.name] = inner
                decl.classes.append(inner.decl)
        return info

    def _attribute_supertype(self, info: _ClassInfo) -> None:
        extends = getattr(info.node, "extends", None)
        # interfaces carry a list of extended interfaces, classes a single type
        if extends is None or isinstance(extends, list):
            return
        info.type.supertype = self._type_of(extends, info)
        info.superclass = self._find_declared(self._qualified_name(extends), info)

    def _attribute_fields(self, info: _ClassInfo) -> None:
        for member in self._members(info.node):
            if not isinstance(member, javalang.tree.FieldDeclaration):
                continue
            base_type = self._type_of(member.type, info)
            variables: List[J.NamedVariable] = []
            for declarator in member.declarators:
                field_type = self._with_dimensions(base_type, declarator.dimensions)
                var = Variable(declarator.name, owner=info.type, type=field_type)
                info.fields[declarator.name] = var
                variables.append(J.NamedVariable(declarator.name, field_type))
            info.decl.fields.append(
                J.VariableDeclarations(
                    type_expression=J.TypeTree(self._type_text(member.type), base_type),
                    variables=variables,
                    modifiers=self._modifiers(member.modifiers),
                )
            )

    def _attribute_methods(self, info: _ClassInfo) -> None:
        for member in self._members(info.node):
            if isinstance(member, javalang.tree.MethodDeclaration):
                info.decl.methods.append(self._method(member, info))

    def _method(self, node, info: _ClassInfo) -> J.MethodDeclaration:
        generics = {tp.name for tp in (node.type_parameters or [])}

        if node.return_type is None:
            return_type: Optional[JavaType] = Primitive.Void
            return_type_expression = J.TypeTree("void", Primitive.Void)
        else:
            return_type = self._type_of(node.return_type, info, generics)
            return_type_expression = J.TypeTree(self._type_text(node.return_type), return_type)

        scope: Dict[str, Optional[JavaType]] = {}
        parameters: List[J.Parameter] = []
        for p in node.parameters or []:
            p_type = self._type_of(p.type, info, generics)
            if getattr(p, "varargs", False):
                p_type = self._array_of(p_type)
            scope[p.name] = p_type
            parameters.append(
                J.VariableDeclarations(
                    type_expression=J.TypeTree(self._type_text(p.type), p_type),
                    variables=[J.NamedVariable(p.name, p_type)],
                    modifiers=self._modifiers(p.modifiers),
                )
            )
        if not parameters:
            parameters.append(J.Empty())

        body: Optional[J.Block] = None
        if node.body is not None:
            body = J.Block([self._statement(s, scope, info, generics) for s in node.body])

        method_type = MethodType(
            declaring_type=info.type,
            name=node.name,
            return_type=return_type,
            parameter_types=[
                p.type for p in parameters if isinstance(p, J.VariableDeclarations)
            ],
        )
        position = getattr(node, "position", None)
        return J.MethodDeclaration(
            simple_name=node.name,
            modifiers=self._modifiers(node.modifiers),
            return_type_expression=return_type_expression,
            parameters=parameters,
            body=body,
            method_type=method_type,
            line=getattr(position, "line", None),
        )

    # ---------------- Statements ----------------

    def _statement(self, node, scope, info: _ClassInfo, generics: Set[str]) -> J.Statement:
        if isinstance(node, javalang.tree.ReturnStatement):
            if node.expression is None:
                return J.Return(None)
            return J.Return(self._expression(node.expression, scope, info))

        if isinstance(node, javalang.tree.StatementExpression):
            expr = node.expression
            if isinstance(expr, javalang.tree.Assignment):
                if expr.type != "=":
                    return J.UnknownStatement("AssignmentOperation")
                variable = self._expression(expr.expressionl, scope, info)
                value = self._expression(expr.value, scope, info)
                return J.Assignment(variable, value, type=variable.type)
            return J.UnknownStatement(type(expr).__name__)

        if isinstance(node, javalang.tree.LocalVariableDeclaration):
            base_type = self._type_of(node.type, info, generics)
            for declarator in node.declarators:
                scope[declarator.name] = self._with_dimensions(base_type, declarator.dimensions)
            return J.UnknownStatement("VariableDeclarations")

        return J.UnknownStatement(type(node).__name__)

    # ---------------- Expressions ----------------

    def _expression(self, node, scope, info: _ClassInfo) -> J.Expression:
        if getattr(node, "_parenthesized", False):
            return J.Unknown("Parentheses")
        if getattr(node, "prefix_operators", None) or getattr(node, "postfix_operators", None):
            return J.Unknown("Unary")

        if isinstance(node, javalang.tree.MemberReference):
            qualifier = node.qualifier or ""
            if qualifier:
                parts = qualifier.split(".")
                result: J.Expression = self._name(parts[0], scope, info)
                for part in parts[1:]:
                    result = self._field_access(result, part)
                result = self._field_access(result, node.member)
            else:
                result = self._name(node.member, scope, info)
            return self._selectors(result, node.selectors)

        if isinstance(node, javalang.tree.This):
            if node.qualifier:
                outer = self._find_declared(node.qualifier, info)
                outer_type = outer.type if outer else None
                result = J.FieldAccess(
                    J.Identifier(node.qualifier, type=outer_type),
                    "this",
                    type=outer_type,
                )
            else:
                result = J.Identifier("this", type=info.type, field_type=info.this_var)
            return self._selectors(result, node.selectors)

        return J.Unknown(type(node).__name__)

    def _name(self, name: str, scope, info: _ClassInfo) -> J.Identifier:
        if name in scope:
            return J.Identifier(name, type=scope[name])
        var = self._lookup_field(info, name)
        if var is not None:
            return J.Identifier(name, type=var.type, field_type=var)
        declared = self._find_declared(name, info)
        if declared is not None:
            return J.Identifier(name, type=declared.type)
        return J.Identifier(name)

    def _field_access(self, target: J.Expression, name: str) -> J.FieldAccess:
        target_type = target.type
        if isinstance(target_type, Parameterized):
            target_type = target_type.type
        if isinstance(target_type, Array) and name == "length":
            return J.FieldAccess(target, name, type=Primitive.Int)
        if isinstance(target_type, Class):
            owner = self._info_for(target_type)
            var = self._lookup_field(owner, name, include_outer=False) if owner else None
            if var is not None:
                return J.FieldAccess(target, name, type=var.type)
        return J.FieldAccess(target, name)

    def _selectors(self, result: J.Expression, selectors) -> J.Expression:
        for sel in selectors or []:
            if isinstance(result, J.Unknown):
                break
            if isinstance(sel, javalang.tree.MemberReference):
                result = self._field_access(result, sel.member)
            else:
                result = J.Unknown(type(sel).__name__)
        return result

    # ---------------- Symbol lookup ----------------

    def _info_for(self, class_type: Class) -> Optional[_ClassInfo]:
        for info in self.infos:
            if info.type is class_type:
                return info
        return None

    def _lookup_field(
        self, info: Optional[_ClassInfo], name: str, include_outer: bool = True
    ) -> Optional[Variable]:
        seen: Set[int] = set()
        current = info
        while current is not None:
            klass: Optional[_ClassInfo] = current
            while klass is not None and id(klass) not in seen:
                seen.add(id(klass))
                if name in klass.fields:
                    return klass.fields[name]
                klass = klass.superclass
            if not include_outer:
                return None
            current = current.outer
        return None

    def _find_declared(self, name: str, context: Optional[_ClassInfo]) -> Optional[_ClassInfo]:
        parts = name.split(".")
        if self.package and name.startswith(self.package + "."):
            parts = name[len(self.package) + 1:].split(".")

        head: Optional[_ClassInfo] = None
        current = context
        while current is not None and head is None:
            if current.decl.simple_name == parts[0]:
                head = current
            else:
                head = current.nested.get(parts[0])
            current = current.outer
        if head is None:
            head = self.top_level.get(parts[0])
        for part in parts[1:]:
            if head is None:
                break
            head = head.nested.get(part)
        return head

    # ---------------- Types ----------------

    @staticmethod
    def _qualified_name(type_node) -> str:
        names = [type_node.name]
        sub = getattr(type_node, "sub_type", None)
        while sub is not None:
            names.append(sub.name)
            sub = getattr(sub, "sub_type", None)
        return ".".join(names)

    def _type_text(self, type_node) -> str:
        if type_node is None:
            return "void"
        text = self._qualified_name(type_node)
        args = getattr(type_node, "arguments", None)
        if args:
            inner = []
            for a in args:
                if a.type is None:
                    inner.append("?")
                elif a.pattern_type and a.pattern_type != "?":
                    inner.append(f"? {a.pattern_type} {self._type_text(a.type)}")
                else:
                    inner.append(self._type_text(a.type))
            text += "<" + ", ".join(inner) + ">"
        return text + "[]" * len(getattr(type_node, "dimensions", None) or [])

    def _array_of(self, elem: Optional[JavaType]) -> JavaType:
        return self.cache.compute_if_absent(f"{signature(elem)}[]", lambda: Array(elem))

    def _with_dimensions(self, base: Optional[JavaType], dimensions) -> Optional[JavaType]:
        result = base
        for _ in dimensions or []:
            result = self._array_of(result)
        return result

    def _class_type(self, fqn: str) -> Class:
        t = self.cache.compute_if_absent(fqn, lambda: Class(fqn))
        assert isinstance(t, Class)
        return t

    def _resolve_class(self, name: str, info: _ClassInfo) -> Class:
        declared = self._find_declared(name, info)
        if declared is not None:
            return declared.type
        head = name.split(".")[0]
        if head in self.imports:
            return self._class_type(self.imports[head] + name[len(head):])
        if name in JAVA_LANG_TYPES:
            return self._class_type(f"java.lang.{name}")
        return self._class_type(name)

    def _type_of(self, type_node, info: _ClassInfo, generics: Set[str] | None = None) -> Optional[JavaType]:
        if type_node is None:
            return None
        dimensions = getattr(type_node, "dimensions", None) or []

        if isinstance(type_node, javalang.tree.BasicType):
            return self._with_dimensions(Primitive.from_keyword(type_node.name), dimensions)

        name = self._qualified_name(type_node)
        if name in (generics or set()) or self._is_class_generic(name, info):
            base: JavaType = self.cache.compute_if_absent(
                f"Generic{{{name}}}", lambda: GenericTypeVariable(name)
            )
            return self._with_dimensions(base, dimensions)

        raw = self._resolve_class(name, info)
        args = getattr(type_node, "arguments", None)
        if not args:
            for sub in self._sub_types(type_node):
                if getattr(sub, "arguments", None):
                    args = sub.arguments
        if args:
            params = [self._type_argument(a, info, generics) for a in args]
            sig = f"{raw.fully_qualified_name}<{','.join(signature(p) for p in params)}>"
            base = self.cache.compute_if_absent(sig, lambda: Parameterized(raw, params))
        else:
            base = raw
        return self._with_dimensions(base, dimensions)

    @staticmethod
    def _sub_types(type_node):
        sub = getattr(type_node, "sub_type", None)
        while sub is not None:
            yield sub
            sub = getattr(sub, "sub_type", None)

    def _is_class_generic(self, name: str, info: Optional[_ClassInfo]) -> bool:
        while info is not None:
            if name in info.generics:
                return True
            info = info.outer
        return False

    def _type_argument(self, arg, info: _ClassInfo, generics: Set[str] | None) -> Optional[JavaType]:
        if arg.type is None:
            return self.cache.compute_if_absent("Generic{?}", lambda: GenericTypeVariable("?"))
        return self._type_of(arg.type, info, generics)


class JavaAdapter:
    """
    Java → attributed tree → accessor candidates / CIRGraph.

    Parses Java compilation units with javalang, attributes them into the
    jtree model (resolved types, field owners, `this` references) and runs
    the getter/setter classification over every method of every type.

    Graph nodes: TypeDecl, Field, Method
    Graph edges: HAS_FIELD, HAS_METHOD, GETTER_OF, SETTER_OF
    """

    language = "java"

    # ---------------- Helpers ----------------

    def _visibility_from_mods(self, mods: List[J.Modifier] | None) -> str:
        keywords = {m.keyword for m in mods or []}
        if "public" in keywords:
            return "public"
        if "protected" in keywords:
            return "protected"
        if "private" in keywords:
            return "private"
        return "package"

    # ---------------- Parsing entry points ----------------

    def parse_to_ast(self, code: str):
        try:
            return _ParenthesesAwareParser(javalang.tokenizer.tokenize(code)).parse()
        except javalang.parser.JavaSyntaxError as e:
            raise ValueError(f"Java syntax error: {getattr(e, 'description', e)}") from e
        except javalang.tokenizer.LexerError as e:
            raise ValueError(f"Java syntax error: {e}") from e
        except Exception as e:
            raise ValueError(f"Failed to parse Java code: {e}") from e

    def to_compilation_unit(self, code: str, source_path: str | None = None) -> J.CompilationUnit:
        unit = self.parse_to_ast(code)
        return _Attribution(unit, source_path).run()

    def find_accessors(self, code: str, filename: str | None = None) -> List[AccessorCandidate]:
        cu = self.to_compilation_unit(code, filename)
        return find_accessors(cu)

    def build_accessor_graph_for_code(self, code: str, filename: str | None = None) -> CIRGraph:
        """
        Single-compilation-unit helper (for /accessors).
        """
        return self.build_accessor_graph_for_unit(self.to_compilation_unit(code, filename))

    def build_accessor_graph_for_unit(self, cu: J.CompilationUnit) -> CIRGraph:
        graph = CIRGraph()
        self._add_unit_to_graph(cu, graph)
        return graph

    def build_accessor_graph_for_files(self, files: List[str]) -> CIRGraph:
        """
        Multi-file/project-level builder.
        Skips invalid Java files but continues with the rest.
        """
        graph = CIRGraph()
        errors: List[Dict[str, str]] = []

        for path in files:
            try:
                with open(path, "r", encoding="utf-8") as f:
                    code = f.read()
                self._add_unit_to_graph(self.to_compilation_unit(code, path), graph)
            except (OSError, ValueError) as e:
                logger.warning("skipping %s: %s", path, e)
                errors.append({"file": path, "error": str(e)})
                continue

        # attach errors so API can return them
        graph.g.graph["parse_errors"] = errors

        return graph

    # ---------------- Graph ----------------

    def _add_unit_to_graph(self, cu: J.CompilationUnit, graph: CIRGraph) -> None:
        for class_decl in cu.walk_classes():
            full_name = class_decl.type.fully_qualified_name if class_decl.type else class_decl.simple_name
            type_id = f"type:{full_name}"
            graph.add_node(
                type_id,
                "TypeDecl",
                TypeDecl(
                    id=type_id,
                    name=class_decl.simple_name,
                    fully_qualified_name=full_name,
                    kind="enum" if class_decl.kind == "Enum" else (
                        "class" if class_decl.kind == "Class" else "interface"
                    ),
                    visibility=self._visibility_from_mods(class_decl.modifiers),
                    package=cu.package_name,
                    modifiers=tuple(m.keyword for m in class_decl.modifiers),
                ),
            )

            # ---------- fields ----------
            for declarations in class_decl.fields:
                for var in declarations.variables:
                    field_id = f"field:{full_name}:{var.simple_name}"
                    graph.add_node(
                        field_id,
                        "Field",
                        Field(
                            id=field_id,
                            name=var.simple_name,
                            type_name=signature(var.type),
                            visibility=self._visibility_from_mods(declarations.modifiers),
                            modifiers=tuple(m.keyword for m in declarations.modifiers),
                        ),
                    )
                    graph.add_edge(type_id, field_id, "HAS_FIELD")

            # ---------- methods ----------
            for method in class_decl.methods:
                param_sigs = ",".join(
                    signature(p.type) for p in method.parameters if isinstance(p, J.VariableDeclarations)
                )
                method_id = f"method:{full_name}:{method.simple_name}({param_sigs})"
                candidate = classify_method(method, full_name)
                access_level = get_access_level(method)
                graph.add_node(
                    method_id,
                    "Method",
                    Method(
                        id=method_id,
                        name=method.simple_name,
                        return_type=signature(method.type),
                        visibility=access_level.value.lower(),
                        access_level=access_level.value,
                        modifiers=tuple(m.keyword for m in method.modifiers),
                        accessor=candidate.kind if candidate else None,
                        field_name=candidate.field_name if candidate else None,
                        line=method.line,
                    ),
                )
                graph.add_edge(type_id, method_id, "HAS_METHOD")

                if candidate is None:
                    continue
                field_id = f"field:{full_name}:{candidate.field_name}"
                if graph.has_node(field_id):
                    graph.add_edge(
                        method_id,
                        field_id,
                        "GETTER_OF" if candidate.kind == "getter" else "SETTER_OF",
                        annotation=candidate.annotation,
                    )
