import os
import sys

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from accessors.access_level import AccessLevel
from accessors.classifier import is_getter, is_setter
from adapters.java_adapter import JavaAdapter
from jtree.tree import FieldAccess, Identifier, Return, Unknown
from jtree.types import Primitive

PERSON_SOURCE = """
package com.example;

import java.util.List;

public class Person {
    private String name;
    private int age;
    private boolean active;
    private boolean isAdmin;
    private Boolean verified;
    private List<String> tags;
    private long counter;

    public String getName() { return name; }
    public void setName(String name) { this.name = name; }
    protected int getAge() { return this.age; }
    void setAge(int age) { this.age = age; }
    public boolean isActive() { return active; }
    public boolean isAdmin() { return isAdmin; }
    private Boolean getVerified() { return verified; }
    public List<String> getTags() { return tags; }
    public void setTags(List<String> tags) { this.tags = tags; }

    public boolean getActive() { return active; }
    public long getCounter() { return counter + 1; }
    public void setCounter(int counter) { this.counter = counter; }
    public String describe() { return name; }
    public int getAgeTwice() { int twice = age * 2; return twice; }
    public boolean isInactive() { return !active; }

    class Inner {
        private int x;

        int getX() { return x; }
        int getAge() { return Person.this.age; }
        void setAge(int age) { Person.this.age = age; }
    }
}

class Base {
    protected int id;
}

class Derived extends Base {
    int getId() { return id; }
}

interface Named {
    String getName();
}
"""


def accessors_by_method(code):
    return {(c.declaring_type, c.method_name): c for c in JavaAdapter().find_accessors(code)}


def test_finds_plain_getters_and_setters():
    found = accessors_by_method(PERSON_SOURCE)

    assert set(found) == {
        ("com.example.Person", "getName"),
        ("com.example.Person", "setName"),
        ("com.example.Person", "getAge"),
        ("com.example.Person", "setAge"),
        ("com.example.Person", "isActive"),
        ("com.example.Person", "isAdmin"),
        ("com.example.Person", "getVerified"),
        ("com.example.Person", "getTags"),
        ("com.example.Person", "setTags"),
        ("com.example.Person$Inner", "getX"),
    }


def test_candidates_carry_field_kind_and_access_level():
    found = accessors_by_method(PERSON_SOURCE)

    get_age = found[("com.example.Person", "getAge")]
    assert get_age.kind == "getter"
    assert get_age.field_name == "age"
    assert get_age.access_level is AccessLevel.PROTECTED
    assert get_age.annotation == "@Getter(AccessLevel.PROTECTED)"

    set_age = found[("com.example.Person", "setAge")]
    assert set_age.kind == "setter"
    assert set_age.access_level is AccessLevel.PACKAGE
    assert set_age.annotation == "@Setter(AccessLevel.PACKAGE)"

    assert found[("com.example.Person", "getVerified")].access_level is AccessLevel.PRIVATE
    assert found[("com.example.Person", "getName")].annotation == "@Getter"
    assert found[("com.example.Person", "isAdmin")].field_name == "isAdmin"


def test_to_dict_is_json_friendly():
    found = accessors_by_method(PERSON_SOURCE)
    data = found[("com.example.Person", "setName")].to_dict()
    assert data["access_level"] == "PUBLIC"
    assert data["kind"] == "setter"
    assert data["field_name"] == "name"


def _methods(code):
    cu = JavaAdapter().to_compilation_unit(code)
    return {
        (c.type.fully_qualified_name, m.simple_name): m
        for c in cu.walk_classes()
        for m in c.methods
    }


def test_this_field_is_attributed_to_declaring_type():
    methods = _methods(PERSON_SOURCE)
    get_age = methods[("com.example.Person", "getAge")]
    ret = get_age.body.statements[0]
    assert isinstance(ret, Return)
    assert isinstance(ret.expression, FieldAccess)
    target = ret.expression.target
    assert isinstance(target, Identifier) and target.simple_name == "this"
    assert target.field_type.owner is get_age.method_type.declaring_type
    assert ret.expression.type is Primitive.Int


def test_outer_qualified_access_is_not_an_accessor():
    methods = _methods(PERSON_SOURCE)
    get_age = methods[("com.example.Person$Inner", "getAge")]
    ret = get_age.body.statements[0]
    assert isinstance(ret.expression, FieldAccess)
    assert isinstance(ret.expression.target, FieldAccess)
    assert not is_getter(get_age)
    assert not is_setter(methods[("com.example.Person$Inner", "setAge")])


def test_inherited_field_is_owned_by_superclass():
    methods = _methods(PERSON_SOURCE)
    get_id = methods[("com.example.Derived", "getId")]
    returned = get_id.body.statements[0].expression
    assert returned.field_type is not None
    assert returned.field_type.owner.fully_qualified_name == "com.example.Base"
    assert not is_getter(get_id)


def test_abstract_interface_method_has_no_body():
    methods = _methods(PERSON_SOURCE)
    get_name = methods[("com.example.Named", "getName")]
    assert get_name.body is None
    assert not is_getter(get_name)


@pytest.mark.parametrize(
    "method_name",
    ["getActive", "getCounter", "setCounter", "describe", "getAgeTwice", "isInactive"],
)
def test_near_misses_are_rejected(method_name):
    methods = _methods(PERSON_SOURCE)
    m = methods[("com.example.Person", method_name)]
    assert not is_getter(m)
    assert not is_setter(m)


def test_same_type_resolves_to_same_instance():
    methods = _methods(PERSON_SOURCE)
    get_tags = methods[("com.example.Person", "getTags")]
    set_tags = methods[("com.example.Person", "setTags")]
    assert get_tags.type is set_tags.parameters[0].variables[0].type


def test_local_shadowing_a_field_is_not_a_field():
    code = """
    class Box {
        private int size;
        int getSize() { return size; }
        void setSize(int size) { size = size; }
    }
    """
    found = accessors_by_method(code)
    assert set(found) == {("Box", "getSize")}


def test_parenthesized_return_is_not_a_getter():
    code = """
    class P {
        private int x;
        private int y;
        int getX() { return (x); }
        int getY() { return (this.y); }
    }
    """
    methods = _methods(code)
    for name in ("getX", "getY"):
        ret = methods[("P", name)].body.statements[0]
        assert isinstance(ret.expression, Unknown)
        assert ret.expression.kind == "Parentheses"
        assert not is_getter(methods[("P", name)])


def test_parentheses_elsewhere_do_not_hide_a_plain_return():
    code = """
    class P {
        private int x;
        int getX() { return x; }
        boolean positive() { if ((x) > 0) { return true; } return false; }
    }
    """
    assert set(accessors_by_method(code)) == {("P", "getX")}


def test_enum_accessors():
    code = """
    enum Color {
        RED("r"), GREEN("g");

        private final String code;

        Color(String code) { this.code = code; }

        public String getCode() { return code; }
    }
    """
    found = accessors_by_method(code)
    assert set(found) == {("Color", "getCode")}


def test_generic_field_accessors():
    code = """
    class Holder<T> {
        private T value;
        private T[] values;
        public T getValue() { return value; }
        public void setValue(T value) { this.value = value; }
        public T[] getValues() { return values; }
    }
    """
    found = accessors_by_method(code)
    assert set(found) == {("Holder", "getValue"), ("Holder", "setValue"), ("Holder", "getValues")}


def test_syntax_error_raises_value_error():
    with pytest.raises(ValueError):
        JavaAdapter().find_accessors("class Broken { int getX() { return x; }")


# ---------------- graph ----------------

def test_graph_links_accessors_to_fields():
    graph = JavaAdapter().build_accessor_graph_for_code(PERSON_SOURCE, "Person.java")

    getter_edges = set(graph.edges_of_type("GETTER_OF"))
    setter_edges = set(graph.edges_of_type("SETTER_OF"))

    assert ("method:com.example.Person:getName()", "field:com.example.Person:name") in getter_edges
    assert (
        "method:com.example.Person:setName(java.lang.String)",
        "field:com.example.Person:name",
    ) in setter_edges
    assert ("method:com.example.Person$Inner:getX()", "field:com.example.Person$Inner:x") in getter_edges
    assert len(getter_edges) == 7
    assert len(setter_edges) == 3

    data = graph.to_debug_json()
    nodes = {n["id"]: n for n in data["nodes"]}
    get_age = nodes["method:com.example.Person:getAge()"]["attrs"]
    assert get_age["accessor"] == "getter"
    assert get_age["access_level"] == "PROTECTED"
    assert get_age["visibility"] == "protected"
    set_age = nodes["method:com.example.Person:setAge(int)"]["attrs"]
    assert (set_age["access_level"], set_age["visibility"]) == ("PACKAGE", "package")
    get_verified = nodes["method:com.example.Person:getVerified()"]["attrs"]
    assert (get_verified["access_level"], get_verified["visibility"]) == ("PRIVATE", "private")
    describe = nodes["method:com.example.Person:describe()"]["attrs"]
    assert describe["accessor"] is None
    assert describe["access_level"] == "PUBLIC"
    assert nodes["type:com.example.Person"]["attrs"]["kind"] == "class"
    assert nodes["type:com.example.Named"]["attrs"]["kind"] == "interface"


def test_graph_for_files_collects_parse_errors(tmp_path):
    good = tmp_path / "Point.java"
    good.write_text(
        "class Point { private int x; public int getX() { return x; } }",
        encoding="utf-8",
    )
    bad = tmp_path / "Broken.java"
    bad.write_text("class Broken {", encoding="utf-8")

    graph = JavaAdapter().build_accessor_graph_for_files([str(good), str(bad)])

    assert set(graph.edges_of_type("GETTER_OF")) == {("method:Point:getX()", "field:Point:x")}
    errors = graph.to_debug_json()["parse_errors"]
    assert len(errors) == 1
    assert errors[0]["file"] == str(bad)
