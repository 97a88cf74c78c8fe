from accessors.scan import find_accessors
from adapters.java_adapter import JavaAdapter
java_adapter = JavaAdapter()

def is_supported(filename: str | None) -> bool:
    return not filename or filename.endswith(".java")

def try_parse_best(code: str, filename: str | None, include_cir: bool = False):
    if is_supported(filename):
        cu = java_adapter.to_compilation_unit(code, filename)
        result = {"accessors": [c.to_dict() for c in find_accessors(cu)]}
        if include_cir:
            result["cir"] = java_adapter.build_accessor_graph_for_unit(cu).to_debug_json()
        return result
    else:
        return {"error": "Unsupported file type for Java parser"}
