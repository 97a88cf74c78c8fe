import networkx as nx # type: ignore
from typing import Any, Dict, Iterator, Tuple

class CIRGraph:
    """
    Typed multi-graph of the accessor scan.
    Nodes: TypeDecl, Field, Method
    Edges: HAS_FIELD, HAS_METHOD, GETTER_OF, SETTER_OF
    """
    def __init__(self) -> None:
        self.g = nx.MultiDiGraph()

    def add_node(self, node_id: str, kind: str, payload: Any) -> None:
        self.g.add_node(node_id, kind=kind, payload=payload)

    def has_node(self, node_id: str) -> bool:
        return self.g.has_node(node_id)

    def add_edge(self, src: str, dst: str, etype: str, **attrs: Any) -> None:
        """
        etype: HAS_FIELD, HAS_METHOD (type -> member),
               GETTER_OF, SETTER_OF (method -> field)
        """
        self.g.add_edge(src, dst, etype=etype, **attrs)

    def edges_of_type(self, etype: str) -> Iterator[Tuple[str, str]]:
        for src, dst, data in self.g.edges(data=True):
            if data.get("etype") == etype:
                yield src, dst

    def to_debug_json(self) -> Dict[str, Any]:
        """
        JSON-like view for API responses; the graph stays the source of truth.
        """
        nodes = []
        for node_id, data in self.g.nodes(data=True):
            payload = data.get("payload")
            if hasattr(payload, "__dict__"):
                attrs = dict(payload.__dict__)
            else:
                attrs = dict(payload) if isinstance(payload, dict) else {}
            nodes.append({
                "id": node_id,
                "kind": data.get("kind"),
                "attrs": attrs,
            })

        edges = []
        for src, dst, data in self.g.edges(data=True):
            edge = {
                "src": src,
                "dst": dst,
                "type": data.get("etype"),
            }
            extra = {k: v for k, v in data.items() if k != "etype"}
            if extra:
                edge["attrs"] = extra
            edges.append(edge)

        return {
            "nodes": nodes,
            "edges": edges,
            "parse_errors": list(self.g.graph.get("parse_errors", [])),
        }
