"""
Signature resolution: turns Go type nodes into canonical type strings.

The resolver is a total function over the grammar's type forms. Each form we
understand has a handler in TYPE_HANDLERS; anything else (generic
instantiations, parenthesized types, constraint terms, ...) becomes "unknown".
Composite forms we don't spell out in full collapse to a fixed token:

    *T                -> "*T"
    []T, [N]T, [...]T -> "[]T"
    map[K]V           -> "map[K]V"
    chan T            -> "chan T", "chan<- T", "<-chan T"
    func(...) ...     -> "func"
    interface{ ... }  -> "interface{}" or "interface{...}"
    struct{ ... }     -> "struct{...}"
    pkg.T             -> "pkg.T"
    ...T (variadic)   -> "...T"
"""

from typing import Callable, Optional

from tree_sitter import Node

from go_decls.src.go_decls.tree_sitter_helpers import node_text

UNKNOWN = "unknown"
UNKNOWN_SELECTOR = "unknown.selector"


def _inner_type(node: Node) -> Optional[Node]:
    """First non-comment named child; used for forms without a field name."""
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None


def _name(source_bytes: bytes, node: Node) -> str:
    return node_text(source_bytes, node)


def _pointer(source_bytes: bytes, node: Node) -> str:
    return "*" + type_string(source_bytes, _inner_type(node))


def _sequence(source_bytes: bytes, node: Node) -> str:
    # Array lengths are dropped: [4]byte and []byte both read "[]byte".
    return "[]" + type_string(source_bytes, node.child_by_field_name("element"))


def _map(source_bytes: bytes, node: Node) -> str:
    key = type_string(source_bytes, node.child_by_field_name("key"))
    value = type_string(source_bytes, node.child_by_field_name("value"))
    return f"map[{key}]{value}"


def _channel(source_bytes: bytes, node: Node) -> str:
    elem = type_string(source_bytes, node.child_by_field_name("value"))
    tokens = [child.type for child in node.children if not child.is_named]
    if tokens[:1] == ["<-"]:
        return "<-chan " + elem
    if tokens[:2] == ["chan", "<-"]:
        return "chan<- " + elem
    return "chan " + elem


def _function(source_bytes: bytes, node: Node) -> str:
    return "func"


def _interface(source_bytes: bytes, node: Node) -> str:
    elements = [child for child in node.named_children if child.type != "comment"]
    return "interface{...}" if elements else "interface{}"


def _struct(source_bytes: bytes, node: Node) -> str:
    return "struct{...}"


def _qualified(source_bytes: bytes, node: Node) -> str:
    package = node.child_by_field_name("package")
    name = node.child_by_field_name("name")
    if package is None or package.type not in ("package_identifier", "identifier"):
        return UNKNOWN_SELECTOR
    return f"{node_text(source_bytes, package)}.{node_text(source_bytes, name)}"


def _variadic(source_bytes: bytes, node: Node) -> str:
    return "..." + type_string(source_bytes, node.child_by_field_name("type"))


TYPE_HANDLERS: dict[str, Callable[[bytes, Node], str]] = {
    "type_identifier": _name,
    "identifier": _name,
    "pointer_type": _pointer,
    "slice_type": _sequence,
    "array_type": _sequence,
    "implicit_length_array_type": _sequence,
    "map_type": _map,
    "channel_type": _channel,
    "function_type": _function,
    "interface_type": _interface,
    "struct_type": _struct,
    "qualified_type": _qualified,
    "variadic_parameter_declaration": _variadic,
}


def type_string(source_bytes: bytes, node: Optional[Node]) -> str:
    """Canonical string for a type node; never raises."""
    if node is None:
        return UNKNOWN
    handler = TYPE_HANDLERS.get(node.type)
    if handler is None:
        return UNKNOWN
    return handler(source_bytes, node)


def parameter_types(source_bytes: bytes, params: Optional[Node]) -> list[str]:
    """
    One entry per parameter slot. `a, b int` is a single declaration with two
    names and yields ["int", "int"]; an unnamed parameter yields one entry.
    """
    if params is None:
        return []

    result = []
    for decl in params.named_children:
        if decl.type == "variadic_parameter_declaration":
            # At most one name, always exactly one slot.
            result.append(type_string(source_bytes, decl))
        elif decl.type == "parameter_declaration":
            param_type = type_string(source_bytes, decl.child_by_field_name("type"))
            names = decl.children_by_field_name("name")
            result.extend([param_type] * max(len(names), 1))
    return result


def _result_type_string(source_bytes: bytes, node: Optional[Node]) -> Optional[str]:
    # Results only spell out plain and package-qualified names.
    if node is None:
        return UNKNOWN
    if node.type in ("type_identifier", "identifier"):
        return node_text(source_bytes, node)
    if node.type == "qualified_type":
        qualified = _qualified(source_bytes, node)
        return None if qualified == UNKNOWN_SELECTOR else qualified
    return UNKNOWN


def result_string(source_bytes: bytes, result: Optional[Node]) -> str:
    """
    Result types joined with ", ". `result` is either a bare type or a
    parenthesized parameter_list; a named group like `(n, m int)` counts once.
    """
    if result is None:
        return ""

    if result.type == "parameter_list":
        type_nodes = [
            decl.child_by_field_name("type")
            for decl in result.named_children
            if decl.type in ("parameter_declaration", "variadic_parameter_declaration")
        ]
    else:
        type_nodes = [result]

    types = []
    for type_node in type_nodes:
        resolved = _result_type_string(source_bytes, type_node)
        if resolved is not None:
            types.append(resolved)
    return ", ".join(types)
