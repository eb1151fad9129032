# --- Tree-sitter plumbing ----------------------------------------------------
from typing import Iterator, Optional

from tree_sitter import Node


def node_text(source_bytes: bytes, node: Optional[Node]) -> str:
    """
    Converts a node's [start_byte:end_byte] into the corresponding string.
    Tree-sitter nodes only store byte offsets, so we slice the original source.
    """
    if node is None:
        return ""
    return source_bytes[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def node_point(node: Node) -> tuple[int, int]:
    """
    Returns the (line, column) of a node's start in 1-based coordinates,
    which is what diagnostics and the emitted records use.
    """
    return (node.start_point[0] + 1, node.start_point[1] + 1)


def node_lines(node: Node) -> tuple[int, int]:
    """1-based, inclusive (start_line, end_line) covered by a node."""
    return (node.start_point[0] + 1, node.end_point[0] + 1)


def named_children_of_type(node: Optional[Node], *types: str) -> list[Node]:
    if node is None:
        return []
    return [child for child in node.named_children if child.type in types]


def walk(node: Node) -> Iterator[Node]:
    """
    Pre-order DFS over a subtree, yielding nodes in source order.
    Uses an explicit stack so deeply nested code can't hit the recursion limit.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))
