from typing import Iterator, Optional

from tree_sitter import Node, Parser, Tree

from go_decls.src.go_decls.errors import ParseError
from go_decls.src.go_decls.inputs.source_loading import SourceFile, read_source
from go_decls.src.go_decls.logging import logger
from go_decls.src.go_decls.models.ast_models import DeclarationRecord, FileRecord
from go_decls.src.go_decls.signatures import parameter_types, result_string
from go_decls.src.go_decls.tree_sitter_helpers import (
    named_children_of_type,
    node_lines,
    node_point,
    node_text,
    walk,
)

DECLARATION_TYPES = ("function_declaration", "method_declaration")


# --- Tree-sitter language loading -------------------------------------------

def load_go_language():
    """
    Loads the Tree-sitter Go grammar for the Python bindings.
    tree_sitter_language_pack ships prebuilt grammars, so there is no build step.
    """
    try:
        from tree_sitter_language_pack import get_language
        return get_language("go")
    except Exception as e:
        raise RuntimeError(
            f"Failed to load tree-sitter grammar for Go: {e}\n"
            "This is often due to a missing or corrupted installation.\n"
            "Please try: pip install --force-reinstall tree-sitter-language-pack"
        ) from e


# --- Per-declaration extraction ----------------------------------------------

def collect_calls(source_bytes: bytes, decl_node: Node) -> tuple[str, ...]:
    """
    Names invoked anywhere under a declaration, deduplicated.

    `foo()` records "foo"; `pkg.Foo()` and `x.y.Foo()` both record "Foo", so
    differently-qualified calls with the same member name collapse into one
    entry. Other callee shapes (`(f)()`, `f[int]()`, `func(){}()`) record
    nothing. Order is first occurrence in the source.

    Note: This is syntax-only. We do not resolve which package or type
    actually defines the callee.
    """
    calls: dict[str, None] = {}
    for node in walk(decl_node):
        if node.type != "call_expression":
            continue
        fn = node.child_by_field_name("function")
        if fn is None:
            continue
        if fn.type == "identifier":
            calls[node_text(source_bytes, fn)] = None
        elif fn.type == "selector_expression":
            field_node = fn.child_by_field_name("field")
            if field_node is not None:
                calls[node_text(source_bytes, field_node)] = None
    return tuple(calls)


def leading_comments(decl_node: Node) -> list[Node]:
    """
    The doc comment group of a declaration, in source order.

    The group must end on the line right above the `func` keyword; earlier
    comments belong to it while each one ends at most one line before the next
    starts. A trailing comment on the same line as preceding code is never
    part of it.
    """
    group: list[Node] = []
    expected_end = decl_node.start_point[0] - 1

    sibling = decl_node.prev_named_sibling
    while sibling is not None and sibling.type == "comment":
        if group:
            if sibling.end_point[0] < group[0].start_point[0] - 1:
                break
        elif sibling.end_point[0] != expected_end:
            break
        group.insert(0, sibling)
        sibling = sibling.prev_named_sibling

    # sibling is now the nearest preceding code (or None at file start).
    if sibling is not None:
        code_end = sibling.end_point[0]
        while group and group[0].start_point[0] == code_end:
            group.pop(0)
    return group


def extract_docstring(source_bytes: bytes, comments: list[Node]) -> str:
    """
    Strips one leading "//" per comment, trims whitespace, drops empty lines,
    and joins what is left with single spaces.
    """
    lines = []
    for comment in comments:
        line = node_text(source_bytes, comment).removeprefix("//").strip()
        if line:
            lines.append(line)
    return " ".join(lines)


def extract_imports(source_bytes: bytes, root: Node) -> list[str]:
    """
    Every import spec in source order as "path" or "alias path".
    Covers both `import "fmt"` and grouped `import ( ... )` forms.
    """
    imports = []
    for import_decl in named_children_of_type(root, "import_declaration"):
        specs = named_children_of_type(import_decl, "import_spec")
        for spec_list in named_children_of_type(import_decl, "import_spec_list"):
            specs.extend(named_children_of_type(spec_list, "import_spec"))

        for spec in specs:
            path = node_text(source_bytes, spec.child_by_field_name("path")).strip('"')
            alias_node = spec.child_by_field_name("name")
            if alias_node is not None:
                imports.append(f"{node_text(source_bytes, alias_node)} {path}")
            else:
                imports.append(path)
    return imports


def _receiver_string(source_bytes: bytes, receiver_list: Optional[Node]) -> str:
    """
    "T" or "*T" for the first receiver; any other shape (e.g. a generic
    receiver like `*List[T]`) gives "".
    """
    decls = named_children_of_type(receiver_list, "parameter_declaration")
    if not decls:
        return ""
    recv_type = decls[0].child_by_field_name("type")
    if recv_type is None:
        return ""
    if recv_type.type == "type_identifier":
        return node_text(source_bytes, recv_type)
    if recv_type.type == "pointer_type":
        inner = [c for c in recv_type.named_children if c.type != "comment"]
        if inner and inner[0].type == "type_identifier":
            return "*" + node_text(source_bytes, inner[0])
    return ""


# --- The Extractor -------------------------------------------------------------

class GoExtractor:
    """
    Parses one Go file with Tree-sitter and builds its FileRecord:
    imports, plus one DeclarationRecord per function or method.
    """

    def __init__(self):
        self.language = load_go_language()
        self.parser = Parser(self.language)

    def parse(self, source: bytes, filename: str = "<source>") -> Tree:
        """
        Parses source bytes into a Tree-sitter tree.

        Tree-sitter always produces a tree, recovering around bad input, so a
        tree containing ERROR or MISSING nodes is turned into a ParseError here.
        Source that is not valid UTF-8 is rejected before parsing.
        """
        self._check_encoding(source, filename)
        tree = self.parser.parse(source)
        root = tree.root_node

        if root.has_error:
            bad = self._first_error(root)
            line, col = node_point(bad)
            if bad.is_missing:
                message = f"missing '{bad.type}'"
            else:
                snippet = node_text(source, bad).strip().splitlines()
                found = snippet[0][:40] if snippet else ""
                message = f"syntax error near '{found}'" if found else "syntax error"
            raise ParseError(message, filename, line, col)

        # A Go file must open with its package clause.
        first = next((c for c in root.named_children if c.type != "comment"), None)
        if first is None or first.type != "package_clause":
            if first is None:
                found, (line, col) = "EOF", self._end_point(root)
            else:
                found, (line, col) = node_text(source, first).split(None, 1)[0], node_point(first)
            raise ParseError(f"expected 'package', found '{found}'", filename, line, col)

        return tree

    @staticmethod
    def _check_encoding(source: bytes, filename: str):
        try:
            source.decode("utf-8")
        except UnicodeDecodeError as e:
            line_start = source.rfind(b"\n", 0, e.start) + 1
            line = source.count(b"\n", 0, e.start) + 1
            col = e.start - line_start + 1  # byte column
            raise ParseError("illegal UTF-8 encoding", filename, line, col) from e

    @staticmethod
    def _first_error(root: Node) -> Node:
        for node in walk(root):
            if node.type == "ERROR" or node.is_missing:
                return node
        return root

    @staticmethod
    def _end_point(root: Node) -> tuple[int, int]:
        return (root.end_point[0] + 1, root.end_point[1] + 1)

    def iter_declarations(self, root: Node) -> Iterator[Node]:
        """
        Yields every function and method declaration, depth-first in source
        order. No declaration is skipped by name, `_` included.
        """
        for node in walk(root):
            if node.type in DECLARATION_TYPES:
                yield node

    def build_declaration(self, source: SourceFile, node: Node) -> DeclarationRecord:
        source_bytes = source.content
        start_line, end_line = node_lines(node)
        receiver_list = node.child_by_field_name("receiver")

        return DeclarationRecord(
            name=node_text(source_bytes, node.child_by_field_name("name")),
            start_line=start_line,
            end_line=end_line,
            parameters=tuple(parameter_types(source_bytes, node.child_by_field_name("parameters"))),
            returns=result_string(source_bytes, node.child_by_field_name("result")),
            calls=collect_calls(source_bytes, node),
            is_method=receiver_list is not None,
            receiver=_receiver_string(source_bytes, receiver_list),
            docstring=extract_docstring(source_bytes, leading_comments(node)),
            raw_code=source.slice_lines(start_line, end_line),
        )

    def extract(self, source: SourceFile) -> FileRecord:
        """Parses and extracts a source file already held in memory."""
        tree = self.parse(source.content, source.path)
        root = tree.root_node

        declarations = tuple(
            self.build_declaration(source, node) for node in self.iter_declarations(root)
        )
        logger.debug(
            "Extracted {count} declarations from {path}",
            count=len(declarations),
            path=source.path,
        )
        return FileRecord(
            imports=tuple(extract_imports(source.content, root)),
            declarations=declarations,
        )

    def extract_file(self, path: str) -> FileRecord:
        return self.extract(read_source(path))
