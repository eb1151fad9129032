# --- Data models for the per-file record -------------------------------------
from dataclasses import dataclass


@dataclass(frozen=True)
class DeclarationRecord:
    """Metadata for one function or method declaration in a Go file."""
    name: str  # e.g., "NewServer", "ServeHTTP"
    start_line: int  # 1-based line of the `func` keyword
    end_line: int  # 1-based line of the closing brace, inclusive
    parameters: tuple[str, ...]  # one type descriptor per parameter name, e.g. ("int", "int", "...string")
    returns: str  # ", "-joined result types, e.g. "int, error"
    calls: tuple[str, ...]  # distinct callee names, trailing member name only ("Println", not "fmt.Println")
    is_method: bool
    receiver: str  # "T", "*T" or "" for plain functions
    docstring: str  # doc comment flattened to one line
    raw_code: str  # verbatim source lines start_line..end_line

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "parameters": list(self.parameters),
            "returns": self.returns,
            "calls": list(self.calls),
            "is_method": self.is_method,
            "receiver": self.receiver,
            "docstring": self.docstring,
            "raw_code": self.raw_code,
        }


@dataclass(frozen=True)
class FileRecord:
    """Everything extracted from a single source file."""
    imports: tuple[str, ...] = ()  # "path" or "alias path", in source order
    declarations: tuple[DeclarationRecord, ...] = ()

    def to_dict(self) -> dict:
        return {
            "functions": [decl.to_dict() for decl in self.declarations],
            "imports": list(self.imports),
        }
