# --- Source file loading -----------------------------------------------------
from dataclasses import dataclass, field

from go_decls.src.go_decls.errors import ReadError
from go_decls.src.go_decls.logging import logger


@dataclass(frozen=True)
class SourceFile:
    """
    A source file held in memory: the raw bytes for the parser, plus a
    line-indexed view used to cut out the verbatim text of declarations.
    """
    path: str
    content: bytes
    lines: tuple[str, ...] = field(repr=False, default=())

    @classmethod
    def from_bytes(cls, content: bytes, path: str = "<source>") -> "SourceFile":
        # Split on "\n" only: a CRLF file keeps its "\r" on each line so that
        # joining a slice back with "\n" reproduces the original bytes.
        text = content.decode("utf-8", errors="replace")
        return cls(path=path, content=content, lines=tuple(text.split("\n")))

    @classmethod
    def from_text(cls, text: str, path: str = "<source>") -> "SourceFile":
        return cls.from_bytes(text.encode("utf-8"), path)

    def slice_lines(self, start_line: int, end_line: int) -> str:
        """Newline-joined source lines start_line..end_line (1-based, inclusive)."""
        if start_line < 1 or end_line < start_line or end_line > len(self.lines):
            return ""
        return "\n".join(self.lines[start_line - 1:end_line])


def read_source(path: str) -> SourceFile:
    """Reads a file from disk. Any OS-level failure becomes a ReadError."""
    try:
        with open(path, "rb") as f:
            content = f.read()
    except OSError as e:
        raise ReadError(f"{path}: {e.strerror or e}") from e

    logger.debug("Read {path} ({size} bytes)", path=path, size=len(content))
    return SourceFile.from_bytes(content, path)
