"""Error types and exit codes for the extractor.

Every failure is terminal for the invocation. Library code raises one of the
exceptions below; only the CLI entry point turns them into exit codes.
"""


class ExitCodes:
    """Process exit codes for the `go-decls` command."""

    SUCCESS = 0
    FAILURE = 1  # bad arguments, unreadable file, unparsable source
    INTERNAL_ERROR = 2

    @classmethod
    def get_description(cls, code: int) -> str:
        descriptions = {
            cls.SUCCESS: "Success - record written to stdout",
            cls.FAILURE: "Invocation failed - see diagnostic on stderr",
            cls.INTERNAL_ERROR: "Internal error - extractor invariant violated",
        }
        return descriptions.get(code, f"Unknown exit code: {code}")


class ExtractorError(Exception):
    """Base class for all extractor failures."""

    exit_code = ExitCodes.FAILURE
    prefix = "Error"

    def diagnostic(self) -> str:
        return f"{self.prefix}: {self}"


class ArgumentError(ExtractorError):
    """Wrong number of command-line arguments."""

    prefix = "Usage"

    def diagnostic(self) -> str:
        return f"{self.prefix}: {self} <go-file>"


class ReadError(ExtractorError):
    """The source file is missing or cannot be read."""

    prefix = "Error reading file"


class ParseError(ExtractorError):
    """The source file is not syntactically valid Go.

    Carries the position of the first problem so callers can point at it.
    """

    prefix = "Error parsing file"

    def __init__(self, message: str, filename: str = "", line: int = 0, col: int = 0):
        self.message = message
        self.filename = filename
        self.line = line
        self.col = col
        super().__init__(message)

    def __str__(self) -> str:
        if self.line:
            return f"{self.filename}:{self.line}:{self.col}: {self.message}"
        return f"{self.filename}: {self.message}" if self.filename else self.message


class InternalError(ExtractorError):
    """An invariant of the extractor itself was violated."""

    exit_code = ExitCodes.INTERNAL_ERROR
    prefix = "Internal error"


class SerializationError(InternalError):
    """The assembled record could not be encoded as JSON."""
