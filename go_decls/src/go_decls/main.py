#!/usr/bin/env python3
"""
Tree-sitter Go Declaration Extractor (Python)
---------------------------------------------
Parses one Go source file and prints a JSON record with:
- the file's imports ("path" or "alias path")
- every function and method, with its line range, parameter and result
  types, receiver, called names, doc comment and verbatim source

USAGE
-----
    go-decls path/to/file.go
    python -m go_decls.src.go_decls.main path/to/file.go

Exit status is 0 with the record on stdout, 1 with a diagnostic on stderr
when the arguments are wrong or the file cannot be read or parsed, and 2 on
an internal error.

DEPENDENCIES
------------
    pip install tree-sitter tree-sitter-language-pack loguru
"""

import sys
from typing import Optional

from go_decls.src.go_decls.errors import ArgumentError, ExitCodes, ExtractorError, InternalError
from go_decls.src.go_decls.indexer import GoExtractor
from go_decls.src.go_decls.logging import logger
from go_decls.src.go_decls.outputs.output import write_record


def run(argv: list[str]):
    if len(argv) != 2:
        raise ArgumentError(argv[0] if argv else "go-decls")

    path = argv[1]
    try:
        extractor = GoExtractor()
    except RuntimeError as e:
        raise InternalError(str(e)) from e

    record = extractor.extract_file(path)
    write_record(record)


def main(argv: Optional[list[str]] = None) -> int:
    argv = list(sys.argv if argv is None else argv)
    try:
        run(argv)
    except ExtractorError as e:
        logger.opt(exception=True).debug(
            "{kind} for {argv}: {outcome}",
            kind=type(e).__name__,
            argv=argv[1:],
            outcome=ExitCodes.get_description(e.exit_code),
        )
        print(e.diagnostic(), file=sys.stderr)
        return e.exit_code
    except Exception as e:
        logger.opt(exception=True).error("Unexpected failure for {argv}", argv=argv[1:])
        print(InternalError(f"{type(e).__name__}: {e}").diagnostic(), file=sys.stderr)
        return ExitCodes.INTERNAL_ERROR
    return ExitCodes.SUCCESS


if __name__ == "__main__":
    sys.exit(main())
