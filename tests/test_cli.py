"""
End-to-end tests for the command line entry point: exit codes, stdout
contents and the JSON schema consumed by the indexing services.
"""

import json
from pathlib import Path

from go_decls.src.go_decls import main as main_module
from go_decls.src.go_decls.errors import ExitCodes
from go_decls.src.go_decls.main import main

FUNCTION_KEYS = [
    "name",
    "start_line",
    "end_line",
    "parameters",
    "returns",
    "calls",
    "is_method",
    "receiver",
    "docstring",
    "raw_code",
]


def run_cli(capsys, *args):
    code = main(["go-decls", *args])
    captured = capsys.readouterr()
    return code, captured.out, captured.err


class TestSuccess:
    def test_outputs_single_json_document(self, capsys, sample_go_file):
        code, out, err = run_cli(capsys, str(sample_go_file))

        assert code == ExitCodes.SUCCESS
        assert out.endswith("\n")
        assert out.count("\n") == 1
        document = json.loads(out)
        assert list(document) == ["functions", "imports"]
        assert document["imports"] == ["fmt", "str strings", "net/http"]

    def test_function_schema(self, capsys, sample_go_file):
        _, out, _ = run_cli(capsys, str(sample_go_file))
        functions = json.loads(out)["functions"]

        assert len(functions) == 4
        for fn in functions:
            assert list(fn) == FUNCTION_KEYS
            assert isinstance(fn["parameters"], list)
            assert isinstance(fn["calls"], list)
            assert isinstance(fn["is_method"], bool)

    def test_method_record(self, capsys, sample_go_file):
        _, out, _ = run_cli(capsys, str(sample_go_file))
        add = next(fn for fn in json.loads(out)["functions"] if fn["name"] == "Add")

        assert add["parameters"] == ["string", "...string"]
        assert add["returns"] == "error"
        assert add["is_method"] is True
        assert add["receiver"] == "*UserService"
        assert set(add["calls"]) == {"TrimSpace", "Errorf", "newUser"}
        assert add["start_line"] == 21
        assert add["end_line"] == 28

    def test_file_without_declarations(self, capsys, tmp_path: Path):
        path = tmp_path / "consts.go"
        path.write_text("package consts\n\nconst Answer = 42\n", encoding="utf-8")

        code, out, _ = run_cli(capsys, str(path))

        assert code == ExitCodes.SUCCESS
        assert json.loads(out) == {"functions": [], "imports": []}

    def test_output_is_deterministic(self, capsys, sample_go_file):
        _, first, _ = run_cli(capsys, str(sample_go_file))
        _, second, _ = run_cli(capsys, str(sample_go_file))
        assert first == second

    def test_non_ascii_kept_verbatim(self, capsys, tmp_path: Path):
        path = tmp_path / "greet.go"
        path.write_text('package p\n\n// Grüß dich.\nfunc Greet() string { return "héllo" }\n', encoding="utf-8")

        _, out, _ = run_cli(capsys, str(path))
        fn = json.loads(out)["functions"][0]

        assert fn["name"] == "Greet"
        assert fn["docstring"] == "Grüß dich."
        assert "héllo" in out


class TestFailures:
    def test_no_arguments(self, capsys):
        code, out, err = run_cli(capsys)
        assert code == ExitCodes.FAILURE
        assert out == ""
        assert "Usage: go-decls <go-file>" in err

    def test_too_many_arguments(self, capsys, sample_go_file):
        code, out, err = run_cli(capsys, str(sample_go_file), "extra.go")
        assert code == ExitCodes.FAILURE
        assert out == ""
        assert "Usage" in err

    def test_missing_file(self, capsys, tmp_path: Path):
        code, out, err = run_cli(capsys, str(tmp_path / "nope.go"))
        assert code == ExitCodes.FAILURE
        assert out == ""
        assert err.startswith("Error reading file:")

    def test_directory_is_unreadable(self, capsys, tmp_path: Path):
        code, out, err = run_cli(capsys, str(tmp_path))
        assert code == ExitCodes.FAILURE
        assert out == ""
        assert "Error reading file" in err

    def test_malformed_source(self, capsys, tmp_path: Path):
        path = tmp_path / "broken.go"
        path.write_text("package main\n\nfunc main() {\n    if x {\n}\n", encoding="utf-8")

        code, out, err = run_cli(capsys, str(path))

        assert code == ExitCodes.FAILURE
        assert out == ""
        assert err.startswith("Error parsing file:")
        assert str(path) in err

    def test_grammar_failure_is_internal(self, capsys, sample_go_file, monkeypatch):
        def broken_grammar():
            raise RuntimeError("Failed to load tree-sitter grammar for Go: boom")

        monkeypatch.setattr("go_decls.src.go_decls.indexer.load_go_language", broken_grammar)

        code, out, err = run_cli(capsys, str(sample_go_file))

        assert code == ExitCodes.INTERNAL_ERROR
        assert out == ""
        assert err.startswith("Internal error:")

    def test_serialization_failure_is_internal(self, capsys, sample_go_file, monkeypatch):
        def unencodable(record):
            from go_decls.src.go_decls.errors import SerializationError
            raise SerializationError("cannot encode record as JSON: test")

        monkeypatch.setattr(main_module, "write_record", unencodable)

        code, out, err = run_cli(capsys, str(sample_go_file))

        assert code == ExitCodes.INTERNAL_ERROR
        assert out == ""
        assert "cannot encode record" in err

    def test_invalid_utf8_is_rejected(self, capsys, tmp_path: Path):
        path = tmp_path / "latin1.go"
        path.write_bytes(b'package p\n\nfunc f() string {\n\treturn "\xff\xfe"\n}\n')

        code, out, err = run_cli(capsys, str(path))

        assert code == ExitCodes.FAILURE
        assert out == ""
        assert err.startswith("Error parsing file:")
        assert "illegal UTF-8 encoding" in err

    def test_unexpected_exception_is_internal(self, capsys, sample_go_file, monkeypatch):
        def failing_write(record):
            raise UnicodeEncodeError("ascii", "é", 0, 1, "ordinal not in range(128)")

        monkeypatch.setattr(main_module, "write_record", failing_write)

        code, out, err = run_cli(capsys, str(sample_go_file))

        assert code == ExitCodes.INTERNAL_ERROR
        assert out == ""
        assert "Internal error: UnicodeEncodeError" in err


class TestExitCodes:
    def test_descriptions(self):
        assert ExitCodes.get_description(ExitCodes.SUCCESS).startswith("Success")
        assert ExitCodes.get_description(ExitCodes.FAILURE).startswith("Invocation failed")
        assert ExitCodes.get_description(ExitCodes.INTERNAL_ERROR).startswith("Internal error")

    def test_unknown_code(self):
        assert ExitCodes.get_description(99) == "Unknown exit code: 99"
