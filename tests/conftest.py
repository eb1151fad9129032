"""Pytest configuration and fixtures for go_decls tests."""

from pathlib import Path

import pytest

from go_decls.src.go_decls.indexer import GoExtractor
from go_decls.src.go_decls.inputs.source_loading import SourceFile

SAMPLE_GO = '''package service

import (
    "fmt"
    str "strings"
    "net/http"
)

// UserService keeps users in memory.
type UserService struct {
    users map[string]*User
}

// NewUserService builds an empty service.
// It never fails.
func NewUserService() *UserService {
    return &UserService{users: make(map[string]*User)}
}

// Add stores a user under its trimmed name.
func (s *UserService) Add(name string, tags ...string) error {
    trimmed := str.TrimSpace(name)
    if trimmed == "" {
        return fmt.Errorf("empty name")
    }
    s.users[trimmed] = newUser(trimmed, tags)
    return nil
}

func (s UserService) Count() int {
    return len(s.users)
}

func (s *UserService) ServeHTTP(w http.ResponseWriter, r *http.Request) {
    fmt.Fprintf(w, "%d users", s.Count())
}
'''


@pytest.fixture(scope="session")
def extractor() -> GoExtractor:
    """One Go extractor for the whole session; loading the grammar is the slow part."""
    return GoExtractor()


@pytest.fixture
def extract(extractor):
    """Extract a FileRecord straight from Go source text."""

    def _extract(code: str):
        return extractor.extract(SourceFile.from_text(code, "test.go"))

    return _extract


@pytest.fixture
def parse(extractor):
    """Parse Go source text and return the root node plus the source bytes."""

    def _parse(code: str):
        source_bytes = code.encode("utf-8")
        return extractor.parse(source_bytes, "test.go").root_node, source_bytes

    return _parse


@pytest.fixture
def sample_go_file(tmp_path: Path) -> Path:
    path = tmp_path / "service.go"
    path.write_text(SAMPLE_GO, encoding="utf-8")
    return path


@pytest.fixture
def sample_record(extractor, sample_go_file):
    return extractor.extract_file(str(sample_go_file))
