"""
Pytest configuration and shared fixtures for testing.
"""
import pytest
import os
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from labplag.language import JAVA
from labplag.options import AnalysisOptions
from labplag.submission import Submission


def write_tree(base: Path, tree: dict) -> Path:
    """Create files and directories from a nested dict (str values are file contents)."""
    base.mkdir(parents=True, exist_ok=True)
    for name, content in tree.items():
        path = base / name
        if isinstance(content, dict):
            write_tree(path, content)
        else:
            path.write_text(content, encoding="utf-8")
    return base


@pytest.fixture
def make_tree(tmp_path):
    """Factory creating a directory tree below tmp_path."""
    def _make(tree: dict, name: str = "root") -> Path:
        return write_tree(tmp_path / name, tree)
    return _make


@pytest.fixture
def java_options():
    """Options for Java submissions without basecode."""
    def _options(**kwargs) -> AnalysisOptions:
        kwargs.setdefault("language", "java")
        return AnalysisOptions(**kwargs)
    return _options


@pytest.fixture
def sample_root(make_tree):
    """Root with alice/, bob/ and base/, one Java file each."""
    return make_tree({
        "alice": {"Main.java": "class Main {}"},
        "bob": {"Main.java": "class Main { int x; }"},
        "base": {"Main.java": "class Main { /* template */ }"},
    })


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every test from an empty working directory.

    Basecode names are first tried as paths relative to the working
    directory, so tests must not see stray directories.
    """
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    monkeypatch.delenv("LABPLAG_LANGUAGE", raising=False)
    monkeypatch.delenv("LABPLAG_MAX_COMPARISONS", raising=False)
    return cwd


def make_submission(root: Path, files: list[str] | None = None, name: str | None = None) -> Submission:
    """Create a submission directly, writing its files below root."""
    root.mkdir(parents=True, exist_ok=True)
    paths = []
    for file_name in files or []:
        path = root / file_name
        path.write_text(f"// {file_name}", encoding="utf-8")
        paths.append(path)
    return Submission(name=name or root.name, root=root, files=tuple(paths), language=JAVA)
