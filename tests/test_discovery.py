"""
Unit tests for labplag/discovery.py

Tests root directory validation, entry filtering, recursive file
collection and basecode resolution.
"""
import os
import pytest
from pathlib import Path

from labplag.diagnostics import Diagnostics, Severity
from labplag.discovery import (
    SubmissionSetBuilder,
    collect_files,
    discover,
    has_valid_suffix,
    is_excluded_name,
)
from labplag.exceptions import BasecodeError, RootDirectoryError, SubmissionError


class TestSuffixMatching:
    """Tests for has_valid_suffix and is_excluded_name."""

    def test_matching_suffix(self):
        assert has_valid_suffix("Main.java", [".java"]) is True

    def test_non_matching_suffix(self):
        assert has_valid_suffix("Main.py", [".java"]) is False

    def test_no_suffixes_accepts_everything(self):
        """Without configured suffixes all files are accepted."""
        assert has_valid_suffix("README", []) is True
        assert has_valid_suffix("README", None) is True

    def test_plain_trailing_match(self):
        """Suffix matching is not extension aware."""
        assert has_valid_suffix("abc", ["c"]) is True
        assert has_valid_suffix("file.tar.gz", [".gz"]) is True

    def test_exclusion_is_trailing_match(self):
        """Exclusion pattern "c" also hits names merely ending in c."""
        assert is_excluded_name("magic", ["c"]) is True
        assert is_excluded_name("Test.java", ["Test.java"]) is True
        assert is_excluded_name("MyTest.java", ["Test.java"]) is True
        assert is_excluded_name("Test.java.bak", ["Test.java"]) is False

    def test_no_exclusions(self):
        assert is_excluded_name("Main.java", []) is False


class TestCollectFiles:
    """Tests for collect_files function."""

    @staticmethod
    def _collect(path, excluded=(), suffixes=(".java",)):
        return collect_files(
            path,
            lambda p: is_excluded_name(p.name, excluded),
            lambda p: has_valid_suffix(p.name, suffixes),
        )

    def test_single_file(self, make_tree):
        root = make_tree({"Main.java": "x"})
        assert self._collect(root / "Main.java") == [root / "Main.java"]

    def test_nested_files_in_sorted_order(self, make_tree):
        root = make_tree({
            "b": {"B.java": "x", "deep": {"D.java": "x"}},
            "a": {"A.java": "x"},
            "Z.java": "x",
        })
        files = self._collect(root)
        assert files == [
            root / "Z.java",
            root / "a" / "A.java",
            root / "b" / "B.java",
            root / "b" / "deep" / "D.java",
        ]

    def test_invalid_suffix_skipped(self, make_tree):
        root = make_tree({"Main.java": "x", "notes.txt": "x"})
        assert self._collect(root) == [root / "Main.java"]

    def test_excluded_directory_omits_all_nested_files(self, make_tree):
        """Files below an excluded directory never show up, siblings do."""
        root = make_tree({
            "src": {"Main.java": "x"},
            "generated": {"Gen.java": "x", "more": {"More.java": "x"}},
            "lib": {"generated": {"Deep.java": "x"}, "Lib.java": "x"},
        })
        files = self._collect(root, excluded=["generated"])
        assert files == [root / "lib" / "Lib.java", root / "src" / "Main.java"]

    def test_excluded_start_path(self, make_tree):
        root = make_tree({"Main.java": "x"})
        assert self._collect(root, excluded=["root"]) == []

    def test_unreadable_directory_contributes_nothing(self, make_tree, monkeypatch):
        root = make_tree({"ok": {"A.java": "x"}, "locked": {"B.java": "x"}})
        real_listdir = os.listdir

        def fake_listdir(path):
            if Path(path) == root / "locked":
                raise PermissionError("denied")
            return real_listdir(path)

        monkeypatch.setattr("labplag.discovery.os.listdir", fake_listdir)
        assert self._collect(root) == [root / "ok" / "A.java"]

    def test_deep_tree(self, tmp_path):
        """Deep nesting does not hit the recursion limit."""
        current = tmp_path / "deep"
        current.mkdir()
        for _ in range(200):
            current = current / "d"
            current.mkdir()
        (current / "Leaf.java").write_text("x")
        assert self._collect(tmp_path / "deep") == [current / "Leaf.java"]


class TestRootDirectory:
    """Tests for root directory validation."""

    def test_missing_root(self, tmp_path, java_options):
        with pytest.raises(RootDirectoryError, match="does not exist"):
            discover(tmp_path / "missing", java_options())

    def test_root_is_file(self, tmp_path, java_options):
        root = tmp_path / "file.java"
        root.write_text("x")
        with pytest.raises(RootDirectoryError, match="is not a directory"):
            discover(root, java_options())

    def test_unlistable_root(self, make_tree, java_options, monkeypatch):
        root = make_tree({"alice": {"Main.java": "x"}})

        def denied(path):
            raise PermissionError("denied")

        monkeypatch.setattr("labplag.discovery.os.listdir", denied)
        with pytest.raises(RootDirectoryError, match="Cannot list files"):
            discover(root, java_options())


class TestSubmissionDiscovery:
    """Tests for discovery of regular submissions."""

    def test_submissions_in_lexicographic_order(self, make_tree, java_options):
        root = make_tree({
            "carol": {"Main.java": "x"},
            "alice": {"Main.java": "x"},
            "bob": {"Main.java": "x"},
        })
        submission_set = discover(root, java_options())

        assert submission_set.names == ["alice", "bob", "carol"]
        assert submission_set.base_code is None
        assert len(submission_set) == 3

    def test_submission_files_and_root(self, make_tree, java_options):
        root = make_tree({"alice": {"Main.java": "x", "util": {"Util.java": "x"}}})
        submission = discover(root, java_options()).submissions[0]

        assert submission.root == root / "alice"
        assert submission.files == (root / "alice" / "Main.java", root / "alice" / "util" / "Util.java")
        assert submission.canonical_root == (root / "alice").resolve()

    def test_single_file_submissions(self, make_tree, java_options):
        """Plain files with a valid suffix are submissions of their own."""
        root = make_tree({"alice.java": "x", "bob.java": "x", "readme.txt": "x"})
        submission_set = discover(root, java_options())

        assert submission_set.names == ["alice.java", "bob.java"]
        assert submission_set.submissions[0].files == (root / "alice.java",)

    def test_invalid_suffix_entry_reported(self, make_tree, java_options):
        root = make_tree({"alice": {"Main.java": "x"}, "readme.txt": "x"})
        diagnostics = Diagnostics()
        submission_set = discover(root, java_options(), diagnostics=diagnostics)

        assert submission_set.names == ["alice"]
        messages = [d.message for d in diagnostics.of_severity(Severity.INFO)]
        assert "Ignore submission with invalid suffix: readme.txt" in messages

    def test_excluded_entries_never_appear(self, make_tree, java_options):
        """Excluded directories and files are skipped with a notice."""
        root = make_tree({
            "alice": {"Main.java": "x"},
            "old_backup": {"Main.java": "x"},
            "Solution_backup": "x",
        })
        diagnostics = Diagnostics()
        submission_set = discover(root, java_options(), ["_backup"], diagnostics)

        assert submission_set.names == ["alice"]
        messages = [d.message for d in diagnostics]
        assert "Exclude submission: old_backup" in messages
        assert "Exclude submission: Solution_backup" in messages

    def test_exclusions_default_to_options(self, make_tree, java_options):
        root = make_tree({"alice": {"Main.java": "x", "Test.java": "x"}, "bob": {"Main.java": "x"}})
        submission_set = discover(root, java_options(excluded_files=["Test.java"]))

        assert submission_set.submissions[0].files == (root / "alice" / "Main.java",)

    def test_all_files_accepted_without_suffixes(self, make_tree, java_options):
        root = make_tree({"alice": {"Main.java": "x", "notes.txt": "x"}, "readme": "x"})
        submission_set = discover(root, java_options(file_suffixes=[]))

        assert submission_set.names == ["alice", "readme"]
        assert len(submission_set.submissions[0].files) == 2

    def test_empty_submission_directory(self, make_tree, java_options):
        root = make_tree({"alice": {"notes.txt": "x"}})
        submission = discover(root, java_options()).submissions[0]
        assert submission.files == ()

    def test_subdirectory_used_as_root(self, make_tree, java_options):
        root = make_tree({
            "alice": {"src": {"Main.java": "x"}, "Other.java": "x"},
            "bob": {"src": {"Main.java": "x"}},
        })
        submission_set = discover(root, java_options(subdirectory_name="src"))

        alice = submission_set.submissions[0]
        assert alice.name == "alice"
        assert alice.root == root / "alice" / "src"
        assert alice.files == (root / "alice" / "src" / "Main.java",)

    def test_missing_subdirectory_fails_discovery(self, make_tree, java_options):
        root = make_tree({"alice": {"src": {"Main.java": "x"}}, "bob": {"Main.java": "x"}})
        with pytest.raises(SubmissionError, match="bob does not contain the given subdirectory 'src'"):
            discover(root, java_options(subdirectory_name="src"))

    def test_subdirectory_not_a_directory(self, make_tree, java_options):
        root = make_tree({"alice": {"src": "not a directory"}})
        with pytest.raises(SubmissionError, match="is not a directory"):
            discover(root, java_options(subdirectory_name="src"))

    def test_subdirectory_ignored_for_file_entries(self, make_tree, java_options):
        root = make_tree({"alice.java": "x"})
        submission = discover(root, java_options(subdirectory_name="src")).submissions[0]
        assert submission.root == root / "alice.java"

    def test_builder_runs_are_independent(self, make_tree, java_options):
        root = make_tree({"alice": {"Main.java": "x"}})
        builder = SubmissionSetBuilder(java_options())
        first = builder.build(root)
        (root / "bob").mkdir()
        second = builder.build(root)

        assert first.names == ["alice"]
        assert second.names == ["alice", "bob"]


class TestBasecode:
    """Tests for basecode resolution."""

    def test_basecode_as_root_entry_name(self, sample_root, java_options):
        """Legacy name lookup removes the basecode and warns."""
        diagnostics = Diagnostics()
        submission_set = discover(sample_root, java_options(base_code="base"), diagnostics=diagnostics)

        assert submission_set.names == ["alice", "bob"]
        assert submission_set.base_code.name == "base"
        assert submission_set.base_code.root == sample_root / "base"
        warnings = diagnostics.of_severity(Severity.WARNING)
        assert len(warnings) == 1
        assert "Deprecated use of the basecode option" in warnings[0].message
        assert str(sample_root / "base") in warnings[0].message

    def test_basecode_name_with_trailing_separator(self, sample_root, java_options):
        submission_set = discover(sample_root, java_options(base_code="/base/"))
        assert submission_set.base_code.name == "base"
        assert submission_set.names == ["alice", "bob"]

    def test_basecode_outside_root(self, sample_root, make_tree, java_options):
        """An explicit path outside the root leaves all submissions in place."""
        template = make_tree({"base": {"Main.java": "x"}}, name="elsewhere") / "base"
        diagnostics = Diagnostics()
        submission_set = discover(sample_root, java_options(base_code=str(template)), diagnostics=diagnostics)

        assert submission_set.names == ["alice", "base", "bob"]
        assert submission_set.base_code.root == template
        assert diagnostics.of_severity(Severity.WARNING) == []

    def test_basecode_path_inside_root_is_deduplicated(self, sample_root, java_options):
        """The same directory never counts as submission and basecode."""
        diagnostics = Diagnostics()
        base_path = sample_root / "base"
        submission_set = discover(sample_root, java_options(base_code=str(base_path)), diagnostics=diagnostics)

        assert submission_set.names == ["alice", "bob"]
        assert submission_set.base_code.root == base_path
        assert diagnostics.of_severity(Severity.WARNING) == []
        assert any("as user submission" in d.message for d in diagnostics)

    def test_basecode_path_via_symlink_is_deduplicated(self, sample_root, tmp_path, java_options):
        link = tmp_path / "link-to-base"
        link.symlink_to(sample_root / "base", target_is_directory=True)
        submission_set = discover(sample_root, java_options(base_code=str(link)))

        assert submission_set.names == ["alice", "bob"]
        assert submission_set.base_code.name == "link-to-base"

    def test_relative_basecode_path(self, sample_root, isolated_cwd, java_options):
        """Relative paths are resolved against the working directory."""
        (isolated_cwd / "template").mkdir()
        (isolated_cwd / "template" / "Main.java").write_text("x")
        submission_set = discover(sample_root, java_options(base_code="template"))

        assert submission_set.base_code.name == "template"
        assert len(submission_set) == 3

    def test_basecode_name_with_dot(self, sample_root, java_options):
        with pytest.raises(BasecodeError, match="cannot contain dots"):
            discover(sample_root, java_options(base_code="base.v2"))

    def test_basecode_not_found(self, sample_root, java_options):
        with pytest.raises(BasecodeError, match='Basecode path "missing" relative to the working directory could not be found.'):
            discover(sample_root, java_options(base_code="missing"))

    def test_basecode_with_internal_separator_not_found(self, sample_root, java_options):
        with pytest.raises(BasecodeError, match="could not be found"):
            discover(sample_root, java_options(base_code="nested/base"))

    def test_excluded_basecode_path(self, sample_root, make_tree, java_options):
        template = make_tree({"template_old": {"Main.java": "x"}}, name="elsewhere") / "template_old"
        with pytest.raises(BasecodeError, match="Exclude submission: template_old"):
            discover(sample_root, java_options(base_code=str(template)), ["_old"])

    def test_basecode_file_with_invalid_suffix(self, sample_root, tmp_path, java_options):
        template = tmp_path / "template.txt"
        template.write_text("x")
        with pytest.raises(BasecodeError, match="invalid suffix"):
            discover(sample_root, java_options(base_code=str(template)))

    def test_basecode_missing_subdirectory(self, make_tree, java_options):
        root = make_tree({"alice": {"src": {"Main.java": "x"}}})
        template = make_tree({"Main.java": "x"}, name="template")

        with pytest.raises(BasecodeError, match="does not contain the given subdirectory") as exc_info:
            discover(root, java_options(base_code=str(template), subdirectory_name="src"))
        assert isinstance(exc_info.value.__cause__, SubmissionError)

    def test_basecode_uses_subdirectory(self, make_tree, java_options):
        root = make_tree({"alice": {"src": {"Main.java": "x"}}, "base": {"src": {"Main.java": "x"}}})
        submission_set = discover(root, java_options(base_code="base", subdirectory_name="src"))

        assert submission_set.names == ["alice"]
        assert submission_set.base_code.root == root / "base" / "src"

    def test_dot_name_fails_before_any_submission(self, sample_root, java_options):
        """A dotted basecode name yields an error, never a partial set."""
        builder = SubmissionSetBuilder(java_options(base_code="my.base"))
        with pytest.raises(BasecodeError):
            builder.build(sample_root)
