"""
Submission discovery.

This module turns a root directory into a validated SubmissionSet:
- entries of the root become submissions unless excluded by name or suffix
- an optional subdirectory is used as the root of every directory entry
- an optional basecode is resolved, either as an explicit path or as the
  name of a root entry, and removed from the regular submissions
"""
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Collection, Iterable

from .diagnostics import Diagnostics
from .exceptions import BasecodeError, RootDirectoryError, SubmissionError
from .options import AnalysisOptions
from .submission import Submission, SubmissionSet

logger = logging.getLogger(__name__)

# Separators trimmed from a basecode given as root entry name
_SEPARATORS = "".join(dict.fromkeys(["/", os.sep]))


def has_valid_suffix(name: str, suffixes: Collection[str] | None) -> bool:
    """
    Check whether a file name ends with one of the valid suffixes.

    This is a plain trailing match, not an extension match: ".c" accepts
    "main.c" but so does suffix "c" for "abc".

    Examples:
        >>> has_valid_suffix("Main.java", [".java"])
        True
        >>> has_valid_suffix("Main.java", [])
        True
        >>> has_valid_suffix("notes.txt", [".java"])
        False
    """
    if not suffixes:
        return True
    return any(name.endswith(suffix) for suffix in suffixes)


def is_excluded_name(name: str, excluded_file_names: Iterable[str]) -> bool:
    """Check whether a name ends with any excluded file name."""
    return any(name.endswith(excluded) for excluded in excluded_file_names)


def collect_files(
    path: Path,
    is_excluded: Callable[[Path], bool],
    is_valid_file: Callable[[Path], bool],
) -> list[Path]:
    """
    Collect all accepted files below a path.

    Excluded entries contribute nothing, not even their children. Files
    without a valid suffix and directories that cannot be listed are skipped
    silently. A single accepted file yields itself.

    Traversal uses an explicit stack and visits children in sorted order, so
    the result is deterministic and deep trees do not hit the recursion
    limit.

    Args:
        path: File or directory to start from
        is_excluded: Predicate for excluded entries
        is_valid_file: Predicate for files with a valid suffix

    Returns:
        Accepted file paths in depth-first order
    """
    files: list[Path] = []
    stack = [path]
    while stack:
        current = stack.pop()
        if is_excluded(current):
            continue
        if current.is_file() and is_valid_file(current):
            files.append(current)
            continue
        try:
            children = sorted(os.listdir(current))
        except OSError:
            # Not a directory, or a directory we may not read
            continue
        stack.extend(current / child for child in reversed(children))
    return files


class ResolutionStatus(Enum):
    """Outcome of a single basecode resolution strategy."""
    RESOLVED = "resolved"
    NOT_APPLICABLE = "not_applicable"
    FATAL = "fatal"


@dataclass
class BasecodeResolution:
    """Result of trying to resolve the basecode one way."""
    status: ResolutionStatus
    submission: Submission | None = None
    error: BasecodeError | None = None
    cause: Exception | None = None
    legacy: bool = False  # Resolved as root entry name (deprecated form)

    @classmethod
    def resolved(cls, submission: Submission, legacy: bool = False) -> "BasecodeResolution":
        return cls(ResolutionStatus.RESOLVED, submission=submission, legacy=legacy)

    @classmethod
    def not_applicable(cls) -> "BasecodeResolution":
        return cls(ResolutionStatus.NOT_APPLICABLE)

    @classmethod
    def fatal(cls, message: str, cause: Exception | None = None) -> "BasecodeResolution":
        return cls(ResolutionStatus.FATAL, error=BasecodeError(message), cause=cause)


class SubmissionSetBuilder:
    """
    Builds the submission set of a single run.

    A builder holds no state besides its configuration; every call to
    build() starts from scratch.
    """

    def __init__(
        self,
        options: AnalysisOptions,
        excluded_file_names: Iterable[str] | None = None,
        diagnostics: Diagnostics | None = None,
    ):
        """
        Initialize builder.

        Args:
            options: Analysis options (language, suffixes, basecode, ...)
            excluded_file_names: Names or suffixes of entries to ignore,
                defaults to options.excluded_files
            diagnostics: Sink for non-fatal notices
        """
        self.options = options
        self.language = options.frontend
        self.suffixes = options.valid_suffixes
        if excluded_file_names is None:
            excluded_file_names = options.excluded_files
        self.excluded_file_names = frozenset(excluded_file_names)
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics(logger)

    def build(self, root_directory: str | Path) -> SubmissionSet:
        """
        Discover all submissions below a root directory.

        Raises:
            RootDirectoryError: Root is missing, not a directory or unreadable
            BasecodeError: Basecode configured but invalid or not found
            SubmissionError: A submission lacks the configured subdirectory
        """
        root = Path(root_directory)
        self._verify_root(root)
        found = self._process_root_entries(root, self._read_root_entries(root))

        base_code = None
        if self.options.has_base_code:
            base_code = self._resolve_base_code(root, found)
            self._remove_base_code_duplicate(base_code, found)

        return SubmissionSet(submissions=list(found.values()), base_code=base_code)

    def _verify_root(self, root: Path) -> None:
        if not root.exists():
            raise RootDirectoryError(f'Root directory "{root}" does not exist!')
        if not root.is_dir():
            raise RootDirectoryError(f'Root directory "{root}" is not a directory!')

    def _read_root_entries(self, root: Path) -> list[str]:
        try:
            names = os.listdir(root)
        except OSError as e:
            raise RootDirectoryError(f"Cannot list files of the root directory! {e}") from e
        return sorted(names)

    def is_excluded(self, path: Path) -> bool:
        return is_excluded_name(path.name, self.excluded_file_names)

    def is_valid_file(self, path: Path) -> bool:
        return has_valid_suffix(path.name, self.suffixes)

    def excluded_entry_message(self, entry: Path) -> str | None:
        """
        Check whether a root entry is excluded by name or by suffix.

        Returns:
            Reason for ignoring the entry, or None if it is accepted
        """
        if self.is_excluded(entry):
            return f"Exclude submission: {entry.name}"
        if entry.is_file() and not self.is_valid_file(entry):
            return f"Ignore submission with invalid suffix: {entry.name}"
        return None

    def _process_root_entries(self, root: Path, names: list[str]) -> dict[str, Submission]:
        found: dict[str, Submission] = {}
        for name in names:
            entry = root / name
            message = self.excluded_entry_message(entry)
            if message is not None:
                self.diagnostics.info(message, path=entry)
                continue
            found[name] = self.build_submission(entry)
        return found

    def build_submission(self, entry: Path) -> Submission:
        """
        Turn an accepted entry into a submission.

        Raises:
            SubmissionError: The configured subdirectory is missing or is
                not a directory
        """
        name = entry.name or entry.resolve().name
        submission_root = entry
        subdirectory = self.options.subdirectory_name
        if subdirectory is not None and entry.is_dir():
            submission_root = entry / subdirectory
            if not submission_root.exists():
                raise SubmissionError(
                    f"Submission {name} does not contain the given subdirectory '{subdirectory}'"
                )
            if not submission_root.is_dir():
                raise SubmissionError(f"The given subdirectory '{subdirectory}' is not a directory!")

        files = collect_files(submission_root, self.is_excluded, self.is_valid_file)
        return Submission(name=name, root=submission_root, files=tuple(files), language=self.language)

    def _resolve_base_code(self, root: Path, found: dict[str, Submission]) -> Submission:
        base_code_name = self.options.base_code
        strategies = (
            lambda: self._base_code_as_path(base_code_name),
            lambda: self._base_code_as_root_entry(base_code_name, found),
        )
        for strategy in strategies:
            resolution = strategy()
            if resolution.status == ResolutionStatus.FATAL:
                raise resolution.error from resolution.cause
            if resolution.status == ResolutionStatus.RESOLVED:
                break
        else:
            raise BasecodeError(
                f'Basecode path "{base_code_name}" relative to the working directory could not be found.'
            )

        base_code = resolution.submission
        if resolution.legacy:
            self.diagnostics.warning(
                "Deprecated use of the basecode option found, please specify the basecode as "
                f'"{root}{os.sep}{base_code_name}" instead.'
            )
        self.diagnostics.info(f'Basecode directory "{base_code.root}" will be used.', path=base_code.root)
        return base_code

    def _base_code_as_path(self, base_code_name: str) -> BasecodeResolution:
        entry = Path(base_code_name)
        if not entry.exists():
            return BasecodeResolution.not_applicable()

        message = self.excluded_entry_message(entry)
        if message is not None:
            return BasecodeResolution.fatal(message)

        try:
            return BasecodeResolution.resolved(self.build_submission(entry))
        except SubmissionError as e:
            return BasecodeResolution.fatal(str(e), cause=e)

    def _base_code_as_root_entry(
        self,
        base_code_name: str,
        found: dict[str, Submission],
    ) -> BasecodeResolution:
        name = base_code_name.strip(_SEPARATORS)
        if not name or any(separator in name for separator in _SEPARATORS):
            return BasecodeResolution.not_applicable()

        if "." in name:
            return BasecodeResolution.fatal(f'The basecode directory name "{name}" cannot contain dots!')

        submission = found.get(name)
        if submission is None:
            return BasecodeResolution.not_applicable()
        return BasecodeResolution.resolved(submission, legacy=True)

    def _remove_base_code_duplicate(self, base_code: Submission, found: dict[str, Submission]) -> None:
        # Basecode may also be registered as a regular submission
        for name, submission in found.items():
            if submission.canonical_root == base_code.canonical_root:
                del found[name]
                self.diagnostics.info(f'Skipping "{submission.root}" as user submission.', path=submission.root)
                break


def discover(
    root_directory: str | Path,
    options: AnalysisOptions,
    excluded_file_names: Iterable[str] | None = None,
    diagnostics: Diagnostics | None = None,
) -> SubmissionSet:
    """
    Discover the submissions of a root directory.

    Args:
        root_directory: Directory whose entries are the submissions
        options: Analysis options
        excluded_file_names: Names or suffixes to exclude, defaults to
            options.excluded_files
        diagnostics: Sink for non-fatal notices

    Returns:
        SubmissionSet in lexicographic order of entry name

    Raises:
        RootDirectoryError, BasecodeError, SubmissionError
    """
    builder = SubmissionSetBuilder(options, excluded_file_names, diagnostics)
    return builder.build(root_directory)
