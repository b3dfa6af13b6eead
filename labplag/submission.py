"""
Submission data model.

A Submission is built once during discovery and never modified afterwards.
Comparisons and the report pipeline only reference submissions.
"""
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path

from .language import LanguageFrontend


@dataclass(frozen=True, eq=False)
class Submission:
    """One participant's unit of work."""
    name: str  # Display name, the root directory or file name
    root: Path
    files: tuple[Path, ...]
    language: LanguageFrontend

    @cached_property
    def canonical_root(self) -> Path:
        """Resolved form of the root, used only for identity checks."""
        return self.root.resolve()

    def __repr__(self) -> str:
        return f"Submission(name={self.name!r}, root={str(self.root)!r}, files={len(self.files)})"


@dataclass
class SubmissionSet:
    """All submissions of a run plus the optional basecode submission."""
    submissions: list[Submission] = field(default_factory=list)
    base_code: Submission | None = None

    @property
    def has_base_code(self) -> bool:
        return self.base_code is not None

    @property
    def names(self) -> list[str]:
        return [submission.name for submission in self.submissions]

    def all_submissions(self) -> list[Submission]:
        """Regular submissions followed by the basecode, if any."""
        if self.base_code is None:
            return list(self.submissions)
        return [*self.submissions, self.base_code]

    def __len__(self) -> int:
        return len(self.submissions)

    def __iter__(self):
        return iter(self.submissions)
