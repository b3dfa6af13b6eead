"""
Submission discovery and report assembly for source similarity checks.

This package contains:
- discovery: find and validate submissions below a root directory
- report: turn comparison results into a zipped report
- options: analysis options from YAML config, environment and CLI
- language: supported source language frontends
- diagnostics: per-run sink of non-fatal notices
"""

from .exceptions import (
    DiscoveryError,
    RootDirectoryError,
    BasecodeError,
    SubmissionError,
)

from .diagnostics import (
    Diagnostic,
    Diagnostics,
    Severity,
)

from .language import (
    LanguageFrontend,
    LANGUAGES,
    get_language,
)

from .options import (
    AnalysisOptions,
    load_options,
    read_exclusion_file,
    SHOW_ALL_COMPARISONS,
)

from .submission import (
    Submission,
    SubmissionSet,
)

from .comparison import (
    Comparison,
    ComparisonResult,
    SimilarityMetric,
)

from .discovery import (
    SubmissionSetBuilder,
    discover,
    collect_files,
)

from .report import (
    ReportWriter,
    ReportResult,
    ReportStatus,
    assemble_report,
)

__all__ = [
    # exceptions
    "DiscoveryError",
    "RootDirectoryError",
    "BasecodeError",
    "SubmissionError",
    # diagnostics
    "Diagnostic",
    "Diagnostics",
    "Severity",
    # language
    "LanguageFrontend",
    "LANGUAGES",
    "get_language",
    # options
    "AnalysisOptions",
    "load_options",
    "read_exclusion_file",
    "SHOW_ALL_COMPARISONS",
    # submission
    "Submission",
    "SubmissionSet",
    # comparison
    "Comparison",
    "ComparisonResult",
    "SimilarityMetric",
    # discovery
    "SubmissionSetBuilder",
    "discover",
    "collect_files",
    # report
    "ReportWriter",
    "ReportResult",
    "ReportStatus",
    "assemble_report",
]
