"""
Report assembly.

This module provides ReportWriter, which turns a ComparisonResult into a
zipped report directory:

    <result>/
        overview.json
        <id1>-<id2>.json            (one per retained comparison)
        submissions/<id>/<file>     (files of compared submissions)

Only the creation of the top-level directory is fatal. Every other failure
is logged and the best achievable report is left on disk.
"""
import logging
import shutil
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

from ..comparison import Comparison, ComparisonResult
from ..diagnostics import Diagnostics
from ..submission import Submission
from .comparison_writer import ComparisonDetailWriter, JsonComparisonWriter, write_comparison_reports
from .directory import archive_path_for, create_directory, delete_directory, zip_directory
from .id_mapper import build_submission_name_to_id_map, invert
from .metrics import MetricMapper
from .models import OverviewReport, Version

logger = logging.getLogger(__name__)

OVERVIEW_FILE_NAME = "overview.json"
SUBMISSIONS_FOLDER = "submissions"
REPORT_VIEWER_VERSION = Version(major=4, minor=0, patch=0)
DATE_FORMAT = "%d/%m/%y"


class ReportStatus(Enum):
    """Possible report assembly outcomes."""
    ARCHIVED = "archived"          # Zip written, directory removed
    UNCOMPRESSED = "uncompressed"  # Zipping failed, directory kept
    FAILED = "failed"              # Output directory could not be created


@dataclass
class ReportResult:
    """Result of a report assembly run."""
    status: ReportStatus
    path: Path  # Archive if ARCHIVED, output directory otherwise
    message: str

    @property
    def success(self) -> bool:
        return self.status != ReportStatus.FAILED


class ReportWriter:
    """
    Assembles the report of one run.

    The identifier map and comparison file names are built per call of
    create_and_save_report; use a new writer or call again for a new run.
    """

    def __init__(
        self,
        comparison_writer: ComparisonDetailWriter | None = None,
        diagnostics: Diagnostics | None = None,
    ):
        self.comparison_writer = comparison_writer or JsonComparisonWriter()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics(logger)
        self.submission_name_to_id: dict[str, str] = {}
        self.comparison_file_names: dict[str, dict[str, str]] = {}

    def submission_to_id(self, submission: Submission) -> str:
        return self.submission_name_to_id[submission.name]

    def create_and_save_report(self, result: ComparisonResult, path: str | Path) -> ReportResult:
        """
        Write all report files and zip them.

        Args:
            result: Completed comparison result
            path: Output directory; the archive is written next to it

        Returns:
            ReportResult describing where the report ended up
        """
        path = Path(path)
        logger.info("Start writing report files...")
        try:
            create_directory(path)
        except OSError as e:
            message = f"Could not create directory {path} for report viewer generation"
            self.diagnostics.error(message, path=path, exc_info=e)
            return ReportResult(ReportStatus.FAILED, path, message)

        # Comparisons may reference submissions outside the discovered set
        self.submission_name_to_id = build_submission_name_to_id_map(
            [*result.submission_set.all_submissions(), *get_submissions(result.comparisons)]
        )
        comparisons = result.get_retained_comparisons()

        self.copy_submission_files(path, result, comparisons)
        self.comparison_file_names = write_comparison_reports(
            comparisons, path, self.comparison_writer, self.submission_to_id, self.diagnostics
        )
        self.write_overview(result, path)

        logger.info("Zipping report files...")
        return self.zip_and_delete(path)

    def copy_submission_files(self, path: Path, result: ComparisonResult, comparisons: list[Comparison]) -> None:
        """Copy the files of every compared submission below submissions/<id>."""
        try:
            submissions_path = create_directory(path, SUBMISSIONS_FOLDER)
        except OSError as e:
            self.diagnostics.error(f"Could not create directory {path / SUBMISSIONS_FOLDER}", path=path, exc_info=e)
            return

        language = result.options.frontend
        for submission in get_submissions(comparisons):
            try:
                directory = create_directory(submissions_path, self.submission_to_id(submission))
            except (OSError, KeyError) as e:
                self.diagnostics.error(
                    f"Could not create directory for submission {submission.name}", path=submissions_path, exc_info=e
                )
                continue

            for file in submission.files:
                file_to_copy = file
                if language.uses_view_files:
                    file_to_copy = file.with_name(file.name + language.view_file_suffix)
                try:
                    shutil.copyfile(file_to_copy, directory / file.name)
                except OSError as e:
                    self.diagnostics.error(f"Could not save submission file {file_to_copy}", path=file_to_copy, exc_info=e)

    def write_overview(self, result: ComparisonResult, path: Path) -> OverviewReport:
        options = result.options
        folders = [*options.submission_directories, *options.old_submission_directories]
        base_code = result.submission_set.base_code

        overview = OverviewReport(
            jplag_version=REPORT_VIEWER_VERSION,
            submission_folder_path=[str(folder) for folder in folders],
            base_code_folder_path=base_code.name if base_code is not None else "",
            language=options.frontend.name,
            file_extensions=options.valid_suffixes,
            submission_id_to_display_name=invert(self.submission_name_to_id),
            submission_ids_to_comparison_file_name=self.comparison_file_names,
            failed_submission_names=[],
            excluded_files=list(options.excluded_files),
            match_sensitivity=options.match_sensitivity,
            date_of_execution=get_date(),
            execution_time=result.duration,
            metrics=MetricMapper(self.submission_to_id).get_metrics(result),
            clusters=[],
        )

        overview_file = path / OVERVIEW_FILE_NAME
        try:
            with open(overview_file, "w", encoding="utf-8") as f:
                f.write(overview.model_dump_json(by_alias=True, indent=2))
        except OSError as e:
            self.diagnostics.error(f"Could not write {overview_file}", path=overview_file, exc_info=e)
        return overview

    def zip_and_delete(self, path: Path) -> ReportResult:
        if zip_directory(path):
            delete_directory(path.resolve())
            archive = archive_path_for(path)
            message = f"Report written to {archive}"
            self.diagnostics.info(message, path=archive)
            return ReportResult(ReportStatus.ARCHIVED, archive, message)

        message = f"Could not zip results. The results are still available uncompressed at {path}"
        self.diagnostics.error(message, path=path)
        return ReportResult(ReportStatus.UNCOMPRESSED, path, message)


def get_submissions(comparisons: list[Comparison]) -> list[Submission]:
    """Distinct submissions taking part in the comparisons, in first-seen order."""
    return list(dict.fromkeys(
        submission
        for comparison in comparisons
        for submission in (comparison.first_submission, comparison.second_submission)
    ))


def get_date() -> str:
    return datetime.now().strftime(DATE_FORMAT)


def assemble_report(
    result: ComparisonResult,
    output_path: str | Path,
    comparison_writer: ComparisonDetailWriter | None = None,
    diagnostics: Diagnostics | None = None,
) -> ReportResult:
    """Assemble, persist and archive the report of a comparison result."""
    return ReportWriter(comparison_writer, diagnostics).create_and_save_report(result, output_path)
