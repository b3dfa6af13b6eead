"""
Report assembly for comparison results.

- writer: ReportWriter orchestrating the report steps
- id_mapper: anonymized submission identifiers
- comparison_writer: per-comparison detail files
- metrics: AVG / MAX summary metrics
- models: pydantic report objects
- directory: output directory and zip helpers
"""

from .models import (
    Version,
    Metric,
    TopComparison,
    OverviewReport,
    ComparisonDetail,
)

from .id_mapper import build_submission_name_to_id_map

from .metrics import MetricMapper

from .comparison_writer import (
    ComparisonDetailWriter,
    JsonComparisonWriter,
    write_comparison_reports,
)

from .writer import (
    ReportWriter,
    ReportResult,
    ReportStatus,
    assemble_report,
    OVERVIEW_FILE_NAME,
    SUBMISSIONS_FOLDER,
    REPORT_VIEWER_VERSION,
)

__all__ = [
    # models
    "Version",
    "Metric",
    "TopComparison",
    "OverviewReport",
    "ComparisonDetail",
    # id_mapper
    "build_submission_name_to_id_map",
    # metrics
    "MetricMapper",
    # comparison_writer
    "ComparisonDetailWriter",
    "JsonComparisonWriter",
    "write_comparison_reports",
    # writer
    "ReportWriter",
    "ReportResult",
    "ReportStatus",
    "assemble_report",
    "OVERVIEW_FILE_NAME",
    "SUBMISSIONS_FOLDER",
    "REPORT_VIEWER_VERSION",
]
