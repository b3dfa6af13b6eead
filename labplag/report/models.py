"""Report objects written to disk as JSON."""
from pydantic import BaseModel, ConfigDict, Field


class Version(BaseModel):
    """Report format version understood by the report viewer."""
    major: int
    minor: int
    patch: int


class TopComparison(BaseModel):
    """One entry of a metric's top comparisons, by submission id."""
    first_submission: str
    second_submission: str
    similarity: float


class Metric(BaseModel):
    """Named summary statistic over the comparisons of a run."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    distribution: list[int]
    top_comparisons: list[TopComparison] = Field(alias="topComparisons")
    description: str


class OverviewReport(BaseModel):
    """Aggregate document summarizing a run (overview.json)."""
    jplag_version: Version
    submission_folder_path: list[str]
    base_code_folder_path: str
    language: str
    file_extensions: list[str]
    submission_id_to_display_name: dict[str, str]
    submission_ids_to_comparison_file_name: dict[str, dict[str, str]]
    failed_submission_names: list[str] = Field(default_factory=list)
    excluded_files: list[str]
    match_sensitivity: int
    date_of_execution: str  # dd/mm/yy
    execution_time: int  # milliseconds
    metrics: list[Metric]
    clusters: list[dict] = Field(default_factory=list)


class ComparisonDetail(BaseModel):
    """Content of a comparison detail file written by JsonComparisonWriter."""
    id1: str
    id2: str
    similarity: float
    maximal_similarity: float
