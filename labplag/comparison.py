"""
Comparison results consumed by the report pipeline.

Comparisons are produced by an external similarity algorithm; this module
only models what report assembly needs from them.
"""
import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from .options import SHOW_ALL_COMPARISONS, AnalysisOptions
from .submission import Submission, SubmissionSet

DISTRIBUTION_BUCKETS = 10


class SimilarityMetric(Enum):
    """Similarity measures available on a comparison."""
    AVG = "Average of both program coverages. Matches with a high average similarity indicate that the programs work in a very similar way."
    MAX = "Maximum of both program coverages. Useful when the programs differ a lot in size, e.g. when dead code was inserted to disguise the origin of a program."

    @property
    def description(self) -> str:
        return self.value

    def of(self, comparison: "Comparison") -> float:
        if self is SimilarityMetric.MAX:
            return comparison.maximal_similarity
        return comparison.similarity


@dataclass(frozen=True)
class Comparison:
    """Similarity outcome between exactly two submissions."""
    first_submission: Submission
    second_submission: Submission
    similarity: float  # Average similarity in [0, 1]
    maximal_similarity: float | None = None

    def __post_init__(self):
        if self.maximal_similarity is None:
            object.__setattr__(self, "maximal_similarity", self.similarity)


@dataclass
class ComparisonResult:
    """Completed set of pairwise comparisons of one run."""
    comparisons: list[Comparison]
    submission_set: SubmissionSet
    options: AnalysisOptions
    duration: int = 0  # Total run duration in milliseconds
    _sorted: list[Comparison] = field(init=False, repr=False)

    def __post_init__(self):
        self._sorted = sorted(self.comparisons, key=lambda c: c.similarity, reverse=True)

    def get_comparisons(self, limit: int = SHOW_ALL_COMPARISONS) -> list[Comparison]:
        """
        Comparisons ordered by descending similarity, cut at limit.

        Args:
            limit: Maximum number of comparisons, 0 keeps all of them

        Returns:
            The most similar comparisons first
        """
        if limit == SHOW_ALL_COMPARISONS:
            return list(self._sorted)
        return self._sorted[:limit]

    def get_retained_comparisons(self) -> list[Comparison]:
        """Comparisons within the configured maximum-comparisons cap."""
        return self.get_comparisons(self.options.maximum_comparisons)

    def similarity_distribution(self, metric: SimilarityMetric = SimilarityMetric.AVG) -> list[int]:
        """
        Histogram of all comparisons over ten similarity buckets.

        Bucket i counts similarities in [i/10, (i+1)/10); a similarity of
        exactly 1.0 falls into the last bucket.
        """
        distribution = [0] * DISTRIBUTION_BUCKETS
        for comparison in self.comparisons:
            value = min(max(metric.of(comparison), 0.0), 1.0)
            index = min(int(value * DISTRIBUTION_BUCKETS), DISTRIBUTION_BUCKETS - 1)
            distribution[index] += 1
        return distribution


class ComparisonRecord(BaseModel):
    """One externally computed comparison, referencing submissions by name."""
    first: str
    second: str
    similarity: float = Field(ge=0.0, le=1.0)
    maximal_similarity: float | None = Field(default=None, ge=0.0, le=1.0)


class ComparisonFile(BaseModel):
    """Content of a comparisons file: the records and the run duration."""
    comparisons: list[ComparisonRecord]
    duration: int = 0  # milliseconds


def load_comparisons(path: str | Path, submission_set: SubmissionSet) -> tuple[list[Comparison], int]:
    """
    Read comparisons produced by an external comparison run.

    The file holds either a JSON list of records or an object with
    "comparisons" and "duration" keys.

    Returns:
        Tuple of (comparisons bound to the discovered submissions, duration)

    Raises:
        ValueError: If a record names a submission that was not discovered
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, list):
        data = {"comparisons": data}
    content = ComparisonFile.model_validate(data)

    by_name = {submission.name: submission for submission in submission_set}
    comparisons = []
    for record in content.comparisons:
        missing = [name for name in (record.first, record.second) if name not in by_name]
        if missing:
            raise ValueError(f"Unknown submission in comparisons file: {missing[0]}")
        comparisons.append(Comparison(
            first_submission=by_name[record.first],
            second_submission=by_name[record.second],
            similarity=record.similarity,
            maximal_similarity=record.maximal_similarity,
        ))
    return comparisons, content.duration
