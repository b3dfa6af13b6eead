"""
Summary metrics of a run.

Each metric carries the similarity distribution over all comparisons and
the retained comparisons ranked by that metric.
"""
from typing import Callable

from ..comparison import Comparison, ComparisonResult, SimilarityMetric
from ..submission import Submission
from .models import Metric, TopComparison


class MetricMapper:
    """Builds Metric report objects for a comparison result."""

    def __init__(self, submission_to_id: Callable[[Submission], str]):
        self.submission_to_id = submission_to_id

    def get_average_metric(self, result: ComparisonResult) -> Metric:
        return self._get_metric(result, SimilarityMetric.AVG)

    def get_max_metric(self, result: ComparisonResult) -> Metric:
        return self._get_metric(result, SimilarityMetric.MAX)

    def get_metrics(self, result: ComparisonResult) -> list[Metric]:
        """All metrics written to the overview: average, then maximum."""
        return [self.get_average_metric(result), self.get_max_metric(result)]

    def _get_metric(self, result: ComparisonResult, metric: SimilarityMetric) -> Metric:
        return Metric(
            name=metric.name,
            distribution=convert_distribution(result.similarity_distribution(metric)),
            top_comparisons=self._top_comparisons(result.get_retained_comparisons(), metric),
            description=metric.description,
        )

    def _top_comparisons(self, comparisons: list[Comparison], metric: SimilarityMetric) -> list[TopComparison]:
        ranked = sorted(comparisons, key=metric.of, reverse=True)
        return [
            TopComparison(
                first_submission=self.submission_to_id(comparison.first_submission),
                second_submission=self.submission_to_id(comparison.second_submission),
                similarity=metric.of(comparison),
            )
            for comparison in ranked
        ]


def convert_distribution(distribution: list[int]) -> list[int]:
    """
    Order a histogram with the highest-similarity bucket first.

    Examples:
        >>> convert_distribution([5, 0, 0, 0, 0, 0, 0, 0, 0, 1])
        [1, 0, 0, 0, 0, 0, 0, 0, 0, 5]
    """
    return list(reversed(distribution))
