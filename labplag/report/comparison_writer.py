"""
Comparison detail files.

Serializing a single comparison is delegated to a ComparisonDetailWriter.
JsonComparisonWriter is the default used when the caller supplies none.
"""
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable

from ..comparison import Comparison
from ..diagnostics import Diagnostics
from ..submission import Submission
from .models import ComparisonDetail

logger = logging.getLogger(__name__)


class ComparisonDetailWriter(ABC):
    """Interface of per-comparison detail serializers."""

    @abstractmethod
    def write_comparison(
        self,
        comparison: Comparison,
        directory: Path,
        submission_to_id: Callable[[Submission], str],
    ) -> str:
        """
        Write the detail file of one comparison.

        :param comparison: Comparison to serialize
        :param directory: Report output directory
        :param submission_to_id: Lookup of report ids for submissions
        :return: Name of the written file, relative to directory
        """
        pass


class JsonComparisonWriter(ComparisonDetailWriter):
    """Writes "<id1>-<id2>.json" files with the similarity values."""

    def write_comparison(
        self,
        comparison: Comparison,
        directory: Path,
        submission_to_id: Callable[[Submission], str],
    ) -> str:
        first_id = submission_to_id(comparison.first_submission)
        second_id = submission_to_id(comparison.second_submission)
        detail = ComparisonDetail(
            id1=first_id,
            id2=second_id,
            similarity=comparison.similarity,
            maximal_similarity=comparison.maximal_similarity,
        )
        file_name = f"{first_id}-{second_id}.json"
        with open(Path(directory) / file_name, "w", encoding="utf-8") as f:
            f.write(detail.model_dump_json(indent=2))
        return file_name


def write_comparison_reports(
    comparisons: list[Comparison],
    directory: Path,
    writer: ComparisonDetailWriter,
    submission_to_id: Callable[[Submission], str],
    diagnostics: Diagnostics | None = None,
) -> dict[str, dict[str, str]]:
    """
    Write one detail file per comparison.

    A comparison whose file cannot be written is logged and left out of
    the returned map.

    Returns:
        Nested map id -> (other id -> detail file name), filled in both
        directions so either submission finds the file
    """
    file_names: dict[str, dict[str, str]] = {}
    for comparison in comparisons:
        first_name = comparison.first_submission.name
        second_name = comparison.second_submission.name
        try:
            first_id = submission_to_id(comparison.first_submission)
            second_id = submission_to_id(comparison.second_submission)
            file_name = writer.write_comparison(comparison, directory, submission_to_id)
        except Exception as e:
            # Any failure only loses this comparison
            message = f"Could not write comparison {first_name} - {second_name}: {e}"
            if diagnostics is not None:
                diagnostics.error(message, path=Path(directory), exc_info=e)
            else:
                logger.error(message, exc_info=e)
            continue
        file_names.setdefault(first_id, {})[second_id] = file_name
        file_names.setdefault(second_id, {})[first_id] = file_name
    return file_names
