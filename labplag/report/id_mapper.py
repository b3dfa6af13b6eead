"""
Mapping of submission names to opaque report identifiers.

Identifiers name the submission folders and comparison files of a report,
so the file layout does not reveal submission names.
"""
from typing import Iterable

from ..submission import Submission, SubmissionSet

SUBMISSION_ID_PREFIX = "s"


def build_submission_name_to_id_map(submissions: SubmissionSet | Iterable[Submission]) -> dict[str, str]:
    """
    Assign every distinct submission name a stable identifier.

    Identifiers are handed out in iteration order ("s1", "s2", ...). A
    SubmissionSet contributes its regular submissions first, then the
    basecode. Repeated names keep their first identifier.
    """
    if isinstance(submissions, SubmissionSet):
        submissions = submissions.all_submissions()

    name_to_id: dict[str, str] = {}
    for submission in submissions:
        if submission.name not in name_to_id:
            name_to_id[submission.name] = f"{SUBMISSION_ID_PREFIX}{len(name_to_id) + 1}"
    return name_to_id


def invert(name_to_id: dict[str, str]) -> dict[str, str]:
    """Turn a name -> id map into an id -> name map for display."""
    return {submission_id: name for name, submission_id in name_to_id.items()}
