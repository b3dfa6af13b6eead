"""
Diagnostics sink for discovery and report runs.

Every notice produced during a run is appended to a Diagnostics instance
owned by the caller and forwarded to the standard logging module.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Severity(Enum):
    """Severity of a diagnostic record."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class Diagnostic:
    """A single diagnostic notice."""
    severity: Severity
    message: str
    path: Path | None = None


class Diagnostics:
    """
    Append-only ordered collection of diagnostic records.

    Records are also emitted on the given logger so that a configured
    console/file handler sees them. The caller drains the sink once a run
    is over.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("labplag")
        self._records: list[Diagnostic] = []

    def report(
        self,
        severity: Severity,
        message: str,
        path: Path | None = None,
        exc_info: BaseException | None = None,
    ) -> Diagnostic:
        record = Diagnostic(severity=severity, message=message, path=path)
        self._records.append(record)
        self.logger.log(_LOG_LEVELS[severity], message, exc_info=exc_info)
        return record

    def info(self, message: str, path: Path | None = None) -> Diagnostic:
        return self.report(Severity.INFO, message, path)

    def warning(self, message: str, path: Path | None = None) -> Diagnostic:
        return self.report(Severity.WARNING, message, path)

    def error(
        self,
        message: str,
        path: Path | None = None,
        exc_info: BaseException | None = None,
    ) -> Diagnostic:
        return self.report(Severity.ERROR, message, path, exc_info)

    @property
    def records(self) -> list[Diagnostic]:
        """Snapshot of the recorded diagnostics, in emission order."""
        return list(self._records)

    def of_severity(self, severity: Severity) -> list[Diagnostic]:
        return [record for record in self._records if record.severity == severity]

    def drain(self) -> list[Diagnostic]:
        """Return all recorded diagnostics and clear the sink."""
        drained, self._records = self._records, []
        return drained

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(list(self._records))
