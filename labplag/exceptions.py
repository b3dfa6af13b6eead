"""
Exceptions raised while discovering submissions.

Report assembly never raises these: its failures are logged and bypassed.
"""


class DiscoveryError(Exception):
    """Base exception for submission discovery errors."""
    pass


class RootDirectoryError(DiscoveryError):
    """Root directory is missing, not a directory or cannot be listed."""
    pass


class BasecodeError(DiscoveryError):
    """Basecode is misconfigured, invalid or cannot be found."""
    pass


class SubmissionError(DiscoveryError):
    """A submission candidate is structurally invalid."""
    pass
