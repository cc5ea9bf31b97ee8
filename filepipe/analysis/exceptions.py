class AnalysisError(Exception):
    """Base exception for analysis failures that are reported to the client."""


class UnrecognizedFormatError(AnalysisError):
    """Raised when a file cannot be classified as any supported format."""


class MalformedContentError(AnalysisError):
    """Raised when a file of a recognized format fails structural parsing."""
