class ClientError(Exception):
    """Base exception for client-side submission failures."""


class UploadRequestError(ClientError):
    """Raised when the service refuses or fails to issue an upload URL."""


class TransportFailedError(ClientError):
    """Raised when the direct upload of raw bytes does not complete."""


class ResultFetchError(ClientError):
    """Raised when a result poll fails with an unexpected response."""


class PollTimeoutError(ClientError):
    """Raised when no terminal result appears within the poll budget."""
