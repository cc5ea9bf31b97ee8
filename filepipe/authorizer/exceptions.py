class AuthorizerError(Exception):
    """Base exception for upload authorization errors."""


class InvalidUploadRequestError(AuthorizerError):
    """Raised when the file name or content type of an upload request is invalid."""


class AuthorizationFailedError(AuthorizerError):
    """Raised when the object store cannot issue an upload capability."""
