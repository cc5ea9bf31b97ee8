class InvalidFileIdError(Exception):
    """Raised when a file id cannot be a correlation id issued by the authorizer."""
