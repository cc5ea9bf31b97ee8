class StorageError(Exception):
    """Base exception for all object store errors."""


class ObjectNotFoundError(StorageError):
    """Raised when no object exists under the requested key."""


class InvalidObjectKeyError(StorageError):
    """Raised when a key cannot be mapped to a storage location."""


class ObjectTooLargeError(StorageError):
    """Raised when an object exceeds the configured size limit."""


class CapabilityError(StorageError):
    """Base exception for rejected write capabilities."""


class InvalidCapabilityError(CapabilityError):
    """Raised when a capability token is malformed or its signature does not match."""


class ExpiredCapabilityError(CapabilityError):
    """Raised when a capability token is used after its expiry."""


class ContentTypeMismatchError(CapabilityError):
    """Raised when an upload's content type differs from the one the capability allows."""
