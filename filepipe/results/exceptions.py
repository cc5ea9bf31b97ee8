class ResultRecordValidationError(Exception):
    """Raised when a result record violates the record contract."""
