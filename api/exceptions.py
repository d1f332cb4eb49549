"""Application exceptions shared by the note store, services and routes."""


class SmartNoteError(Exception):
    """Base exception for all SmartNote errors."""

    status_code = 500

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(SmartNoteError):
    """Raised when an operation targets a note that does not exist."""

    status_code = 404

    def __init__(self, message: str = "Note not found") -> None:
        super().__init__(message, code="NOTE_NOT_FOUND")


class ValidationError(SmartNoteError):
    """Raised when input to a store or AI operation is rejected."""

    status_code = 400

    def __init__(self, message: str = "Validation failed") -> None:
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class ServiceError(SmartNoteError):
    """Raised when an external service (AI model, storage) fails."""

    status_code = 502

    def __init__(self, message: str = "External service failed", code: str = "EXT_SERVICE_ERROR") -> None:
        super().__init__(message, code=code)


class BlobStoreError(ServiceError):
    """Raised when the blob store cannot be read or written."""

    status_code = 503

    def __init__(self, message: str = "Blob store unavailable") -> None:
        super().__init__(message, code="STORE_UNAVAILABLE")


class UnsupportedCapabilityError(SmartNoteError):
    """Raised when speech recognition is not available in this environment."""

    status_code = 501

    def __init__(self, message: str = "Speech recognition is not supported") -> None:
        super().__init__(message, code="CAP_UNSUPPORTED")
