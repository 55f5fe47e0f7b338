from typing import Optional, Any


class KassaError(Exception):
    """
    Base exception for Kassa Kilat.

    `message` is user-facing and is returned as-is in the error response.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ResourceNotFoundError(KassaError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Data tidak ditemukan.", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)


class AuthenticationError(KassaError):
    """
    Raised when authentication fails.
    """
    def __init__(self, message: str = "Autentikasi gagal.", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)


class PermissionDeniedError(KassaError):
    """
    Raised when the caller is authenticated but not allowed to do something.
    """
    def __init__(self, message: str = "Aksi ditolak.", details: Optional[Any] = None):
        super().__init__(message, code="PERMISSION_DENIED", status_code=403, details=details)


class ValidationError(KassaError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validasi gagal.", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=422, details=details)


class ConflictError(KassaError):
    """
    Raised when a write would violate a uniqueness rule.
    """
    def __init__(self, message: str = "Data sudah ada.", details: Optional[Any] = None):
        super().__init__(message, code="CONFLICT", status_code=409, details=details)
