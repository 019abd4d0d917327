"""
Error taxonomy for the ledger.

Services and repositories raise these; the HTTP layer turns them into a
status code and a single ``{"error": message}`` body. Messages are written
for the caller, so they never carry store or driver detail.
"""
from typing import Optional


class LedgerError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(LedgerError):
    status_code = 400
    default_message = "Invalid request"


class AuthError(LedgerError):
    status_code = 401
    default_message = "Authentication required"


class InvalidCredentials(AuthError):
    default_message = "Invalid credentials"


class TokenExpired(AuthError):
    default_message = "Token has expired"


class TokenMalformed(AuthError):
    default_message = "Invalid token"


class TokenRevoked(AuthError):
    default_message = "User account is disabled"


class Forbidden(LedgerError):
    status_code = 403
    default_message = "Admin access required"


class SelfDeletion(ValidationError):
    default_message = "Cannot delete yourself"


class NotFound(LedgerError):
    status_code = 404
    default_message = "Not found"


class Conflict(LedgerError):
    status_code = 400
    default_message = "Conflicting record"


class DuplicateRecord(Conflict):
    default_message = "Record already exists"


class DuplicateBarcode(Conflict):
    default_message = "Barcode already exists"


class DuplicateEmail(Conflict):
    default_message = "User with this email already exists"


class UserLimitReached(Conflict):
    default_message = "User limit reached for this company"


class StorageError(LedgerError):
    status_code = 500
    default_message = "Storage failure"
