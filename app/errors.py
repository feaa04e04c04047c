# app/errors.py
# Every error ends the operation that raised it; nothing here is retried.


class AdminPanelError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidCredentials(AdminPanelError):
    status_code = 401


class LogoutFailed(AdminPanelError):
    status_code = 502


class WriteFailed(AdminPanelError):
    status_code = 502


class Unauthorized(AdminPanelError):
    status_code = 403


class SubscriptionFailed(AdminPanelError):
    status_code = 502


# ---------------------------
# Raised by external collaborators
# ---------------------------
class AuthProviderError(Exception):
    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class StoreError(Exception):
    """Document store failure; `code` is not-found, permission-denied or unavailable."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message
