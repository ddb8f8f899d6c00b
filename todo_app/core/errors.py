from typing import Optional


class StoreError(Exception):
    """A failed call against the todos table, as reported by the store."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __repr__(self) -> str:
        return f"StoreError(message={self.message!r}, code={self.code!r})"


class AuthClientError(Exception):
    """A failed call against the identity provider."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class ConfirmationRequired(AuthClientError):
    """Sign-up went through but the provider wants the email confirmed before issuing a session."""

    def __init__(self, message: str, user_id=None):
        super().__init__(message, status=202)
        self.user_id = user_id
