"""Domain error taxonomy.

Services raise these; the exception handlers in feedr.main turn them into
responses (an HTML error page for browser routes, ``{"error": ...}`` for
``/api/`` routes).  ``message`` is the user-facing text and is kept short
and non-specific where specificity would leak information.
"""

from __future__ import annotations


class FeedrError(Exception):
    status_code = 400
    default_message = "Ongeldige invoer."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FeedrError):
    """Missing or malformed input the user can correct."""


class ConflictError(FeedrError):
    """Uniqueness violation on email or slug."""


class AuthError(FeedrError):
    """Bad credentials.  Deliberately identical for unknown email and wrong password."""

    default_message = "Onjuiste inloggegevens."


class NotFoundError(FeedrError):
    """Unknown wall or slug, or a wall owned by another organization."""

    status_code = 404
    default_message = "Niet gevonden."


class LoginRequired(FeedrError):
    """No valid session cookie; the handler redirects to /login."""

    status_code = 302
    default_message = "Inloggen vereist."
