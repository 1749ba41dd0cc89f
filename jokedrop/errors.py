"""Typed error kinds raised by the Joke Drop core.

Every operation reports failure by raising one of these; the HTTP layer maps
``status_code`` onto the response.
"""

from __future__ import annotations


class JokeDropError(Exception):
    """Base class for all domain errors."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(JokeDropError):
    """A referenced account or joke does not exist."""

    status_code = 404


class InvalidArgument(JokeDropError):
    """A required field is missing or malformed."""

    status_code = 400


class InvalidOperation(JokeDropError):
    """The arguments are well-formed but the operation is not allowed (self-follow)."""

    status_code = 400


class Conflict(JokeDropError):
    """The identity is already registered."""

    status_code = 409


class Unauthorized(JokeDropError):
    """Credentials are wrong, or the caller lacks the required role."""

    status_code = 401


class Forbidden(Unauthorized):
    """The caller is authenticated but its role is too low."""

    status_code = 403
