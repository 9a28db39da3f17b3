"""
Typed failures raised by the account and social-graph core.

Each class carries a stable ``code`` so the transport layer can map a failure
to a status without matching on message text.
"""

from __future__ import annotations


class TrailsocialError(Exception):
    """Base class for every failure the core reports."""

    code = "error"
    default_message = "Bad request"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingField(TrailsocialError):
    code = "missing_field"
    default_message = "Bad request - missing field(s)"

    def __init__(self, *fields: str):
        self.fields = fields
        message = self.default_message
        if fields:
            message = f"{message}: {', '.join(fields)}"
        super().__init__(message)


class InvalidField(TrailsocialError):
    code = "invalid_field"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class InvalidQuery(TrailsocialError):
    code = "invalid_query"
    default_message = "Bad request - invalid query"


class NotFound(TrailsocialError):
    code = "not_found"
    default_message = "Resource not found"


class UsernameTaken(TrailsocialError):
    code = "username_taken"
    default_message = "Username is taken"


class UsernameNotFound(TrailsocialError):
    code = "username_not_found"
    default_message = "Username not found"


class IncorrectPassword(TrailsocialError):
    code = "incorrect_password"
    default_message = "Incorrect password"


class AlreadyFollowing(TrailsocialError):
    code = "already_following"
    default_message = "User already followed"


class NotFollowing(TrailsocialError):
    code = "not_following"
    default_message = "User not followed"


class AlreadyLiked(TrailsocialError):
    code = "already_liked"
    default_message = "Already liked"


class NotLiked(TrailsocialError):
    code = "not_liked"
    default_message = "Not liked"


class ConstraintViolation(TrailsocialError):
    """A unique index rejected a write that passed the service pre-check."""

    code = "constraint_violation"
    default_message = "Constraint violation"


# Race outcomes keep the meaning of the matching pre-check failure, so callers
# catching UsernameTaken (etc.) handle both paths.
class UsernameConstraintViolation(ConstraintViolation, UsernameTaken):
    code = UsernameTaken.code
    default_message = UsernameTaken.default_message


class FollowConstraintViolation(ConstraintViolation, AlreadyFollowing):
    code = AlreadyFollowing.code
    default_message = AlreadyFollowing.default_message


class LikeConstraintViolation(ConstraintViolation, AlreadyLiked):
    code = AlreadyLiked.code
    default_message = AlreadyLiked.default_message


class StoreUnavailable(TrailsocialError):
    code = "store_unavailable"
    default_message = "Store unavailable"
