"""
Error taxonomy shared by the domain contexts and the GraphQL layer.

Every error is a GraphQLError so raising it inside a resolver nulls only that
field and attaches ``extensions.code`` to the response; the serving process
never sees it.
"""
from typing import Any

from graphql import GraphQLError
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError


class InkwellError(GraphQLError):
    """Base class for errors surfaced to GraphQL clients."""

    default_code = "INTERNAL_ERROR"
    default_message = "Something went wrong."

    def __init__(self, message: str | None = None, **extensions: Any):
        self.code = self.default_code
        super().__init__(
            message or self.default_message,
            extensions={"code": self.code, **extensions},
        )


class NotFound(InkwellError):
    default_code = "NOT_FOUND"
    default_message = "The requested object doesn't exist."


class Unauthorized(InkwellError):
    default_code = "UNAUTHORIZED"
    default_message = "You don't have permission to do that."


class Unauthenticated(InkwellError):
    default_code = "UNAUTHENTICATED"
    default_message = "You must be logged in to do that."


class InvalidReference(InkwellError):
    default_code = "INVALID_REFERENCE"
    default_message = "The given ID is not valid."


class NotImplementedYet(InkwellError):
    default_code = "NOT_IMPLEMENTED"
    default_message = "Not implemented yet."


class SelfActionConflict(InkwellError):
    default_code = "SELF_ACTION_CONFLICT"
    default_message = "You can't do that to yourself."


class PaginationError(InkwellError):
    default_code = "INVALID_PAGINATION_ARGUMENT"
    default_message = "Invalid pagination arguments."


class InvalidPaginationArgument(PaginationError):
    pass


class InvalidCursor(PaginationError):
    default_code = "INVALID_CURSOR"
    default_message = "The given cursor is not valid."


class ConflictingPaginationArguments(PaginationError):
    default_code = "CONFLICTING_PAGINATION_ARGUMENTS"
    default_message = "Passing both `first` and `last` is not supported."


class ValidationFailure(InkwellError):
    """Input violates a domain invariant.

    ``fields`` is a list of ``{"field": ..., "message": ...}`` dicts, one per
    offending input field.
    """

    default_code = "VALIDATION_FAILED"
    default_message = "The given input is not valid."

    def __init__(self, fields: list[dict[str, str]], message: str | None = None):
        self.fields = fields
        super().__init__(message, fields=fields)

    @classmethod
    def on(cls, field: str, message: str) -> "ValidationFailure":
        return cls([{"field": field, "message": message}])

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> "ValidationFailure":
        fields = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"]) or "input"
            fields.append({"field": location, "message": error["msg"]})
        return cls(fields)

    @classmethod
    def from_integrity_error(cls, exc: IntegrityError, field: str, *others: str) -> "ValidationFailure":
        """
        Reports the constraint violation on the first of ``others`` the database
        names in its message, or on ``field`` when it names none of them.
        """
        message = str(exc.orig).lower()
        field = next((name for name in others if name in message), field)
        if "unique" in message or "duplicate" in message:
            return cls.on(field, "has already been taken")
        if "foreign key" in message:
            return cls.on(field, "does not exist")
        if "not null" in message or "null value" in message:
            return cls.on(field, "can't be null")
        return cls.on(field, "is invalid")
