"""
Application error types.

Services raise these; ``blog.main`` turns them into JSON responses of the
form ``{"error": <kind>, "message": <text>}`` (plus ``"errors"`` for
validation failures).  All of them are request-scoped.
"""


class BlogError(Exception):
    status_code: int = 500
    kind: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class ValidationError(BlogError):
    """A write was rejected by one or more field rules; nothing was persisted."""

    status_code = 422
    kind = "validation_error"

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        summary = "; ".join(
            f"{field} {msg}" for field, messages in errors.items() for msg in messages
        )
        super().__init__(f"Validation failed: {summary}")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["errors"] = self.errors
        return data


class NotFoundError(BlogError):
    """Unmatched route or missing record."""

    status_code = 404
    kind = "not_found"


class ConflictError(BlogError):
    status_code = 409
    kind = "conflict"
