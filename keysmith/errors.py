"""
Keysmith error hierarchy.

Managers raise these; the FastAPI integration turns them into JSON
responses with the matching status code.
"""

from typing import Any, Dict, Iterable, Optional, Type

from pydantic import BaseModel

# Request parts FastAPI prefixes to error locations
_LOC_SOURCES = ("body", "query", "path", "header")


class KeysmithError(Exception):
    """Base error. All typed Keysmith errors inherit from this."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"code": self.error_code, "error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(KeysmithError):
    """
    Field-level validation failure.

    ``field_errors`` maps the wire name of each offending field to a
    single message, e.g. ``{"scopes": "must not be empty"}``.
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(self, field_errors: Dict[str, str]) -> None:
        summary = ", ".join(f"{field} {msg}" for field, msg in field_errors.items())
        super().__init__(summary or "validation failed")
        self.field_errors = dict(field_errors)

    def to_dict(self) -> Dict[str, Any]:
        return {"STANDARD_VALIDATION": self.field_errors}

    @classmethod
    def from_errors(
        cls,
        errors: Iterable[Dict[str, Any]],
        model: Optional[Type[BaseModel]] = None,
    ) -> "ValidationError":
        """
        Build from pydantic error dicts (``exc.errors()``).

        The first message per field wins. Field names are reported by
        their alias when ``model`` declares one.
        """
        field_errors: Dict[str, str] = {}
        for error in errors:
            loc = [part for part in error.get("loc", ()) if part not in _LOC_SOURCES]
            # Positions (e.g. of a JSON decode error) belong to the body itself
            name = loc[0] if loc and isinstance(loc[0], str) else "body"
            if model is not None and name in model.model_fields:
                name = model.model_fields[name].alias or name
            field_errors.setdefault(name, error["msg"])
        return cls(field_errors)


class AuthenticationError(KeysmithError):
    status_code = 401
    error_code = "authentication_error"


class ForbiddenError(KeysmithError):
    status_code = 403
    error_code = "forbidden"


class NotFoundError(KeysmithError):
    status_code = 404
    error_code = "not_found"
