"""Structured error helpers for API responses and the domain error taxonomy."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from fastapi import Request
from fastapi.responses import JSONResponse


def build_error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class AppError(Exception):
    """Application-scoped error for standardized API responses."""

    def __init__(self, status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details or {}
        self.payload = build_error_payload(code, message, details)


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload)


class NotFoundError(AppError):
    """A referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            404,
            "not_found",
            f"{entity} not found",
            {"entity": entity, "id": str(entity_id)},
        )
        self.entity = entity
        self.entity_id = entity_id


class InvalidReferenceError(AppError):
    """A referenced id exists as a value but does not point to a usable entity."""

    def __init__(self, entity: str, entity_id: Any, reason: str = "invalid reference"):
        super().__init__(
            400,
            "invalid_reference",
            f"Invalid {entity} ID",
            {"entity": entity, "id": str(entity_id), "reason": reason},
        )
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(AppError):
    """A uniqueness invariant would be violated."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(409, "conflict", message, details)


class PreconditionFailedError(AppError):
    """Operation attempted from a status that does not permit it."""

    def __init__(self, current_status: Any, required_statuses: Iterable[Any], action: str = ""):
        current = getattr(current_status, "value", current_status)
        required = sorted(str(getattr(s, "value", s)) for s in required_statuses)
        message = f"Cannot {action or 'perform this action'} from status '{current}'; requires one of: {', '.join(required)}"
        super().__init__(
            400,
            "precondition_failed",
            message,
            {"current_status": current, "required_statuses": required, "action": action},
        )
        self.current_status = current
        self.required_statuses = required


class InvalidArgumentError(AppError):
    """Malformed input rejected by core validation."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, code: str = "invalid_argument"):
        super().__init__(400, code, message, details)


class InvalidRangeError(InvalidArgumentError):
    """Score classification range is inverted or overlaps its neighbour."""

    def __init__(self, message: str, display_order: int, details: Optional[Dict[str, Any]] = None):
        merged = {"display_order": display_order}
        merged.update(details or {})
        super().__init__(message, merged, code="invalid_range")
        self.display_order = display_order


class InvalidLanguageCodesError(InvalidArgumentError):
    """One or more language codes are unknown or inactive."""

    def __init__(self, codes: Iterable[str]):
        invalid = list(codes)
        super().__init__(
            f"Invalid or inactive language codes: {', '.join(invalid)}",
            {"invalid_codes": invalid},
            code="invalid_language_codes",
        )
        self.invalid_codes = invalid


class LastTranslationError(AppError):
    """Deleting this translation would leave its parent with none."""

    def __init__(self, parent_id: Any, language_code: str):
        super().__init__(
            400,
            "last_translation",
            "Cannot delete the last remaining translation. At least one translation must exist.",
            {"parent_id": str(parent_id), "language_code": language_code},
        )
        self.parent_id = parent_id
        self.language_code = language_code


class ForbiddenError(AppError):
    """The acting user may not touch this record."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(403, "forbidden", message, details)
