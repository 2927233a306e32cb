"""
API error taxonomy.

Every failure the core can report is one of these. The app installs a single
exception handler that renders them as `{"error": kind, "detail": message}`.
"""

from __future__ import annotations


class ApiError(RuntimeError):
    kind = "error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"error": self.kind, "detail": self.message}


class InvalidTableError(ApiError):
    kind = "invalid_table"
    status_code = 400


class InvalidInputError(ApiError):
    kind = "invalid_input"
    status_code = 400


class UnauthorizedError(ApiError):
    kind = "unauthorized"
    status_code = 401


class NotFoundError(ApiError):
    kind = "not_found"
    status_code = 404


class ConflictError(ApiError):
    kind = "conflict"
    status_code = 409


class QueryFailedError(ApiError):
    kind = "query_failed"
    status_code = 500


class NotImplementedFeatureError(ApiError):
    kind = "not_implemented"
    status_code = 501
