"""
Application error taxonomy.

Services raise these; api.errors renders them as the uniform error envelope.
"""
from __future__ import annotations


class AppError(Exception):
    code = "INTERNAL_ERROR"
    status = 500

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class NotFound(AppError):
    code = "NOT_FOUND"
    status = 404


class AlreadyExists(AppError):
    code = "CONFLICT"
    status = 409


class ValidationFailed(AppError):
    code = "VALIDATION_ERROR"
    status = 400


class BadRequest(AppError):
    code = "BAD_REQUEST"
    status = 400


class Unauthorized(AppError):
    code = "UNAUTHORIZED"
    status = 401


class Forbidden(AppError):
    code = "FORBIDDEN"
    status = 403


class Internal(AppError):
    code = "INTERNAL_ERROR"
    status = 500
