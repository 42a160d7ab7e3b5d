"""Error taxonomy shared by services and the HTTP layer.

Each error carries a machine-stable ``kind`` plus a human readable ``detail``.
The FastAPI handlers in ``ressly.main`` turn them into
``{"error": kind, "detail": detail}`` responses with ``status_code``.
"""
from typing import Optional


class AppError(Exception):
    status_code = 500
    kind = 'internal_error'

    def __init__(self, detail: str, kind: Optional[str] = None) -> None:
        super().__init__(detail)
        self.detail = detail
        if kind is not None:
            self.kind = kind


class ValidationError(AppError):
    status_code = 400
    kind = 'validation_error'


class NotFoundError(AppError):
    status_code = 404
    kind = 'not_found'


class PermissionDenied(AppError):
    status_code = 403
    kind = 'permission_denied'


class ConflictError(AppError):
    status_code = 409
    kind = 'conflict'


class UploadError(AppError):
    status_code = 500
    kind = 'upload_failure'


class PersistenceError(AppError):
    status_code = 500
    kind = 'persistence_failure'
