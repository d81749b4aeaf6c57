from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse


class CollaboratorError(Exception):
    """Base class for failures of the external AI service."""


class CollaboratorUnavailableError(CollaboratorError):
    """The AI service could not be reached or raised a transport error."""


class ResponseDecodeError(CollaboratorError):
    """The AI service answered, but the content failed schema validation."""


class StorageError(Exception):
    """Local key-value storage could not be read or written."""


class StorageQuotaExceededError(StorageError):
    def __init__(self, key: str, size: int, quota: int):
        super().__init__(f"Slot '{key}' needs {size} bytes, quota is {quota}")
        self.key = key
        self.size = size
        self.quota = quota


class HistoryDecodeError(StorageError):
    """Persisted history exists but is not a valid record list."""


class SessionBusyError(Exception):
    """A session already has a request in flight."""


def create_error_response(error_message: str, status_code: int = 400) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "data": None,
        "error": error_message
    }

def create_success_response(data) -> dict:
    """Create a standardized success response"""
    return {
        "success": True,
        "data": data,
        "error": None
    }

async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render HTTPException through the shared response envelope"""
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.detail, exc.status_code),
        headers=getattr(exc, "headers", None),
    )
