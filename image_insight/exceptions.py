from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

logger = logging.getLogger(__name__)

class APIException(HTTPException):
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class ValidationError(APIException):
    """Missing or malformed caller input."""
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=400, detail=detail)

class ConflictError(APIException):
    """Duplicate unique value, e.g. an email that is already registered."""
    def __init__(self, detail: str = "Duplicate field value entered"):
        super().__init__(status_code=400, detail=detail)

class AuthError(APIException):
    """Missing, invalid or expired credentials."""
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(status_code=401, detail=detail)

class NotFoundError(APIException):
    """Record absent, or owned by somebody else."""
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=404, detail=detail)

class UpstreamError(APIException):
    """A third-party call (image host, AI model) failed or timed out."""
    def __init__(self, detail: str = "Upstream service failed"):
        super().__init__(status_code=502, detail=detail)

class PayloadTooLargeError(APIException):
    """Request body over the configured size cap."""
    def __init__(self, detail: str = "Request entity too large"):
        super().__init__(status_code=413, detail=detail)

def create_error_response(message: str) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "message": message,
    }

def create_success_response(**fields) -> dict:
    """Create a standardized success response"""
    return {"success": True, **fields}

async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTPException (ours and Starlette's) as the error envelope"""
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    # Route misses come from the router with Starlette's default detail
    if exc.status_code == 404 and not isinstance(exc, APIException):
        message = "Route not found"
    # HTTPBearer reports missing credentials as 403 on older FastAPI releases
    if exc.status_code == 403 and message == "Not authenticated":
        return JSONResponse(status_code=401, content=create_error_response(message))

    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(message),
        headers=getattr(exc, "headers", None),
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body/field validation failures are client errors (400), not 422"""
    messages = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        msg = error.get("msg", "Invalid value")
        # pydantic prefixes custom validator messages
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        messages.append(f"{'.'.join(location)}: {msg}" if location else msg)
    logger.info(f"Request validation failed on {request.url.path}: {messages}")
    return JSONResponse(
        status_code=400,
        content=create_error_response(", ".join(messages) or "Invalid request"),
    )
