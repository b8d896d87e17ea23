import time
import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .core.config import settings
from .exceptions import PayloadTooLargeError, create_error_response

logger = logging.getLogger(__name__)

class SecurityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response

class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        client_host = request.client.host if request.client else "unknown"
        logger.info(f"Request: {request.method} {request.url.path} from {client_host}")

        response = await call_next(request)

        duration = time.time() - start_time
        user_id = getattr(request.state, "user_id", None) or "anonymous"
        logger.info(f"Response: {response.status_code} for {request.method} {request.url.path} (user {user_id}) in {duration:.3f}s")

        return response

class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Unhandled error on {request.method} {request.url.path}: {e}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content=create_error_response("Internal server error"),
            )

class RequestSizeLimitMiddleware:
    """Cap request bodies at MAX_REQUEST_SIZE.

    Checks Content-Length up front and counts streamed chunks, which carry
    no Content-Length.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = settings.MAX_REQUEST_SIZE
        path = scope.get("path", "")
        content_length = Headers(scope=scope).get("content-length")
        if content_length is not None:
            try:
                size = int(content_length)
            except ValueError:
                response = JSONResponse(status_code=400, content=create_error_response("Invalid Content-Length header"))
                await response(scope, receive, send)
                return
            if size > limit:
                logger.warning(f"Rejected {size} byte request to {path}")
                response = JSONResponse(status_code=413, content=create_error_response("Request entity too large"))
                await response(scope, receive, send)
                return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    logger.warning(f"Rejected streamed request to {path} after {received} bytes")
                    raise PayloadTooLargeError()
            return message

        await self.app(scope, limited_receive, send)
