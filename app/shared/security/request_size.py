"""
Request body size guard.

Rejects requests whose declared Content-Length is above the configured
limit before the body is read.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.core.config import settings


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Answer 413 for bodies larger than max_request_size_bytes."""

    def __init__(self, app, max_bytes: int = settings.max_request_size_bytes) -> None:
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        length = request.headers.get("content-length")
        if length is not None and length.isdigit() and int(length) > self.max_bytes:
            return JSONResponse(
                status_code=413,
                content={
                    "error": "Request body too large",
                    "detail": f"limit is {self.max_bytes} bytes",
                },
            )
        return await call_next(request)
