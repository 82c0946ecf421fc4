"""
Request middleware: access logging tagged with the caller, and response headers
"""
import time
import uuid
import logging
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from core.config import settings

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For hop, then X-Real-IP, then the socket peer."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    if request.client and request.client.host:
        return request.client.host

    return "unknown"


def has_session_credentials(request: Request) -> bool:
    if request.cookies.get(settings.SESSION_COOKIE_NAME):
        return True
    return request.headers.get("authorization", "").lower().startswith("bearer ")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log one line per request and one per response.

    The response line carries the seller id when a route resolved a
    session (``request.state.seller_id``, set by ``get_current_seller``),
    otherwise ``anonymous``.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        client_ip = get_client_ip(request)

        start_time = time.time()
        logger.info(f"Request {request_id}: {request.method} {request.url.path} from {client_ip}")

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"Request {request_id} failed after {time.time() - start_time:.3f}s: {str(e)}"
            )
            raise

        process_time = time.time() - start_time
        seller_id = getattr(request.state, "seller_id", None) or "anonymous"
        logger.info(
            f"Response {request_id}: {response.status_code} for seller {seller_id} in {process_time:.3f}s"
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Baseline security headers; responses to signed-in requests are never cached."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # Dashboard data and session cookies must not land in shared caches
        if has_session_credentials(request) or "set-cookie" in response.headers:
            response.headers["Cache-Control"] = "no-store"

        return response
