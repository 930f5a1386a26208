import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from src.shortener.core.config import logger
from src.shortener.core.validators import get_client_ip


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Log every HTTP request as ``METHOD PATH STATUS TIMEms IP`` and expose
    the processing time in an ``X-Process-Time`` header.
    """

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time

        logger.info(
            f"{request.method} {request.url.path} "
            f"{response.status_code} {process_time*1000:.2f}ms "
            f"IP:{get_client_ip(request) or 'unknown'}"
        )
        response.headers["X-Process-Time"] = f"{process_time:.6f}"
        return response


def add_logging_middleware(app):
    app.add_middleware(LoggingMiddleware)
