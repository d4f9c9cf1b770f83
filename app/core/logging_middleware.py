import logging
import json
import time
import random
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# One JSON object per line, kept out of the app log
structured_logger = logging.getLogger("api.structured_log")
structured_logger.propagate = False

if not structured_logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(message)s")
    handler.setFormatter(formatter)
    structured_logger.addHandler(handler)
    structured_logger.setLevel(logging.INFO)


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs one wide event per request: every 5xx, every request slower than
    SLOW_THRESHOLD_MS, and a SAMPLE_RATE share of the rest.

    Carries the resolved user id but never headers or exception text, which
    may hold bearer tokens or store detail.
    """

    SLOW_THRESHOLD_MS = 500
    SAMPLE_RATE = 0.05

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = None
        error_details = None
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            error_details = type(e).__name__
            raise
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000

            if status_code >= 500:
                should_log = True
            elif duration_ms > self.SLOW_THRESHOLD_MS:
                should_log = True
            else:
                should_log = random.random() < self.SAMPLE_RATE

            if should_log:
                # Set by the authorization dependency on protected routes
                user_id = getattr(request.state, "user_id", None)

                log_payload = {
                    "timestamp": time.time(),
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": status_code,
                    "duration_ms": round(duration_ms, 2),
                    "client_ip": request.client.host if request.client else None,
                    "user_agent": request.headers.get("user-agent"),
                    "query_params": dict(request.query_params),
                    "error": error_details,
                    "user_id": str(user_id) if user_id else None,
                }

                structured_logger.info(json.dumps(log_payload))

        return response
