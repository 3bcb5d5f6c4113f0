import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from promport.utils.logger import get_logger

logger = get_logger("api")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request with an id and its duration. An id supplied by the
    caller in X-Request-ID is reused so browser and server logs line up.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        client_host = request.client.host if request.client else "unknown"
        logger.info(
            "-> %s %s | client=%s | id=%s",
            request.method, request.url.path, client_host, request_id,
        )

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                "!! %s %s raised after %.4fs | id=%s",
                request.method, request.url.path,
                time.perf_counter() - start_time, request_id,
                exc_info=True,
            )
            raise

        process_time = time.perf_counter() - start_time
        logger.info(
            "<- %s %s | status=%d | %.4fs | id=%s",
            request.method, request.url.path, response.status_code,
            process_time, request_id,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response
