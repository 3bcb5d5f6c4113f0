from promport.api.middleware.request_logger import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
