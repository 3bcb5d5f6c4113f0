from promport.schemas.metrics import (
    ErrorResponse,
    ExportRequest,
    ExportResponse,
    ImportRequest,
    ImportResponse,
    MetricsResponse,
)

__all__ = [
    "ErrorResponse",
    "MetricsResponse",
    "ExportRequest",
    "ExportResponse",
    "ImportRequest",
    "ImportResponse",
]
