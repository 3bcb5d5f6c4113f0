from promport.api.routes.metrics import router as metrics_router
from promport.api.routes.transfer import router as transfer_router

__all__ = ["metrics_router", "transfer_router"]
