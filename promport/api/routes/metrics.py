from typing import Any
from fastapi import APIRouter, Depends

from promport.api import deps
from promport.schemas.metrics import ErrorResponse, MetricsResponse
from promport.utils.promtool import Promtool


router = APIRouter()


@router.get(
    "/metrics",
    response_model=MetricsResponse,
    responses={500: {"model": ErrorResponse}},
)
async def list_metrics(promtool: Promtool = Depends(deps.get_promtool)) -> Any:
    """
    List metric names known to the Prometheus server, without Prometheus'
    own runtime and scrape metrics.
    """
    metrics = await promtool.list_metric_names()
    return MetricsResponse(message="Metrics fetched successfully", metrics=metrics)
