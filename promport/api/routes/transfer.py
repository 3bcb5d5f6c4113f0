from typing import Any
from fastapi import APIRouter, Depends

from promport.api import deps
from promport.schemas.metrics import (
    ErrorResponse,
    ExportRequest,
    ExportResponse,
    ImportRequest,
    ImportResponse,
)
from promport.utils.logger import get_logger
from promport.utils.promtool import Promtool

logger = get_logger("api.transfer")

router = APIRouter()

_ERRORS = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@router.post("/export", response_model=ExportResponse, responses=_ERRORS)
async def export_metrics(
    *,
    export_in: ExportRequest,
    promtool: Promtool = Depends(deps.get_promtool),
) -> Any:
    """
    Dump the selected metrics from the local TSDB into an OpenMetrics file.
    """
    logger.info(
        f"Export requested: {len(export_in.selected_metrics or [])} metric(s) "
        f"-> {export_in.output_path}"
    )
    await promtool.export_range(
        export_in.output_path,
        export_in.selected_metrics,
        min_time=export_in.min_time,
        max_time=export_in.max_time,
    )
    return ExportResponse(
        message="Export completed successfully",
        output_path=export_in.output_path,
    )


@router.post("/import", response_model=ImportResponse, responses=_ERRORS)
async def import_metrics(
    *,
    import_in: ImportRequest,
    promtool: Promtool = Depends(deps.get_promtool),
) -> Any:
    """
    Create TSDB blocks from a previously exported OpenMetrics file.
    """
    logger.info(f"Import requested from {import_in.input_path}")
    await promtool.import_file(import_in.input_path)
    return ImportResponse(message="Import completed successfully")
