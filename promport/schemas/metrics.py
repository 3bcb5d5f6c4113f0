from typing import List, Optional
from pydantic import BaseModel, Field, StrictInt


class ErrorResponse(BaseModel):
    """Body of every failed request."""

    success: bool = False
    error: str


class MetricsResponse(BaseModel):
    success: bool = True
    message: str
    metrics: List[str]


class ExportRequest(BaseModel):
    """Export payload sent by the browser. Times are epoch milliseconds."""

    min_time: Optional[StrictInt] = Field(None, alias="minTime")
    max_time: Optional[StrictInt] = Field(None, alias="maxTime")
    selected_metrics: Optional[List[str]] = Field(None, alias="selectedMetrics")
    output_path: Optional[str] = Field(None, alias="outputPath")

    class Config:
        populate_by_name = True


class ExportResponse(BaseModel):
    success: bool = True
    message: str
    output_path: str = Field(..., alias="outputPath")

    class Config:
        populate_by_name = True


class ImportRequest(BaseModel):
    input_path: Optional[str] = Field(None, alias="inputPath")

    class Config:
        populate_by_name = True


class ImportResponse(BaseModel):
    success: bool = True
    message: str
