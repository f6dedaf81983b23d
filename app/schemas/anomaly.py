"""
app/schemas/anomaly.py

Request and response schemas for anomaly ingestion and query endpoints.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, Field


class ProcessRequest(BaseModel):
    """
    Body of POST /process.
    """

    source: str
    data: Any = None
    file_path: str | None = Field(
        default=None,
        validation_alias=AliasChoices("file_path", "filePath"),
    )


class UploadRequest(BaseModel):
    """
    Body of POST /upload: a base64-encoded workbook.
    """

    file: str | None = None
    filename: str | None = None
    type: str | None = None


class AnomalyResponse(BaseModel):
    id: uuid.UUID
    equipment_number: str | None
    title: str | None
    description: str | None
    detection_date: datetime
    status: str
    priority: int
    equipment_description: str | None
    responsible_section: str | None
    criticality: str
    origin_system: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class IngestionResponse(BaseModel):
    """
    Batch outcome: persisted versus submitted counts plus a short preview.
    """

    success: bool = True
    message: str
    source: str
    filename: str | None = None
    submitted: int = Field(..., ge=0)
    processed: int = Field(..., ge=0)
    data: list[AnomalyResponse] = Field(default_factory=list)
    timestamp: datetime | None = None


class AnomalyListResponse(BaseModel):
    success: bool = True
    count: int = Field(..., ge=0)
    data: list[AnomalyResponse] = Field(default_factory=list)


class AnomalyStatisticsResponse(BaseModel):
    total_anomalies: int = Field(..., ge=0)
    new_count: int = Field(..., ge=0)
    in_progress_count: int = Field(..., ge=0)
    resolved_count: int = Field(..., ge=0)
    critical_count: int = Field(..., ge=0)
    medium_count: int = Field(..., ge=0)
    low_count: int = Field(..., ge=0)
    unique_equipment: int = Field(..., ge=0)
    unique_sections: int = Field(..., ge=0)


class HealthResponse(BaseModel):
    status: str
    database: bool
