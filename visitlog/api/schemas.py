"""
Request and response models for the visit log API.
"""

from pydantic import BaseModel, field_validator
from typing import Optional, List
from uuid import UUID

class VisitLogRequest(BaseModel):
    visit_id: Optional[UUID] = None
    title: Optional[str] = None
    description: Optional[str] = None

    @field_validator('title')
    @classmethod
    def title_must_be_short(cls, v):
        if v is not None and len(v) > 255:
            raise ValueError('title cannot exceed 255 characters')
        return v

class VisitLogUpdateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None

    @field_validator('title')
    @classmethod
    def title_must_be_short(cls, v):
        if v is not None and len(v) > 255:
            raise ValueError('title cannot exceed 255 characters')
        return v

class VisitLogResponse(BaseModel):
    id: str
    visit_id: UUID
    title: Optional[str] = None
    description: Optional[str] = None
    managed: bool

class VisitLogListResponse(BaseModel):
    items: List[VisitLogResponse]

class BulkDeleteRequest(BaseModel):
    ids: List[Optional[str]]

class BulkDeleteResponse(BaseModel):
    success: bool
    requested: int

class HealthResponse(BaseModel):
    status: str
    version: str
    db_health: bool
    document_store_health: bool

class ErrorResponse(BaseModel):
    error_type: str
    message: str
