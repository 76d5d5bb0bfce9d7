"""
HTTP surface for visit logs.
List and detail flows of a visit's logs; all persistence goes through VisitLogService.
"""

from fastapi import FastAPI, HTTPException, Depends, Request
from fastapi.responses import JSONResponse
from uuid import UUID

from .schemas import (
    VisitLogRequest,
    VisitLogUpdateRequest,
    VisitLogResponse,
    VisitLogListResponse,
    BulkDeleteRequest,
    BulkDeleteResponse,
    HealthResponse,
    ErrorResponse
)
from ..core import config, mongo
from ..core.config import VERSION, debug_enabled
from ..core.db import health_check, init_db
from ..core.entities import EntityNotFoundError
from ..core.schema import Visit
from ..log.errors import VisitLogError
from ..log.records import VisitLog
from ..log.service import VisitLogService, build_visit_log_service

# Initialize the FastAPI application
app = FastAPI(
    title="Visit Log API",
    version=VERSION,
    description="Visit logs in a document store linked to relational visits",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None
)

_service = None

def get_visit_log_service() -> VisitLogService:
    """Process-wide service built from configuration."""
    global _service
    if _service is None:
        init_db()
        _service = build_visit_log_service()
    return _service

@app.exception_handler(VisitLogError)
async def visit_log_error_handler(request: Request, exc: VisitLogError):
    return JSONResponse(
        status_code=exc.http_status,
        content=ErrorResponse(error_type=exc.error_type, message=str(exc)).model_dump()
    )

@app.exception_handler(EntityNotFoundError)
async def entity_not_found_handler(request: Request, exc: EntityNotFoundError):
    return JSONResponse(
        status_code=404,
        content=ErrorResponse(error_type="NOT_FOUND", message=str(exc)).model_dump()
    )

def _to_response(visit_log: VisitLog, service: VisitLogService) -> VisitLogResponse:
    return VisitLogResponse(
        id=visit_log.id,
        visit_id=visit_log.visit_id,
        title=visit_log.title,
        description=visit_log.description,
        managed=service.entity_states.is_managed(visit_log)
    )

@app.get("/health", response_model=HealthResponse)
def health_check_endpoint():
    """Check relational and document store health."""
    db_health = health_check()
    if config.get_document_store_provider() == "memory":
        document_store_health = True
    else:
        document_store_health = mongo.health_check()

    return HealthResponse(
        status="healthy" if db_health and document_store_health else "unhealthy",
        version=VERSION,
        db_health=db_health,
        document_store_health=document_store_health
    )

@app.get("/visits/{visit_id}/logs", response_model=VisitLogListResponse)
def list_visit_logs(visit_id: UUID, service: VisitLogService = Depends(get_visit_log_service)):
    """List the logs of a visit."""
    visit = service.data_manager.get_reference(Visit, visit_id)
    visit_logs = service.find_by_visit(visit)
    return VisitLogListResponse(items=[_to_response(v, service) for v in visit_logs])

@app.post("/visits/{visit_id}/logs", response_model=VisitLogResponse, status_code=201)
def create_visit_log_for_visit(visit_id: UUID, request: VisitLogUpdateRequest,
                               service: VisitLogService = Depends(get_visit_log_service)):
    """Create a log for the visit in the path; the visit becomes the log's parent."""
    visit = service.data_manager.load(Visit, visit_id)
    if visit is None:
        raise HTTPException(status_code=404, detail=f"Visit {visit_id} not found")

    visit_log = service.data_manager.create(VisitLog)
    visit_log.title = request.title
    visit_log.description = request.description

    saved = service.save_visit_log(visit_log, default_visit=visit)
    return _to_response(saved, service)

@app.post("/visit-logs", response_model=VisitLogResponse, status_code=201)
def create_visit_log(request: VisitLogRequest, service: VisitLogService = Depends(get_visit_log_service)):
    """Create a log whose parent visit comes from the request body."""
    visit_log = service.data_manager.create(VisitLog)
    if request.visit_id is not None:
        visit_log.visit = service.data_manager.get_reference(Visit, request.visit_id)
    visit_log.title = request.title
    visit_log.description = request.description

    saved = service.save_visit_log(visit_log)
    return _to_response(saved, service)

@app.get("/visit-logs/{visit_log_id}", response_model=VisitLogResponse)
def get_visit_log(visit_log_id: str, service: VisitLogService = Depends(get_visit_log_service)):
    """Load a single visit log."""
    return _to_response(service.load_visit_log(visit_log_id), service)

@app.put("/visit-logs/{visit_log_id}", response_model=VisitLogResponse)
def update_visit_log(visit_log_id: str, request: VisitLogUpdateRequest,
                     service: VisitLogService = Depends(get_visit_log_service)):
    """Edit a loaded visit log and save it back in place."""
    visit_log = service.load_visit_log(visit_log_id)

    if "title" in request.model_fields_set:
        visit_log.title = request.title
    if "description" in request.model_fields_set:
        visit_log.description = request.description

    saved = service.save_visit_log(visit_log)
    return _to_response(saved, service)

@app.post("/visit-logs/bulk-delete", response_model=BulkDeleteResponse)
def bulk_delete_visit_logs(request: BulkDeleteRequest, service: VisitLogService = Depends(get_visit_log_service)):
    """Remove visit logs by id; unknown ids are ignored."""
    service.remove_visit_logs_by_id(request.ids)
    return BulkDeleteResponse(success=True, requested=len([i for i in request.ids if i is not None]))
