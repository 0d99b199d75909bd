import logging
import math
import os
from uuid import UUID

from fastapi import Depends, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import get_current_user_id
from .database import get_session, shutdown_db, startup_db
from .errors import (
    JournalError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from .schemas import (
    JournalEntry,
    JournalEntryCreate,
    JournalEntryList,
    JournalEntryUpdate,
    Message,
)
from .services.entries import EntryService

_logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"

app = FastAPI(title="Journal API")

cors_origins = [origin.strip() for origin in os.getenv("CORS_ALLOW_ORIGINS", "").split(",") if origin.strip()]
if cors_origins:
    allow_all = "*" in cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else cors_origins,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.on_event("startup")
async def startup() -> None:
    await startup_db()


@app.on_event("shutdown")
async def shutdown() -> None:
    await shutdown_db()


def _status_code(exc: JournalError) -> int:
    if isinstance(exc, UnauthenticatedError):
        return 401
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, NotFoundError):
        return 404
    return 500


@app.exception_handler(JournalError)
async def journal_error_handler(request: Request, exc: JournalError) -> JSONResponse:
    status_code = _status_code(exc)
    if status_code == 500:
        _logger.error("%s %s failed", request.method, request.url.path, exc_info=exc)
        return JSONResponse({"message": INTERNAL_ERROR_MESSAGE}, status_code=500)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse({"message": exc.message}, status_code=status_code, headers=headers)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    _logger.error("%s %s failed", request.method, request.url.path, exc_info=exc)
    return JSONResponse({"message": INTERNAL_ERROR_MESSAGE}, status_code=500)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    _logger.error("%s %s failed", request.method, request.url.path, exc_info=exc)
    return JSONResponse({"message": INTERNAL_ERROR_MESSAGE}, status_code=500)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        {"message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
        status_code=400,
    )


def get_entry_service(
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
) -> EntryService:
    return EntryService(session, user_id)


def _parse_entry_id(entry_id: str) -> UUID:
    # A malformed id cannot name any entry.
    try:
        return UUID(entry_id)
    except ValueError as exc:
        raise NotFoundError() from exc


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/entries", response_model=JournalEntryList)
async def list_entries(
    search: str | None = Query(default=None),
    tag: str | None = Query(default=None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    service: EntryService = Depends(get_entry_service),
):
    result = await service.list_entries(search=search, tag=tag, page=page, limit=limit)
    return {
        "entries": result.entries,
        "total": result.total,
        "page": page,
        "total_pages": math.ceil(result.total / limit),
    }


@app.post("/entries", response_model=JournalEntry, status_code=201)
async def create_entry(
    request: JournalEntryCreate,
    service: EntryService = Depends(get_entry_service),
):
    return await service.create_entry(
        title=request.title,
        content=request.content,
        tags=request.tags,
        custom_fields=request.custom_fields,
        image=request.image,
    )


@app.get("/entries/export")
async def export_entries(
    export_format: str | None = Query(default=None, alias="format"),
    service: EntryService = Depends(get_entry_service),
) -> Response:
    document = await service.export_entries(export_format)
    return Response(
        content=document.body,
        media_type=document.media_type,
        headers={"Content-Disposition": document.content_disposition},
    )


@app.get("/entries/{entry_id}", response_model=JournalEntry)
async def get_entry(
    entry_id: str,
    service: EntryService = Depends(get_entry_service),
):
    return await service.get_entry(_parse_entry_id(entry_id))


@app.put("/entries/{entry_id}", response_model=JournalEntry)
async def update_entry(
    entry_id: str,
    request: JournalEntryUpdate,
    service: EntryService = Depends(get_entry_service),
):
    return await service.update_entry(
        _parse_entry_id(entry_id),
        title=request.title,
        content=request.content,
        tags=request.tags,
        custom_fields=request.custom_fields,
        image=request.image,
    )


@app.delete("/entries/{entry_id}", response_model=Message)
async def delete_entry(
    entry_id: str,
    service: EntryService = Depends(get_entry_service),
):
    await service.delete_entry(_parse_entry_id(entry_id))
    return {"message": "Entry deleted successfully"}
