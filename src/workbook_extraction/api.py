"""FastAPI application exposing workbook extraction over HTTP."""

import uuid
from datetime import UTC, datetime
from typing import Annotated, Any

import pydantic
from fastapi import (
    FastAPI,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
    status,
)
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from workbook_extraction.config import settings, validate_settings_on_startup
from workbook_extraction.models import (
    ErrorDetail,
    HealthResponse,
    ReadOptionsPayload,
    ReadResponse,
    SheetNamesResponse,
)
from workbook_extraction.services.workbook_reader import ReadOptions, WorkbookReader
from workbook_extraction.utils.exceptions import (
    ErrorCode,
    FileTooLargeError,
    OptionsValidationError,
    WBXError,
)
from workbook_extraction.utils.logging import (
    clear_context,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)

API_VERSION = "0.1.0"

# Configure structured logging using settings
configure_logging(
    level=settings.log_level_int,
    use_structured_formatter=True,
)
logger = get_logger(__name__)


async def _read_upload(file: UploadFile, request_id: str | None) -> bytes:
    """Read an uploaded workbook, enforcing presence and the size cap."""
    if file.filename is None or file.filename == "":
        logger.warning("Request missing workbook file", request_id=request_id)
        raise OptionsValidationError(
            message="A workbook file must be provided", field="file"
        )

    content = await file.read()
    file_size = len(content)

    if file_size == 0:
        logger.warning("Empty workbook upload", filename=file.filename)
        raise OptionsValidationError(
            message="The uploaded workbook is empty", field="file"
        )

    if file_size > settings.max_file_size_bytes:
        logger.warning(
            "File too large",
            file_size=file_size,
            max_size=settings.max_file_size_bytes,
            request_id=request_id,
        )
        raise FileTooLargeError(
            file_size=file_size,
            max_size=settings.max_file_size_bytes,
            file_path=file.filename,
        )

    return content


def _parse_options(raw_options: str | None) -> ReadOptions:
    """Parse the ``options`` form field into core read options."""
    if raw_options is None or not raw_options.strip():
        payload = ReadOptionsPayload()
    else:
        try:
            payload = ReadOptionsPayload.model_validate_json(raw_options)
        except pydantic.ValidationError as e:
            errors = [
                f"{'.'.join(str(part) for part in err['loc']) or 'options'}: "
                f"{err['msg']}"
                for err in e.errors()
            ]
            logger.warning("Invalid read options", errors=len(errors))
            raise OptionsValidationError(
                message="Invalid read options",
                field="options",
                errors=errors,
            ) from e

    return payload.to_read_options(
        default_header_row=settings.default_header_row,
        default_include_empty_cells=settings.default_include_empty_cells,
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Workbook Extraction API",
        description=(
            "Extracts spreadsheet sheets as header-tagged rows of typed values."
        ),
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    validate_settings_on_startup(settings)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next: Any) -> Any:
        """Assign a request ID, expose it on the response and clear context."""
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        set_request_id(request_id)
        request.state.request_id = request_id

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_context()

    @app.exception_handler(WBXError)
    async def wbx_exception_handler(request: Request, exc: WBXError) -> JSONResponse:
        """Translate typed extraction failures into structured responses."""
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.error(
            f"WBX Error: {exc.message}",
            error_code=exc.error_code.value,
            http_status=exc.http_status,
        )
        return JSONResponse(
            status_code=exc.http_status,
            content=ErrorDetail(
                detail=exc.message,
                error_code=exc.error_code.value,
                details=exc.details if exc.details else None,
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.warning(
            f"HTTP Error: {exc.detail}",
            status_code=exc.status_code,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorDetail(
                detail=str(exc.detail),
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all handler that hides internals unless debug is enabled."""
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.exception(
            f"Unexpected error: {type(exc).__name__}",
            error_type=type(exc).__name__,
        )
        if settings.debug:
            detail = f"Internal server error: {type(exc).__name__}: {exc}"
        else:
            detail = "Internal server error. Please try again later."

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorDetail.from_error_code(
                ErrorCode.INTERNAL_ERROR,
                detail=detail,
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request) -> dict[str, Any]:
        """Check the health status of the service."""
        request_id = getattr(request.state, "request_id", None)
        logger.debug("Health check requested", request_id=request_id)
        return {
            "status": "healthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "version": API_VERSION,
        }

    @app.post(
        "/sheets",
        response_model=SheetNamesResponse,
        tags=["Extraction"],
        responses={
            400: {"model": ErrorDetail, "description": "Missing or empty file"},
            413: {"model": ErrorDetail, "description": "File too large"},
            422: {"model": ErrorDetail, "description": "Unreadable workbook"},
        },
    )
    async def list_sheets(
        request: Request,
        file: Annotated[UploadFile, File(description="Workbook to inspect")],
    ) -> dict[str, Any]:
        """List the sheet names of an uploaded workbook in workbook order."""
        request_id = getattr(request.state, "request_id", None)
        data = await _read_upload(file, request_id)
        reader = WorkbookReader(data)
        names = await run_in_threadpool(reader.sheet_names)
        return {"sheets": names}

    @app.post(
        "/read",
        response_model=ReadResponse,
        tags=["Extraction"],
        responses={
            400: {"model": ErrorDetail, "description": "Invalid options or file"},
            404: {"model": ErrorDetail, "description": "Sheet not found"},
            413: {"model": ErrorDetail, "description": "File too large"},
            422: {"model": ErrorDetail, "description": "Unreadable workbook"},
        },
    )
    async def read_workbook(
        request: Request,
        file: Annotated[UploadFile, File(description="Workbook to extract from")],
        options: Annotated[
            str | None,
            Form(
                description=(
                    'JSON read options, e.g. {"headerRow": 0, '
                    '"sheet": {"name": "Data"}, "includeEmptyCells": false}'
                )
            ),
        ] = None,
    ) -> dict[str, Any]:
        """Extract header-tagged rows from an uploaded workbook.

        Omitted options fall back to the configured defaults; omitting
        ``sheet`` reads every sheet in workbook order.
        """
        request_id = getattr(request.state, "request_id", None)
        data = await _read_upload(file, request_id)
        read_options = _parse_options(options)

        reader = WorkbookReader(data)
        result = await run_in_threadpool(reader.read, read_options)
        logger.info(
            "Workbook read completed",
            filename=file.filename,
            sheets=len(result.sheets),
        )
        return result.to_dict()

    return app


# Create the default app instance
app = create_app()
