"""
Varlık İşlem Fişi conversion routes.

Upload a Varlık export (.xlsx or .csv) and either preview the converted
catalog rows or download them as an .xlsx workbook.

Error responses follow AppError.to_dict().
"""

from typing import Optional

import structlog
from fastapi import APIRouter, File, Query, UploadFile
from fastapi.responses import JSONResponse, Response

from config import settings
from exceptions import (
    AppError,
    EmptyUploadError,
    FileTooLargeError,
    UnsupportedFileTypeError,
)
from models.catalog import ConversionPreviewResponse, TitlePolicy
from parsers.varlik_parser import (
    read_varlik_file,
    file_extension,
    SUPPORTED_EXTENSIONS,
)
from services.conversion_service import get_conversion_service, ConversionResult
from services.export_service import get_export_service, XLSX_MEDIA_TYPE

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/conversions", tags=["Conversions"])


# ===================
# HELPERS
# ===================


def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(status_code=e.status_code, content=e.to_dict())
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
            }
        },
    )


async def _read_upload(file: UploadFile) -> bytes:
    """Upload checks: extension, non-empty, size limit."""
    if file_extension(file.filename) not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileTypeError(file.filename, SUPPORTED_EXTENSIONS)

    content = await file.read()
    if not content:
        raise EmptyUploadError()

    if len(content) > settings.max_upload_bytes:
        raise FileTooLargeError(len(content), settings.max_upload_mb)

    return content


async def _convert_upload(
    file: UploadFile,
    policy: Optional[TitlePolicy],
) -> ConversionResult:
    """Read the upload and run the conversion; raises on dataset failure."""
    content = await _read_upload(file)
    dataset = read_varlik_file(
        content,
        filename=file.filename,
        skip_blank_rows=settings.skip_blank_rows,
    )

    result = get_conversion_service().transform(dataset.records, policy=policy)
    result.raise_for_failure()

    return result


# ===================
# ROUTES
# ===================


@router.post("/preview", response_model=ConversionPreviewResponse)
async def preview_conversion(
    file: UploadFile = File(..., description="Varlık İşlem Fişi export (.xlsx or .csv)"),
    policy: Optional[TitlePolicy] = Query(None, description="ISBN/title rule (defaults to TITLE_POLICY)"),
):
    """
    Convert an upload and return the catalog rows as JSON.

    Returns:
        Catalog column headers and one row per data row of the upload
    """
    try:
        result = await _convert_upload(file, policy)

        logger.info(
            "conversion_previewed",
            filename=file.filename,
            rows=result.row_count,
            policy=result.policy.value,
        )

        return ConversionPreviewResponse(
            filename=file.filename,
            policy=result.policy,
            row_count=result.row_count,
            records=result.to_rows(),
        )
    except Exception as e:
        return handle_error(e)


@router.post(
    "/export",
    responses={200: {"content": {XLSX_MEDIA_TYPE: {}}}},
)
async def export_conversion(
    file: UploadFile = File(..., description="Varlık İşlem Fişi export (.xlsx or .csv)"),
    policy: Optional[TitlePolicy] = Query(None, description="ISBN/title rule (defaults to TITLE_POLICY)"),
):
    """
    Convert an upload and download the catalog import workbook.

    Returns:
        .xlsx attachment named OUTPUT_FILENAME
    """
    try:
        result = await _convert_upload(file, policy)
        output = get_export_service().generate_catalog_excel(result.records)

        logger.info(
            "conversion_exported",
            filename=file.filename,
            rows=result.row_count,
            output=settings.output_filename,
        )

        return Response(
            content=output.getvalue(),
            media_type=XLSX_MEDIA_TYPE,
            headers={
                "Content-Disposition": f'attachment; filename="{settings.output_filename}"'
            },
        )
    except Exception as e:
        return handle_error(e)
