"""
File Upload Utility - Accept student spreadsheets for bulk import.

Supported formats:
- CSV (.csv)
- Excel (.xlsx, .xls), first sheet only

Max file size: settings.upload_max_size_mb (10MB by default)
"""

from typing import Tuple

from fastapi import HTTPException, UploadFile

from placement_admin.core.config import get_settings

ALLOWED_EXTENSIONS = {'.csv', '.xlsx', '.xls'}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


async def read_spreadsheet_upload(file: UploadFile) -> Tuple[bytes, str]:
    """
    Read an uploaded spreadsheet.

    Args:
        file: FastAPI UploadFile

    Returns:
        Tuple of (raw_bytes, filename)

    Raises:
        HTTPException on a missing name, wrong type or oversized file
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: CSV, XLSX, XLS"
        )

    content = await file.read()

    max_mb = get_settings().upload_max_size_mb
    if len(content) > max_mb * 1024 * 1024:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {max_mb}MB"
        )

    return content, file.filename


def get_supported_formats() -> dict:
    """Get info about supported upload formats."""
    return {
        "supported_formats": [
            {"extension": ".csv", "name": "Comma Separated Values"},
            {"extension": ".xlsx", "name": "Excel Workbook"},
            {"extension": ".xls", "name": "Excel 97-2003 Workbook"},
        ],
        "max_size_mb": get_settings().upload_max_size_mb,
    }
