"""Helpers for multipart uploads."""
from typing import Optional

from fastapi import UploadFile

from studio.services.catalog import ImageUpload


async def read_upload(file: Optional[UploadFile]) -> Optional[ImageUpload]:
    """Read an UploadFile into memory; None or an empty file field gives None."""
    if file is None or not file.filename:
        return None
    content = await file.read()
    return ImageUpload(
        filename=file.filename,
        content_type=file.content_type,
        content=content,
    )


def clean_text(value: Optional[str]) -> Optional[str]:
    """Form fields arrive as strings; blank means "no value"."""
    if value is None:
        return None
    value = value.strip()
    return value or None
