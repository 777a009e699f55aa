"""
Cloudinary service for image upload.
Uploaded images are served from the Cloudinary CDN; the secure URL is stored on the row.
"""
import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from studio.config import settings
import logging
import asyncio
import re
import time
from pathlib import PurePath
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)

# Configure Cloudinary with credentials from settings
cloudinary.config(
    cloud_name=settings.CLOUDINARY_CLOUD_NAME,
    api_key=settings.CLOUDINARY_API_KEY,
    api_secret=settings.CLOUDINARY_API_SECRET,
    secure=True  # Always use HTTPS for secure URLs
)


def build_public_id(filename: str, timestamp_ms: Optional[int] = None) -> str:
    """
    Build a unique Cloudinary public id for an uploaded file.

    `Living Room.jpg` uploaded at 1700000000000 becomes `1700000000000-Living-Room`.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    stem = PurePath(filename or "image").stem.strip() or "image"
    slug = re.sub(r"\s+", "-", stem)
    return f"{timestamp_ms}-{slug}"


async def upload_image(
    file: Any,
    folder: str,
    public_id: Optional[str] = None,
    max_retries: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Upload image to Cloudinary.

    Args:
        file: File object, file path, or bytes to upload
        folder: Cloudinary folder path ("project-images" or "portfolio")
        public_id: Optional custom public ID for the image
        max_retries: Number of attempts (defaults to CLOUDINARY_UPLOAD_RETRIES)

    Returns:
        dict: Upload result containing url, public_id, format, width, height, bytes

    Raises:
        CloudinaryError: If upload fails after all attempts
    """
    if max_retries is None:
        max_retries = max(1, settings.CLOUDINARY_UPLOAD_RETRIES)

    for attempt in range(max_retries):
        try:
            result = cloudinary.uploader.upload(
                file,
                folder=folder,
                public_id=public_id,
                fetch_format="auto",
                quality="auto",
                transformation=[
                    {
                        "width": 1920,
                        "height": 1080,
                        "crop": "limit"  # Limit max dimensions, maintain aspect ratio
                    }
                ]
            )

            logger.info(f"Successfully uploaded image: {result['public_id']}")

            return {
                "url": result["secure_url"],
                "public_id": result["public_id"],
                "format": result.get("format"),
                "width": result.get("width"),
                "height": result.get("height"),
                "bytes": result.get("bytes"),
            }

        except CloudinaryError as e:
            logger.warning(f"Cloudinary upload error (attempt {attempt + 1}/{max_retries}): {str(e)}")

            if attempt < max_retries - 1:
                await asyncio.sleep(2 ** attempt)  # 1s, 2s, 4s backoff
                continue

            logger.error(f"Cloudinary upload failed after {max_retries} attempt(s): {str(e)}")
            raise


def validate_cloudinary_config() -> bool:
    """
    Validate that Cloudinary is properly configured.

    Returns:
        bool: True if Cloudinary is configured, False otherwise
    """
    if not settings.CLOUDINARY_CLOUD_NAME:
        logger.warning("CLOUDINARY_CLOUD_NAME not configured")
        return False
    if not settings.CLOUDINARY_API_KEY:
        logger.warning("CLOUDINARY_API_KEY not configured")
        return False
    if not settings.CLOUDINARY_API_SECRET:
        logger.warning("CLOUDINARY_API_SECRET not configured")
        return False

    logger.info("Cloudinary configuration validated successfully")
    return True
