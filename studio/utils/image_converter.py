"""
Image conversion utility for converting images to WebP format.
Reduces file size before uploading to Cloudinary.
"""
import io
import logging
from typing import Optional, Tuple
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

DEFAULT_WEBP_QUALITY = 85  # Balance between quality and file size (0-100)
DEFAULT_WEBP_METHOD = 6    # Compression method (0-6, higher = better compression but slower)
MAX_DIMENSION = 3840       # Maximum width or height before downscaling


def _scaled_size(width: int, height: int, max_dimension: int) -> Tuple[int, int]:
    if width > height:
        return max_dimension, int(height * (max_dimension / width))
    return int(width * (max_dimension / height)), max_dimension


async def convert_to_webp(
    image_bytes: bytes,
    quality: int = DEFAULT_WEBP_QUALITY,
    method: int = DEFAULT_WEBP_METHOD,
    max_dimension: Optional[int] = MAX_DIMENSION,
) -> Tuple[bytes, bool]:
    """
    Convert image bytes to WebP format to reduce file size.

    Args:
        image_bytes: Original image file bytes
        quality: WebP quality (0-100, default: 85)
        method: WebP compression method (0-6, default: 6)
        max_dimension: Maximum width or height before downscaling (None to disable)

    Returns:
        Tuple[bytes, bool]:
            - Converted image bytes (or original if already WebP or unreadable)
            - Whether the returned bytes are a usable WebP/original image (False if unreadable)
    """
    try:
        image = Image.open(io.BytesIO(image_bytes))

        if image.format == 'WEBP':
            logger.debug("Image is already WebP format, skipping conversion")
            return image_bytes, True

        # WebP keeps alpha, so only palette images need converting for transparency
        if image.mode == 'P':
            image = image.convert('RGBA')
        elif image.mode not in ('RGB', 'RGBA', 'LA'):
            image = image.convert('RGB')

        if max_dimension:
            width, height = image.size
            if width > max_dimension or height > max_dimension:
                new_size = _scaled_size(width, height, max_dimension)
                logger.info(f"Downscaling image from {width}x{height} to {new_size[0]}x{new_size[1]}")
                image = image.resize(new_size, Image.Resampling.LANCZOS)

        webp_buffer = io.BytesIO()
        image.save(
            webp_buffer,
            format='WEBP',
            quality=quality,
            method=method,
            lossless=quality == 100,
        )
        webp_bytes = webp_buffer.getvalue()

        logger.info(
            f"Converted image to WebP: {len(image_bytes):,} bytes -> {len(webp_bytes):,} bytes "
            f"(quality={quality})"
        )
        return webp_bytes, True

    except UnidentifiedImageError as e:
        logger.warning(f"Cannot identify image format: {str(e)}")
        return image_bytes, False

    except Image.DecompressionBombError as e:
        logger.warning(f"Image too large to convert, uploading original: {str(e)}")
        return image_bytes, False

    except (OSError, ValueError) as e:
        logger.error(f"Error converting image to WebP: {str(e)}", exc_info=True)
        return image_bytes, False


async def prepare_upload(file_content: bytes, filename: str) -> bytes:
    """
    Return the bytes to upload: the WebP version when it is smaller, else the original.
    """
    converted_content, conversion_success = await convert_to_webp(file_content)

    if not conversion_success:
        logger.warning(f"WebP conversion failed for {filename}, uploading original format")
        return file_content

    if len(converted_content) < len(file_content):
        return converted_content

    logger.debug(f"WebP conversion did not reduce size for {filename}, using original")
    return file_content
