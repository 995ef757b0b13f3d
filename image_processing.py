"""
YouTube Thumbnail Studio - Image Processing
===========================================
Canvas normalization for everything that enters or leaves the studio.

Uploads are letterboxed onto a black 1280x720 canvas (fit-inside, never
cropped) before they are sent to the image model. Generated thumbnails are
exported as PNG (as-is) or flattened onto the same black canvas as JPEG.
"""

import io
from typing import NamedTuple, Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from config import (
    THUMBNAIL_WIDTH,
    THUMBNAIL_HEIGHT,
    NORMALIZED_JPEG_QUALITY,
    EXPORT_JPEG_QUALITY,
)
from errors import ValidationError
from schemas import UploadedImage, ImageEncoding
from utils import setup_logger

logger = setup_logger(__name__)

BACKGROUND_COLOR = (0, 0, 0)


class FitBox(NamedTuple):
    """Placement of a scaled source image inside the target canvas."""
    x: int
    y: int
    width: int
    height: int


# =============================================================================
# GEOMETRY
# =============================================================================

def compute_fit_box(
    src_width: int,
    src_height: int,
    target_width: int = THUMBNAIL_WIDTH,
    target_height: int = THUMBNAIL_HEIGHT,
) -> FitBox:
    """
    Largest aspect-preserving box that fits inside the target, centered.

    Wider-than-target sources fill the full width and are centered
    vertically; everything else fills the full height and is centered
    horizontally.
    """
    if src_width <= 0 or src_height <= 0:
        raise ValidationError(f"Image has invalid dimensions: {src_width}x{src_height}")

    src_aspect = src_width / src_height
    target_aspect = target_width / target_height

    if src_aspect > target_aspect:
        width = target_width
        height = min(target_height, max(1, round(target_width / src_aspect)))
        return FitBox(0, (target_height - height) // 2, width, height)

    height = target_height
    width = min(target_width, max(1, round(target_height * src_aspect)))
    return FitBox((target_width - width) // 2, 0, width, height)


# =============================================================================
# DECODING / ENCODING
# =============================================================================

def _open_image(data: bytes) -> Image.Image:
    """Decode raw bytes into an RGBA image with EXIF orientation applied."""
    if not data:
        raise ValidationError("No image data was provided.")
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ValidationError(f"Could not read the uploaded image: {e}") from e

    img = ImageOps.exif_transpose(img)
    return img.convert("RGBA")


def _black_canvas(width: int = THUMBNAIL_WIDTH, height: int = THUMBNAIL_HEIGHT) -> Image.Image:
    return Image.new("RGB", (width, height), BACKGROUND_COLOR)


def _encode(img: Image.Image, encoding: ImageEncoding, quality: int) -> bytes:
    buffer = io.BytesIO()
    if encoding == ImageEncoding.JPEG:
        img.convert("RGB").save(buffer, format="JPEG", quality=quality)
    elif encoding == ImageEncoding.WEBP:
        img.save(buffer, format="WEBP", quality=quality)
    else:
        img.save(buffer, format="PNG")
    return buffer.getvalue()


# =============================================================================
# NORMALIZATION
# =============================================================================

def letterbox(img: Image.Image) -> Image.Image:
    """Fit an image inside a black 1280x720 canvas without cropping."""
    box = compute_fit_box(img.width, img.height)
    canvas = _black_canvas()

    rgba = img.convert("RGBA")
    if (rgba.width, rgba.height) != (box.width, box.height):
        rgba = rgba.resize((box.width, box.height), Image.Resampling.LANCZOS)

    # Alpha as mask so transparent regions stay black
    canvas.paste(rgba, (box.x, box.y), rgba)
    return canvas


def normalize_image(
    data: bytes,
    encoding: ImageEncoding = ImageEncoding.JPEG,
    quality: Optional[int] = None,
) -> UploadedImage:
    """
    Turn an arbitrary uploaded raster into the canonical 16:9 reference image.

    Args:
        data: Raw bytes of any format Pillow can decode
        encoding: Output encoding (JPEG by default, the background is solid)
        quality: Lossy quality, defaults to NORMALIZED_JPEG_QUALITY

    Returns:
        UploadedImage with a 1280x720 letterboxed image

    Raises:
        ValidationError: If the bytes are empty or not a decodable image
    """
    img = _open_image(data)
    box = compute_fit_box(img.width, img.height)
    logger.debug(
        f"Normalizing {img.width}x{img.height} upload into "
        f"{box.width}x{box.height} at ({box.x},{box.y})"
    )

    canvas = letterbox(img)
    encoded = _encode(canvas, encoding, quality or NORMALIZED_JPEG_QUALITY)

    logger.info(f"Upload normalized to {THUMBNAIL_WIDTH}x{THUMBNAIL_HEIGHT} ({len(encoded) // 1024} KB)")
    return UploadedImage(data=encoded, encoding=encoding)


# =============================================================================
# DOWNLOAD EXPORTS
# =============================================================================

def export_png(data: bytes) -> bytes:
    """Generated thumbnails are already PNG; they are downloaded unchanged."""
    if not data:
        raise ValidationError("There is no generated thumbnail to download.")
    return data


def export_jpeg(data: bytes, quality: int = EXPORT_JPEG_QUALITY) -> bytes:
    """
    Flatten a generated thumbnail onto a black 1280x720 canvas as JPEG.

    The source is already canonical, so it is drawn over the full canvas
    rather than letterboxed again; the black fill only shows through
    transparent pixels.
    """
    img = _open_image(data)
    if (img.width, img.height) != (THUMBNAIL_WIDTH, THUMBNAIL_HEIGHT):
        img = img.resize((THUMBNAIL_WIDTH, THUMBNAIL_HEIGHT), Image.Resampling.LANCZOS)

    canvas = _black_canvas()
    canvas.paste(img, (0, 0), img)
    return _encode(canvas, ImageEncoding.JPEG, quality)
