from __future__ import annotations

import io
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from ..core.exceptions import ValidationError

_FORMATS = {
    "JPEG": ("jpg", "image/jpeg"),
    "PNG": ("png", "image/png"),
    "WEBP": ("webp", "image/webp"),
}


@dataclass(frozen=True)
class PreparedImage:
    data: bytes
    extension: str
    content_type: str


def prepare_avatar(raw: bytes, *, max_edge: int) -> PreparedImage:
    """Check that the upload is a real image and shrink it to `max_edge`.

    Only JPEG, PNG and WEBP are accepted; the original format is kept.
    """
    if not raw:
        raise ValidationError("Image file is empty")

    try:
        img = Image.open(io.BytesIO(raw))
        img.load()
    except (UnidentifiedImageError, OSError):
        raise ValidationError("File is not a valid image")

    fmt = (img.format or "").upper()
    if fmt not in _FORMATS:
        raise ValidationError(f"Unsupported image format: {fmt or 'unknown'}")
    extension, content_type = _FORMATS[fmt]

    if max(img.size) <= max_edge:
        return PreparedImage(data=raw, extension=extension, content_type=content_type)

    img.thumbnail((max_edge, max_edge))
    if fmt == "JPEG" and img.mode not in ("RGB", "L"):
        img = img.convert("RGB")
    out = io.BytesIO()
    img.save(out, format=fmt)
    return PreparedImage(data=out.getvalue(), extension=extension, content_type=content_type)
