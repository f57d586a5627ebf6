import io
from typing import Dict, Iterable

from PIL import Image, UnidentifiedImageError


class InvalidImageError(Exception):
    """Raised when the uploaded bytes cannot be decoded as an image."""
    pass


# Pillow format name -> file extension used when the upload has none
FORMAT_EXTENSIONS = {
    "JPEG": ".jpg",
    "PNG": ".png",
    "GIF": ".gif",
    "BMP": ".bmp",
    "WEBP": ".webp",
}


def is_image_filename(filename: str) -> bool:
    """
    True if *filename* ends in an extension the derivatives may keep,
    e.g. "photo.JPG" or ".webp". Contents are not inspected.
    """
    ext = filename.rsplit(".", 1)[-1].lower()
    return ext in ["jpg", "jpeg", "png", "gif", "bmp", "webp"]


def scaled_height(src_width: int, src_height: int, width: int) -> int:
    """Height that keeps the aspect ratio when the width becomes *width*."""
    return max(1, round(src_height * width / src_width))


class ImageResizer:
    """
    Pillow-backed resizer.

    Every derivative keeps the source aspect ratio: the width is fixed,
    the height follows. Images narrower than the target are scaled up.
    The result is encoded in the same format as the source.
    """

    def __init__(self, resample=Image.LANCZOS, quality: int = 90, max_pixels=None):
        self.resample = resample
        self.quality = quality
        # Largest derivative allowed, in pixels; Pillow's bomb limit by default
        self.max_pixels = max_pixels if max_pixels is not None else Image.MAX_IMAGE_PIXELS

    def open(self, data: bytes) -> Image.Image:
        if not data:
            raise InvalidImageError("Empty image")
        try:
            img = Image.open(io.BytesIO(data))
            img.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            raise InvalidImageError(str(exc)) from exc
        if not img.width or not img.height:
            raise InvalidImageError("Image has no pixels")
        return img

    def detect_extension(self, data: bytes) -> str:
        """Extension matching the decoded format, e.g. ``.png``."""
        img = self.open(data)
        return FORMAT_EXTENSIONS.get(img.format or "", ".jpg")

    def resize(self, data: bytes, width: int) -> bytes:
        return self.render(data, [width])[width]

    def render(self, data: bytes, widths: Iterable[int]) -> Dict[int, bytes]:
        """
        Decode *data* once and encode one copy per width.
        Raises InvalidImageError if the source cannot be decoded or encoded,
        or if any copy would be larger than *max_pixels*.
        """
        src = self.open(data)
        fmt = src.format or "JPEG"

        sizes = [(width, scaled_height(src.width, src.height, width)) for width in widths]
        if self.max_pixels:
            for width, height in sizes:
                if width * height > self.max_pixels:
                    raise InvalidImageError(
                        f"Resizing {src.width}x{src.height} to width {width} gives "
                        f"{width * height} pixels, limit is {self.max_pixels}"
                    )

        out: Dict[int, bytes] = {}
        for width, height in sizes:
            resized = src.resize((width, height), self.resample)
            out[width] = self._encode(resized, fmt)
        return out

    def _encode(self, img: Image.Image, fmt: str) -> bytes:
        if fmt == "JPEG" and img.mode not in ("RGB", "L", "CMYK"):
            img = img.convert("RGB")

        buffer = io.BytesIO()
        try:
            if fmt in ("JPEG", "WEBP"):
                img.save(buffer, format=fmt, quality=self.quality)
            else:
                img.save(buffer, format=fmt)
        except (OSError, ValueError, KeyError) as exc:
            raise InvalidImageError(f"Cannot encode image as {fmt}: {exc}") from exc
        return buffer.getvalue()
