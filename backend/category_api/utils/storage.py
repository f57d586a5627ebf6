import hashlib
import logging
import os
import secrets
import tempfile
import time
from typing import Dict, List, Optional, Sequence

from category_api import config
from category_api.utils.image import ImageResizer, is_image_filename

logger = logging.getLogger(__name__)


class DerivativeStorageError(Exception):
    """Raised when a derivative set could not be written to disk."""
    pass


def derivative_name(width: int, filename: str) -> str:
    return f"{width}_{filename}"


class DerivativeStore:
    """
    Flat directory of resized category images.

    A base filename ``abc.jpg`` owns the files ``50_abc.jpg``,
    ``150_abc.jpg`` … one per configured width. A set is written
    completely or not at all.
    """

    def __init__(
        self,
        upload_dir: str = config.UPLOAD_DIR,
        widths: Sequence[int] = config.IMAGE_SIZES,
        resizer: Optional[ImageResizer] = None,
    ):
        self.upload_dir = upload_dir
        self.widths = tuple(widths)
        self.resizer = resizer or ImageResizer()

    # ────────────────────────────────────────────────────────────────
    #  Naming
    # ────────────────────────────────────────────────────────────────
    def new_filename(self, original_filename: str, data: bytes) -> str:
        """
        Unique base filename: 16 hex chars of a sha256 over the upload
        name, its size, the time and a random token, plus the original
        extension (lower-cased). Falls back to the decoded format's
        extension when the upload has no usable one.
        """
        original_filename = original_filename or ""
        uniq = (
            f"{original_filename}-{len(data)}-"
            f"{time.time()}-{secrets.token_hex(8)}"
        )
        hashed = hashlib.sha256(uniq.encode()).hexdigest()[:16]

        _, ext = os.path.splitext(os.path.basename(original_filename))
        if not ext or not is_image_filename(ext):
            ext = self.resizer.detect_extension(data)
        return hashed + ext.lower()

    def path(self, width: int, filename: str) -> str:
        return os.path.join(self.upload_dir, derivative_name(width, filename))

    def paths(self, filename: str) -> List[str]:
        return [self.path(width, filename) for width in self.widths]

    def exists(self, filename: str) -> bool:
        """True only if every derivative of *filename* is on disk."""
        return bool(filename) and all(os.path.isfile(p) for p in self.paths(filename))

    # ────────────────────────────────────────────────────────────────
    #  Write
    # ────────────────────────────────────────────────────────────────
    def save(self, data: bytes, original_filename: str) -> str:
        """
        1) Resize to every width in memory (InvalidImageError aborts here,
           before anything touches the disk).
        2) Write each derivative to a temp file and rename it into place.
        3) On any OS error remove whatever this call already wrote and
           raise DerivativeStorageError.
        Returns the new base filename.
        """
        filename = self.new_filename(original_filename, data)
        rendered: Dict[int, bytes] = self.resizer.render(data, self.widths)

        os.makedirs(self.upload_dir, exist_ok=True)

        written: List[str] = []
        try:
            for width in self.widths:
                final_path = self.path(width, filename)
                self._write_atomic(final_path, rendered[width])
                written.append(final_path)
        except OSError as exc:
            logger.exception("Failed to write derivatives for %s", filename)
            for p in written:
                self._remove(p)
            raise DerivativeStorageError(f"Could not store {filename}: {exc}") from exc

        logger.info("Stored %d derivatives for %s", len(written), filename)
        return filename

    def _write_atomic(self, final_path: str, contents: bytes) -> None:
        fd, tmp_path = tempfile.mkstemp(dir=self.upload_dir, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as out:
                out.write(contents)
            os.replace(tmp_path, final_path)
        except OSError:
            self._remove(tmp_path)
            raise

    # ────────────────────────────────────────────────────────────────
    #  Delete
    # ────────────────────────────────────────────────────────────────
    def delete(self, filename: Optional[str]) -> int:
        """
        Remove every derivative of *filename*. Missing files are skipped,
        OS errors are logged. Returns the number of files removed.
        """
        if not filename:
            return 0

        count = 0
        for p in self.paths(filename):
            if os.path.isfile(p) and self._remove(p):
                count += 1
        logger.info("Removed %d derivatives for %s", count, filename)
        return count

    def _remove(self, p: str) -> bool:
        try:
            os.remove(p)
            return True
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.warning("Could not remove %s: %s", p, exc)
            return False
