"""Storage of uploaded question paper PDFs on local disk."""

import logging
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

from config import UPLOAD_DIR, UPLOAD_URL_PREFIX

logger = logging.getLogger(__name__)


@dataclass
class StoredFile:
    """A file written to the upload directory.

    Attributes:
        filename: Generated name on disk.
        url: Web path the file is served from (stored on the paper).
        path: Absolute path on disk.
    """

    filename: str
    url: str
    path: Path


class PaperFileStorage:
    """Writes and removes paper PDFs under a web-servable directory."""

    def __init__(self, upload_dir: Path = UPLOAD_DIR, url_prefix: str = UPLOAD_URL_PREFIX):
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def _generate_filename(self, original_name: str) -> str:
        suffix = Path(original_name or "").suffix.lower() or ".pdf"
        return f"paper-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{suffix}"

    def save(self, content: bytes, original_name: str) -> StoredFile:
        """Write content under a collision-resistant generated name."""
        filename = self._generate_filename(original_name)
        path = self.upload_dir / filename
        path.write_bytes(content)
        logger.info("Stored upload %s as %s (%d bytes)", original_name, filename, len(content))
        return StoredFile(filename=filename, url=f"{self.url_prefix}/{filename}", path=path)

    def path_for(self, url: str) -> Path:
        """Map a stored URL back to its path inside the upload directory."""
        # Only the final component is trusted so a stored URL cannot escape the directory
        return self.upload_dir / Path(url).name

    def delete(self, url: str) -> bool:
        """Remove a stored file.

        Returns:
            True if a file was removed, False if it was already absent.
        """
        path = self.path_for(url)
        if not path.exists():
            logger.warning("Stored file already absent: %s", path)
            return False
        path.unlink()
        logger.info("Deleted stored file: %s", path)
        return True
