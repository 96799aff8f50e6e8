"""
Attachment Storage.

Stores uploaded reference files (typically PDFs) in a flat directory and
hands back the public path that callers put into a note's ``pdf_path``.
The note store never looks at these files.

Client-supplied filenames are reduced to their final path component, and an
existing file is never overwritten: a numeric suffix is added instead.
"""

import os
from pathlib import Path
from typing import BinaryIO

from notehub.backend.core.exceptions import PayloadTooLargeError, StorageError, ValidationError
from notehub.backend.core.logging import get_logger

logger = get_logger(__name__)

_CHUNK_SIZE = 1024 * 1024


def safe_filename(filename: str | None) -> str:
    """
    Reduce a client filename to a bare name that cannot escape the upload directory.

    Raises:
        ValidationError: If nothing usable remains
    """
    name = Path((filename or "").replace("\\", "/")).name.strip()
    if name in ("", ".", ".."):
        raise ValidationError(
            "Invalid attachment filename",
            details={"filename": filename},
        )
    return name


class AttachmentStorage:
    """
    Filesystem-backed attachment store.

    Args:
        directory: Where uploaded files are written
        url_prefix: Public path prefix under which files are served
        max_bytes: Largest accepted upload
    """

    def __init__(self, directory: Path, url_prefix: str = "/uploads", max_bytes: int = 25 * 1024 * 1024) -> None:
        self.directory = Path(directory)
        self.url_prefix = "/" + url_prefix.strip("/")
        self.max_bytes = max_bytes

    @classmethod
    def from_config(cls) -> "AttachmentStorage":
        """Build from storage.yaml and the PLH_UPLOAD_DIR override."""
        from notehub.backend.core.config import get_app_config, get_upload_dir

        storage_config = get_app_config().storage
        return cls(
            get_upload_dir(),
            url_prefix=storage_config.url_prefix,
            max_bytes=storage_config.max_upload_bytes,
        )

    def ensure_directory(self) -> None:
        """Create the upload directory if it does not exist."""
        self.directory.mkdir(parents=True, exist_ok=True)

    def check_writable(self) -> None:
        """
        Make sure uploads can be stored, creating the directory if needed.

        Raises:
            StorageError: If the directory cannot be created or written to
        """
        try:
            self.ensure_directory()
        except OSError as e:
            raise StorageError(f"Upload directory unavailable: {self.directory}") from e
        if not os.access(self.directory, os.W_OK | os.X_OK):
            raise StorageError(f"Upload directory is not writable: {self.directory}")

    def public_path(self, name: str) -> str:
        return f"{self.url_prefix}/{name}"

    def _reserve(self, name: str) -> tuple[str, BinaryIO]:
        """Exclusively create a file for ``name``, adding -1, -2, ... on collision."""
        stem, suffix = Path(name).stem, Path(name).suffix
        candidate = name
        counter = 0
        while True:
            try:
                return candidate, open(self.directory / candidate, "xb")
            except FileExistsError:
                counter += 1
                candidate = f"{stem}-{counter}{suffix}"

    def save(self, filename: str | None, stream: BinaryIO) -> str:
        """
        Write an uploaded file.

        Args:
            filename: Client-supplied filename
            stream: Readable binary stream with the file content

        Returns:
            Public path of the stored file, e.g. ``/uploads/notes.pdf``

        Raises:
            ValidationError: If the filename is unusable
            PayloadTooLargeError: If the content exceeds max_bytes
        """
        name = safe_filename(filename)
        self.ensure_directory()

        stored_name, target = self._reserve(name)
        written = 0
        try:
            with target:
                while chunk := stream.read(_CHUNK_SIZE):
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise PayloadTooLargeError(
                            f"Attachment exceeds {self.max_bytes} bytes"
                        )
                    target.write(chunk)
        except Exception:
            (self.directory / stored_name).unlink(missing_ok=True)
            raise

        logger.info(
            "Attachment stored",
            extra={"stored_name": stored_name, "size_bytes": written},
        )
        return self.public_path(stored_name)

    def resolve(self, filename: str) -> Path | None:
        """
        Locate a stored file by name.

        Returns:
            Path to the file, or None if the name is unsafe or nothing is stored under it
        """
        try:
            name = safe_filename(filename)
        except ValidationError:
            return None
        if name != filename:
            return None
        path = self.directory / name
        return path if path.is_file() else None
