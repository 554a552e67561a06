"""Storage for medical certificates attached to leave requests.

Files live on local disk under the configured upload directory; the path
returned by ``save`` is what gets recorded on the leave request.
"""

import logging
import os
import secrets
import time
from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from leave_api.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
FILENAME_PREFIX = "certificate"


@dataclass
class Certificate:
    """An accepted upload held in memory until it is written to disk."""

    filename: str
    content: bytes


class CertificateStorage:
    def __init__(self, upload_dir: str, max_bytes: int):
        self.upload_dir = upload_dir
        self.max_bytes = max_bytes

    def ensure_directory(self) -> None:
        os.makedirs(self.upload_dir, exist_ok=True)

    async def inspect(self, upload: Optional[UploadFile]) -> Optional[Certificate]:
        """Accept or reject an uploaded certificate.

        Returns ``None`` when nothing was uploaded.

        Raises:
            ValidationError: If the file is not a PDF or is over the size limit.
        """
        if upload is None or not upload.filename:
            return None

        if upload.content_type != PDF_CONTENT_TYPE:
            raise ValidationError("Only PDF files are allowed")

        # max_bytes + 1 is enough to tell an oversize file apart
        content = await upload.read(self.max_bytes + 1)
        if len(content) > self.max_bytes:
            raise ValidationError(
                f"Certificate file must not exceed {self.max_bytes // (1024 * 1024)}MB"
            )
        return Certificate(filename=upload.filename, content=content)

    def generate_name(self, original_filename: str) -> str:
        extension = os.path.splitext(original_filename)[1]
        unique_suffix = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
        return f"{FILENAME_PREFIX}-{unique_suffix}{extension}"

    async def save(self, certificate: Certificate) -> str:
        file_path = os.path.join(self.upload_dir, self.generate_name(certificate.filename))
        await run_in_threadpool(self._write, file_path, certificate.content)
        logger.info("Stored certificate %s (%d bytes)", file_path, len(certificate.content))
        return file_path

    def _write(self, file_path: str, content: bytes) -> None:
        self.ensure_directory()
        with open(file_path, "wb") as document:
            document.write(content)

    async def remove(self, file_path: Optional[str]) -> None:
        """Delete a stored certificate. A file that is already gone is not an error."""
        if not file_path:
            return
        try:
            await run_in_threadpool(os.remove, file_path)
        except FileNotFoundError:
            logger.info("Certificate %s already absent", file_path)
        except OSError:
            logger.exception("Failed to delete certificate %s", file_path)
            raise
        else:
            logger.info("Deleted certificate %s", file_path)

    def resolve(self, file_path: Optional[str]) -> Optional[str]:
        if file_path and os.path.isfile(file_path):
            return file_path
        return None
