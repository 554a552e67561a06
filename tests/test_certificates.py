import io
import os
import re

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from leave_api.core.exceptions import ValidationError
from leave_api.services.certificates import Certificate, CertificateStorage

PDF_BYTES = b"%PDF-1.4\n%%EOF\n"


def make_upload(content: bytes = PDF_BYTES, filename: str = "note.pdf", content_type: str = "application/pdf"):
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


async def test_inspect_without_upload_returns_none(storage):
    assert await storage.inspect(None) is None
    assert await storage.inspect(make_upload(filename="")) is None


async def test_inspect_accepts_pdf(storage):
    certificate = await storage.inspect(make_upload())
    assert certificate == Certificate(filename="note.pdf", content=PDF_BYTES)


async def test_inspect_rejects_non_pdf(storage):
    with pytest.raises(ValidationError) as exc_info:
        await storage.inspect(make_upload(b"\x89PNG", filename="scan.png", content_type="image/png"))
    assert exc_info.value.message == "Only PDF files are allowed"


async def test_inspect_rejects_oversized_file(upload_dir):
    small = CertificateStorage(upload_dir=str(upload_dir), max_bytes=1024 * 1024)

    assert await small.inspect(make_upload(b"a" * (1024 * 1024))) is not None
    with pytest.raises(ValidationError) as exc_info:
        await small.inspect(make_upload(b"a" * (1024 * 1024 + 1)))
    assert exc_info.value.message == "Certificate file must not exceed 1MB"


def test_generated_names_are_unique_and_keep_extension(storage):
    names = {storage.generate_name("Medical Note.PDF") for _ in range(50)}

    assert len(names) == 50
    for name in names:
        assert re.fullmatch(r"certificate-\d+-\d+\.PDF", name)


async def test_save_writes_file_under_upload_dir(storage, upload_dir):
    file_path = await storage.save(Certificate(filename="note.pdf", content=PDF_BYTES))

    assert os.path.dirname(file_path) == str(upload_dir)
    assert file_path.endswith(".pdf")
    with open(file_path, "rb") as stored:
        assert stored.read() == PDF_BYTES


async def test_remove_deletes_file_and_tolerates_missing(storage):
    file_path = await storage.save(Certificate(filename="note.pdf", content=PDF_BYTES))

    await storage.remove(file_path)
    assert not os.path.exists(file_path)

    # Already gone, and nothing attached: both are no-ops
    await storage.remove(file_path)
    await storage.remove(None)


async def test_resolve_only_returns_existing_files(storage):
    file_path = await storage.save(Certificate(filename="note.pdf", content=PDF_BYTES))

    assert storage.resolve(file_path) == file_path
    assert storage.resolve(None) is None
    os.remove(file_path)
    assert storage.resolve(file_path) is None
