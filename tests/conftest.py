from datetime import date, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import leave_api.models  # noqa: F401
from leave_api.core.database import Base
from leave_api.core.dependencies import get_certificate_storage, get_db
from leave_api.main import app
from leave_api.services.certificates import CertificateStorage

PDF_BYTES = b"%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\ntrailer << /Root 1 0 R >>\n%%EOF\n"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def storage(upload_dir):
    return CertificateStorage(upload_dir=str(upload_dir), max_bytes=5 * 1024 * 1024)


@pytest.fixture
async def client(session_factory, storage):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_certificate_storage] = lambda: storage
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def leave_form():
    """Build a valid multipart form for POST /api/leave-request, with overrides."""

    def build(start_offset: int = 1, end_offset: int = 3, **overrides) -> dict:
        today = date.today()
        form = {
            "employeeId": "ATS0123",
            "employeeName": "John Smith",
            "leaveType": "Annual Leave",
            "startDate": (today + timedelta(days=start_offset)).isoformat(),
            "endDate": (today + timedelta(days=end_offset)).isoformat(),
            "reason": "Family vacation",
        }
        form.update(overrides)
        return form

    return build


@pytest.fixture
def pdf_upload():
    def build(filename: str = "note.pdf", content: bytes = PDF_BYTES, content_type: str = "application/pdf"):
        return {"certificate": (filename, content, content_type)}

    return build
