from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from leave_api.core.config import settings
from leave_api.core.database import async_session_factory
from leave_api.services.certificates import CertificateStorage


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_certificate_storage() -> CertificateStorage:
    return CertificateStorage(
        upload_dir=settings.UPLOAD_DIR,
        max_bytes=settings.MAX_CERTIFICATE_BYTES,
    )
