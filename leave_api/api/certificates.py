from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from leave_api.core.dependencies import get_certificate_storage, get_db
from leave_api.core.exceptions import NotFoundError
from leave_api.models.leave_request import LeaveRequest
from leave_api.services.certificates import PDF_CONTENT_TYPE, CertificateStorage

router = APIRouter(tags=["certificates"])


@router.get("/certificate/{request_id}", response_class=FileResponse)
async def get_certificate(
    request_id: int,
    db: AsyncSession = Depends(get_db),
    storage: CertificateStorage = Depends(get_certificate_storage),
):
    """Serve the PDF certificate attached to a leave request."""
    leave_request = await db.get(LeaveRequest, request_id)
    if leave_request is None or not leave_request.certificate_path:
        raise NotFoundError("Certificate not found")

    file_path = storage.resolve(leave_request.certificate_path)
    if file_path is None:
        raise NotFoundError("File not found")

    return FileResponse(file_path, media_type=PDF_CONTENT_TYPE)
