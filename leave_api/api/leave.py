import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from leave_api.core.dependencies import get_certificate_storage, get_db
from leave_api.schemas.leave import (
    LeaveRequestCreated,
    LeaveRequestResponse,
    LeaveRequestUpdate,
    LeaveRequestUpdated,
    MessageResponse,
)
from leave_api.services.certificates import CertificateStorage
from leave_api.services.leave_store import LeaveRequestStore
from leave_api.services.validation import validate_leave_submission

logger = logging.getLogger(__name__)

router = APIRouter(tags=["leave"])


@router.post(
    "/leave-request",
    response_model=LeaveRequestCreated,
    status_code=status.HTTP_201_CREATED,
)
async def submit_leave_request(
    employee_id: str = Form("", alias="employeeId"),
    employee_name: str = Form("", alias="employeeName"),
    leave_type: str = Form("", alias="leaveType"),
    start_date: str = Form("", alias="startDate"),
    end_date: str = Form("", alias="endDate"),
    reason: str = Form(""),
    certificate: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    storage: CertificateStorage = Depends(get_certificate_storage),
):
    """Submit a new leave request with an optional PDF certificate."""
    accepted = await storage.inspect(certificate)
    data = validate_leave_submission(
        employee_id=employee_id,
        employee_name=employee_name,
        leave_type=leave_type,
        start_date=start_date,
        end_date=end_date,
        reason=reason,
        has_certificate=accepted is not None,
    )

    certificate_path = await storage.save(accepted) if accepted else None
    try:
        leave_request = await LeaveRequestStore(db).create(
            data, certificate_path=certificate_path
        )
    except Exception:
        # Nothing was persisted; drop the stored file
        await storage.remove(certificate_path)
        raise

    return LeaveRequestCreated(
        message="Leave request submitted successfully", id=leave_request.id
    )


@router.get("/leave-requests", response_model=list[LeaveRequestResponse])
async def list_leave_requests(
    search: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
):
    """List leave requests, optionally filtered by name/ID substring and status."""
    return await LeaveRequestStore(db).list_requests(search=search, status=status_filter)


@router.patch("/leave-request/{request_id}", response_model=LeaveRequestUpdated)
async def update_leave_request(
    request_id: int,
    data: LeaveRequestUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Approve or reject a pending leave request."""
    leave_request = await LeaveRequestStore(db).update_status(request_id, data.status)
    return LeaveRequestUpdated(
        message=f"Leave request {data.status} successfully", request=leave_request
    )


@router.delete("/leave-request/{request_id}", response_model=MessageResponse)
async def delete_leave_request(
    request_id: int,
    db: AsyncSession = Depends(get_db),
    storage: CertificateStorage = Depends(get_certificate_storage),
):
    """Delete one leave request and its certificate file."""
    leave_request = await LeaveRequestStore(db).delete(request_id)
    await storage.remove(leave_request.certificate_path)
    return MessageResponse(message="Leave request deleted successfully")


@router.delete("/leave-requests", response_model=MessageResponse)
async def clear_leave_requests(
    db: AsyncSession = Depends(get_db),
    storage: CertificateStorage = Depends(get_certificate_storage),
):
    """Delete every leave request and every attached certificate."""
    certificate_paths = await LeaveRequestStore(db).delete_all()
    # A file that cannot be removed is logged and left behind; the rows stay deleted.
    failed_paths = []
    for certificate_path in certificate_paths:
        try:
            await storage.remove(certificate_path)
        except OSError:
            failed_paths.append(certificate_path)
    if failed_paths:
        logger.warning(
            "Could not remove %d certificate files: %s", len(failed_paths), ", ".join(failed_paths)
        )
    logger.info("Removed %d certificate files", len(certificate_paths) - len(failed_paths))
    return MessageResponse(message="All leave requests cleared successfully")
