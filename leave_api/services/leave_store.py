"""Persistence for leave requests.

``LeaveRequestStore`` wraps an async session and never commits; the
request-scoped session from ``get_db`` commits once the handler returns.
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from leave_api.core.exceptions import ConflictError, NotFoundError, ValidationError
from leave_api.models.leave_request import LeaveRequest, LeaveStatus
from leave_api.schemas.leave import LeaveRequestCreate

logger = logging.getLogger(__name__)

DUPLICATE_SUBMISSION_MESSAGE = "You have already submitted a leave request today"
NOT_FOUND_MESSAGE = "Request not found"
INVALID_STATUS_MESSAGE = "Invalid status"

DECISION_STATUSES = (LeaveStatus.APPROVED.value, LeaveStatus.REJECTED.value)


class LeaveRequestStore:
    """CRUD operations on the ``leave_requests`` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def has_submitted_on(self, employee_id: str, day: date) -> bool:
        result = await self.db.execute(
            select(LeaveRequest.id).where(
                LeaveRequest.employee_id == employee_id,
                LeaveRequest.request_day == day,
            )
        )
        return result.first() is not None

    async def create(
        self,
        data: LeaveRequestCreate,
        certificate_path: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        """Insert a validated submission as a pending request.

        Raises:
            ConflictError: If the employee already submitted today.
        """
        now = now or datetime.now(timezone.utc)
        today = now.date()

        if await self.has_submitted_on(data.employee_id, today):
            raise ConflictError(DUPLICATE_SUBMISSION_MESSAGE)

        leave_request = LeaveRequest(
            employee_id=data.employee_id,
            employee_name=data.employee_name,
            leave_type=data.leave_type.value,
            start_date=data.start_date,
            end_date=data.end_date,
            reason=data.reason,
            certificate_path=certificate_path,
            status=LeaveStatus.PENDING.value,
            request_date=now,
            request_day=today,
        )
        self.db.add(leave_request)
        try:
            await self.db.flush()
        except IntegrityError:
            # A concurrent submission won the unique (employee_id, request_day) race
            await self.db.rollback()
            raise ConflictError(DUPLICATE_SUBMISSION_MESSAGE)
        await self.db.refresh(leave_request)
        logger.info(
            "Created leave request %s for %s (%s)",
            leave_request.id, data.employee_id, data.leave_type.value,
        )
        return leave_request

    async def list_requests(
        self, search: Optional[str] = None, status: Optional[str] = None
    ) -> list[LeaveRequest]:
        query = select(LeaveRequest)
        if search:
            query = query.where(
                or_(
                    LeaveRequest.employee_name.icontains(search, autoescape=True),
                    LeaveRequest.employee_id.icontains(search, autoescape=True),
                )
            )
        if status:
            query = query.where(LeaveRequest.status == status)

        result = await self.db.execute(query.order_by(LeaveRequest.id))
        return list(result.scalars().all())

    async def get(self, request_id: int) -> LeaveRequest:
        leave_request = await self.db.get(LeaveRequest, request_id)
        if leave_request is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        return leave_request

    async def update_status(self, request_id: int, status: str) -> LeaveRequest:
        """Approve or reject a pending request.

        Raises:
            ValidationError: If ``status`` is not a decision or the request
                was already decided.
            NotFoundError: If no request has this id.
        """
        if status not in DECISION_STATUSES:
            raise ValidationError(INVALID_STATUS_MESSAGE)

        leave_request = await self.get(request_id)
        if leave_request.status != LeaveStatus.PENDING.value:
            raise ValidationError(
                f"Cannot update a leave request with status '{leave_request.status}'"
            )

        leave_request.status = status
        await self.db.flush()
        await self.db.refresh(leave_request)
        logger.info("Leave request %s %s", request_id, status)
        return leave_request

    async def delete(self, request_id: int) -> LeaveRequest:
        """Remove one request and return it so its certificate can be cleaned up."""
        leave_request = await self.get(request_id)
        await self.db.delete(leave_request)
        await self.db.flush()
        logger.info("Deleted leave request %s", request_id)
        return leave_request

    async def delete_all(self) -> list[str]:
        """Remove every request. Returns the certificate paths that were attached."""
        result = await self.db.execute(
            select(LeaveRequest.certificate_path).where(
                LeaveRequest.certificate_path.is_not(None)
            )
        )
        certificate_paths = list(result.scalars().all())
        deleted = await self.db.execute(delete(LeaveRequest))
        logger.info("Cleared %s leave requests", deleted.rowcount)
        return certificate_paths
