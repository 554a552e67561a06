import enum
from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from leave_api.core.database import Base


class LeaveType(str, enum.Enum):
    ANNUAL = "Annual Leave"
    SICK = "Sick Leave"
    PERSONAL = "Personal Leave"
    MATERNITY = "Maternity Leave"
    PATERNITY = "Paternity Leave"


class LeaveStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveRequest(Base):
    __tablename__ = "leave_requests"
    __table_args__ = (
        # One submission per employee per calendar day
        UniqueConstraint("employee_id", "request_day", name="uq_leave_requests_employee_day"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[str] = mapped_column(String(7), nullable=False, index=True)
    employee_name: Mapped[str] = mapped_column(String(100), nullable=False)
    leave_type: Mapped[str] = mapped_column(
        String(50), nullable=False
    )  # Annual Leave, Sick Leave, Personal Leave, Maternity Leave, Paternity Leave
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    certificate_path: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default=LeaveStatus.PENDING.value
    )  # pending, approved, rejected
    request_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    request_day: Mapped[date] = mapped_column(Date, nullable=False)
