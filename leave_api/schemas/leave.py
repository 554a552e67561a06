from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel

from leave_api.models.leave_request import LeaveType


class LeaveRequestCreate(BaseModel):
    """A submission that has passed every validation rule."""

    employee_id: str
    employee_name: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str


class LeaveRequestUpdate(BaseModel):
    status: str  # approved, rejected


class LeaveRequestResponse(BaseModel):
    id: int
    employee_id: str
    employee_name: str
    leave_type: str
    start_date: date
    end_date: date
    reason: str
    certificate_path: Optional[str] = None
    status: str
    request_date: datetime

    model_config = {"from_attributes": True}


class LeaveRequestCreated(BaseModel):
    message: str
    id: int


class LeaveRequestUpdated(BaseModel):
    message: str
    request: LeaveRequestResponse


class MessageResponse(BaseModel):
    message: str
