from leave_api.models.leave_request import LeaveRequest, LeaveStatus, LeaveType

__all__ = [
    "LeaveRequest",
    "LeaveStatus",
    "LeaveType",
]
