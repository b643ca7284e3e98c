from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.constants.constants import MAX_REASON_LENGTH, RequestStatus


class LeaveRequestCreate(BaseModel):
    """Request schema for creating a leave request."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "employee_id": 12,
                "leave_type": "vacation",
                "start_date": "2025-03-10",
                "end_date": "2025-03-14",
                "reason": "Family trip"
            }
        },
    )

    employee_id: int
    leave_type: str = Field(..., min_length=1)
    start_date: date
    end_date: date
    reason: Optional[str] = Field(None, max_length=MAX_REASON_LENGTH)


class LeaveStatusUpdateRequest(BaseModel):
    """Request schema for an admin decision on a leave request.

    ``status`` is checked by the service so that the admin check runs first.
    """
    status: str
    reason: Optional[str] = Field(None, max_length=MAX_REASON_LENGTH)


class LeaveRequestFilters(BaseModel):
    """Exact-match filters accepted by the listing endpoint."""
    status: Optional[RequestStatus] = None
    leave_type: Optional[str] = None
    employee_id: Optional[int] = None


class LeaveRequestResponse(BaseModel):
    """Leave request joined with the employee display fields."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_id: int
    leave_type: str
    start_date: date
    end_date: date
    days_requested: int
    reason: Optional[str] = None
    status: RequestStatus
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    review_note: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    employee_email: Optional[str] = None

    @classmethod
    def from_record(cls, record) -> "LeaveRequestResponse":
        response = cls.model_validate(record)
        employee = record.employee
        if employee is not None:
            response.first_name = employee.first_name
            response.last_name = employee.last_name
            response.employee_email = employee.email
        return response


class LeaveTypeBreakdown(BaseModel):
    leave_type: str
    count: int
    avg_days: float


class LeaveStatsResponse(BaseModel):
    """Aggregated leave request figures for the caller's scope."""
    total_requests: int
    pending_requests: int
    approved_requests: int
    rejected_requests: int
    leave_type_breakdown: List[LeaveTypeBreakdown] = Field(default_factory=list)
    recent_requests: int
