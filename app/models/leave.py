"""Leave request model for employees of the MOHR system."""

from sqlalchemy import Column, Date, ForeignKey, Index, Integer, DateTime, Text, Enum
from sqlalchemy.orm import relationship
from app.constants.constants import RequestStatus
from app.models.base import Base, TimestampMixin


class LeaveRequest(Base, TimestampMixin):
    """Model representing leave requests submitted for employees."""

    __tablename__ = "leave_requests"
    __table_args__ = (
        Index("ix_leave_requests_employee_range", "employee_id", "start_date", "end_date"),
    )
    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    leave_type = Column(Text, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    days_requested = Column(Integer, nullable=False)
    reason = Column(Text, nullable=True)
    status = Column(Enum(RequestStatus), default=RequestStatus.pending, nullable=False, index=True)
    approved_by = Column(Integer, nullable=True)
    approved_at = Column(DateTime, nullable=True)
    review_note = Column(Text, nullable=True)
    employee = relationship("Employee", back_populates="leave_requests")
