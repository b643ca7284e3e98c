"""Employee model for the MOHR system."""

from sqlalchemy import Boolean, Column, Date, Integer, String
from sqlalchemy.orm import relationship

from app.models.base import Base, TimestampMixin


class Employee(Base, TimestampMixin):
    """Employee record. Deactivated employees are kept with ``is_active`` False."""

    __tablename__ = "employees"
    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_code = Column(String(50), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    department = Column(String(100), nullable=True)
    position = Column(String(100), nullable=True)
    hire_date = Column(Date, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    leave_requests = relationship("LeaveRequest", back_populates="employee")
