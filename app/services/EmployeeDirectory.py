"""Employee lookups used by the leave request service, plus basic record management."""

import logging
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.models.base import utcnow
from app.models.employee import Employee
from app.schemas.employeeSchema import EmployeeCreateRequest

logger = logging.getLogger(__name__)


class EmployeeDirectory:
    """Read and maintain employee records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, employee_id: int) -> Optional[Employee]:
        result = await self.db.execute(
            select(Employee).where(Employee.id == employee_id)
        )
        return result.scalar_one_or_none()

    async def get_active(self, employee_id: int) -> Optional[Employee]:
        """Return the employee only if the record exists and is active."""
        result = await self.db.execute(
            select(Employee).where(
                Employee.id == employee_id,
                Employee.is_active == True
            )
        )
        return result.scalar_one_or_none()

    async def list(
        self,
        department: Optional[str] = None,
        position: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> List[Employee]:
        stmt = select(Employee)
        if department:
            stmt = stmt.where(Employee.department == department)
        if position:
            stmt = stmt.where(Employee.position == position)
        if is_active is not None:
            stmt = stmt.where(Employee.is_active == is_active)
        stmt = stmt.order_by(Employee.last_name, Employee.first_name)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create(self, payload: EmployeeCreateRequest) -> Employee:
        existing = await self.db.execute(
            select(Employee).where(
                or_(
                    Employee.employee_code == payload.employee_code,
                    Employee.email == payload.email,
                )
            )
        )
        if existing.scalars().first() is not None:
            raise ValidationError("Employee already exists with this code or email")

        now = utcnow()
        employee = Employee(
            **payload.model_dump(),
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        self.db.add(employee)
        await self.db.commit()
        logger.info(f"Employee {employee.id} ({employee.employee_code}) created")
        return employee

    async def deactivate(self, employee_id: int) -> Employee:
        """Soft delete: the record and its leave history are kept."""
        employee = await self.get(employee_id)
        if employee is None:
            raise NotFoundError("Employee not found")

        employee.is_active = False
        employee.updated_at = utcnow()
        await self.db.commit()
        logger.info(f"Employee {employee_id} deactivated")
        return employee
