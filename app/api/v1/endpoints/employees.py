"""Employee directory endpoints."""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import aget_db
from app.core.exceptions import LeaveServiceError
from app.core.security import Identity, get_current_identity, require_admin
from app.schemas.employeeSchema import EmployeeCreateRequest, EmployeeResponse
from app.services.EmployeeDirectory import EmployeeDirectory

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/employees",
    tags=["employees"]
)


def get_employee_directory(db: AsyncSession = Depends(aget_db)) -> EmployeeDirectory:
    return EmployeeDirectory(db)


@router.get("")
async def list_employees(
    department: Optional[str] = None,
    position: Optional[str] = None,
    is_active: Optional[bool] = None,
    identity: Identity = Depends(get_current_identity),
    directory: EmployeeDirectory = Depends(get_employee_directory)
):
    try:
        employees = await directory.list(department, position, is_active)
    except Exception as e:
        logger.exception(f"Get employees error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch employees"
        )
    return {"employees": [EmployeeResponse.model_validate(e) for e in employees]}


@router.get("/{employee_id}")
async def get_employee(
    employee_id: int,
    identity: Identity = Depends(get_current_identity),
    directory: EmployeeDirectory = Depends(get_employee_directory)
):
    try:
        employee = await directory.get(employee_id)
    except Exception as e:
        logger.exception(f"Get employee error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch employee"
        )
    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Employee not found"
        )
    return {"employee": EmployeeResponse.model_validate(employee)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: EmployeeCreateRequest,
    identity: Identity = Depends(require_admin),
    directory: EmployeeDirectory = Depends(get_employee_directory)
):
    try:
        employee = await directory.create(payload)
    except LeaveServiceError:
        raise
    except Exception as e:
        logger.exception(f"Create employee error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create employee"
        )
    return {
        "message": "Employee created successfully",
        "employee": EmployeeResponse.model_validate(employee),
    }


@router.delete("/{employee_id}")
async def deactivate_employee(
    employee_id: int,
    identity: Identity = Depends(require_admin),
    directory: EmployeeDirectory = Depends(get_employee_directory)
):
    """Soft delete: the employee is marked inactive and can no longer file leave."""
    try:
        await directory.deactivate(employee_id)
    except LeaveServiceError:
        raise
    except Exception as e:
        logger.exception(f"Delete employee error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to deactivate employee"
        )
    return {"message": "Employee deactivated successfully"}
