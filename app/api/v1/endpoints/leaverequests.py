"""Leave request router for the MOHR system."""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.constants import RequestStatus
from app.core.config import settings
from app.core.database import aget_db
from app.core.exceptions import LeaveServiceError
from app.core.security import Identity, get_current_identity
from app.schemas.leaveRequestSchema import (
    LeaveRequestCreate,
    LeaveRequestFilters,
    LeaveRequestResponse,
    LeaveStatusUpdateRequest,
)
from app.services.LeaveRequestService import LeaveRequestService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/leave-requests",
    tags=["leave-requests"]
)


def get_leave_request_service(db: AsyncSession = Depends(aget_db)) -> LeaveRequestService:
    """Dependency for the leave request service"""
    return LeaveRequestService(db, settings)


@router.get("/stats/overview")
async def get_leave_stats(
    identity: Identity = Depends(get_current_identity),
    service: LeaveRequestService = Depends(get_leave_request_service)
):
    """
    Leave request statistics: totals per status, per leave type breakdown
    and requests created in the recent window.
    Non-admins only see figures for their own requests.
    """
    try:
        stats = await service.stats_overview(identity)
    except LeaveServiceError:
        raise
    except Exception as e:
        logger.exception(f"Get leave stats error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch leave statistics"
        )
    return {"stats": stats}


@router.get("/search/{query}")
async def search_leave_requests(
    query: str,
    identity: Identity = Depends(get_current_identity),
    service: LeaveRequestService = Depends(get_leave_request_service)
):
    """Search by employee name, leave type or reason."""
    try:
        records = await service.search(identity, query)
    except LeaveServiceError:
        raise
    except Exception as e:
        logger.exception(f"Search leave requests error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to search leave requests"
        )
    return {"leave_requests": [LeaveRequestResponse.from_record(r) for r in records]}


@router.get("")
async def list_leave_requests(
    status_filter: Optional[RequestStatus] = Query(None, alias="status"),
    leave_type: Optional[str] = None,
    employee_id: Optional[int] = None,
    identity: Identity = Depends(get_current_identity),
    service: LeaveRequestService = Depends(get_leave_request_service)
):
    """
    List leave requests, newest first.
    Admins see everything and may filter by employee_id; everyone else
    only gets their own requests.
    """
    filters = LeaveRequestFilters(
        status=status_filter,
        leave_type=leave_type,
        employee_id=employee_id,
    )
    try:
        records = await service.list(identity, filters)
    except LeaveServiceError:
        raise
    except Exception as e:
        logger.exception(f"Get leave requests error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch leave requests"
        )
    return {"leave_requests": [LeaveRequestResponse.from_record(r) for r in records]}


@router.get("/{leave_request_id}")
async def get_leave_request(
    leave_request_id: str,
    identity: Identity = Depends(get_current_identity),
    service: LeaveRequestService = Depends(get_leave_request_service)
):
    try:
        record = await service.get_by_id(identity, leave_request_id)
    except LeaveServiceError:
        raise
    except Exception as e:
        logger.exception(f"Get leave request error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch leave request"
        )
    return {"leave_request": LeaveRequestResponse.from_record(record)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_leave_request(
    payload: LeaveRequestCreate,
    identity: Identity = Depends(get_current_identity),
    service: LeaveRequestService = Depends(get_leave_request_service)
):
    """
    Create a pending leave request.
    Employees can only file for themselves; admins can file for any active employee.
    """
    try:
        record = await service.create(identity, payload)
    except LeaveServiceError:
        raise
    except Exception as e:
        logger.exception(f"Create leave request error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create leave request"
        )
    return {
        "message": "Leave request created successfully",
        "leave_request": LeaveRequestResponse.from_record(record),
    }


@router.put("/{leave_request_id}")
async def update_leave_request(
    leave_request_id: str,
    payload: LeaveStatusUpdateRequest,
    identity: Identity = Depends(get_current_identity),
    service: LeaveRequestService = Depends(get_leave_request_service)
):
    """Approve, reject or reset a leave request. Admin only."""
    try:
        record = await service.update_status(
            identity, leave_request_id, payload.status, payload.reason
        )
    except LeaveServiceError:
        raise
    except Exception as e:
        logger.exception(f"Update leave request error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update leave request"
        )
    return {
        "message": "Leave request updated successfully",
        "leave_request": LeaveRequestResponse.from_record(record),
    }


@router.delete("/{leave_request_id}")
async def delete_leave_request(
    leave_request_id: str,
    identity: Identity = Depends(get_current_identity),
    service: LeaveRequestService = Depends(get_leave_request_service)
):
    """Delete a pending leave request. Owner or admin only."""
    try:
        await service.delete(identity, leave_request_id)
    except LeaveServiceError:
        raise
    except Exception as e:
        logger.exception(f"Delete leave request error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete leave request"
        )
    return {"message": "Leave request deleted successfully"}
