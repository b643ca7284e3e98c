"""
Leave Request Service
Creation, role-scoped retrieval, admin decisions, deletion, statistics and
search of leave requests.
"""

import logging
from datetime import timedelta
from typing import Dict, List, Optional, Union

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.constants.constants import (
    ACTIVE_REQUEST_STATUSES,
    DECIDED_REQUEST_STATUSES,
    RequestStatus,
)
from app.core.config import Settings, settings
from app.core.database import lock_employee_for_write
from app.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    LeaveServiceError,
    NotFoundError,
    ValidationError,
)
from app.core.security import Identity
from app.models.base import utcnow
from app.models.employee import Employee
from app.models.leave import LeaveRequest
from app.schemas.leaveRequestSchema import (
    LeaveRequestCreate,
    LeaveRequestFilters,
    LeaveStatsResponse,
    LeaveTypeBreakdown,
)
from app.services.EmployeeDirectory import EmployeeDirectory
from app.utils.check_admin_role import can_access_leave_request, is_admin, scoped_employee_id
from app.utils.leave_dates import calculate_days_requested

logger = logging.getLogger(__name__)

OVERLAP_MESSAGE = "Leave request overlaps with existing approved or pending request"
NOT_FOUND_MESSAGE = "Leave request not found"


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _record_id(value: Union[int, str]) -> Optional[int]:
    """Path ids arrive as text; anything that is not an integer matches no record."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class LeaveRequestService:
    """Service class for the leave request lifecycle"""

    # Filter keys accepted by ``list`` and the column each one matches exactly
    FILTER_COLUMNS = {
        "status": LeaveRequest.status,
        "leave_type": LeaveRequest.leave_type,
        "employee_id": LeaveRequest.employee_id,
    }

    def __init__(
        self,
        db: AsyncSession,
        config: Settings = settings,
        directory: Optional[EmployeeDirectory] = None,
    ):
        self.db = db
        self.config = config
        self.directory = directory or EmployeeDirectory(db)

    # ==================== Queries ====================

    @staticmethod
    def _base_query():
        return (
            select(LeaveRequest)
            .options(joinedload(LeaveRequest.employee))
            .execution_options(populate_existing=True)
        )

    @staticmethod
    def _newest_first(stmt):
        return stmt.order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc())

    async def _get_with_employee(self, leave_request_id: Union[int, str]) -> Optional[LeaveRequest]:
        record_id = _record_id(leave_request_id)
        if record_id is None:
            return None
        result = await self.db.execute(
            self._base_query().where(LeaveRequest.id == record_id)
        )
        return result.scalar_one_or_none()

    async def _find_overlapping(
        self,
        employee_id: int,
        start_date,
        end_date,
        exclude_id: Optional[int] = None,
    ) -> Optional[LeaveRequest]:
        """First active request of the employee sharing a day with the range."""
        stmt = select(LeaveRequest).where(
            LeaveRequest.employee_id == employee_id,
            LeaveRequest.status.in_(ACTIVE_REQUEST_STATUSES),
            LeaveRequest.start_date <= end_date,
            LeaveRequest.end_date >= start_date,
        )
        if exclude_id is not None:
            stmt = stmt.where(LeaveRequest.id != exclude_id)
        result = await self.db.execute(stmt.limit(1))
        return result.scalars().first()

    # ==================== Create ====================

    async def create(self, identity: Identity, payload: LeaveRequestCreate) -> LeaveRequest:
        """
        Create a pending leave request.

        Checks run in order: date range, employee exists and is active, caller
        may file for that employee, no overlap with an active request. The
        overlap check and the insert happen under a per-employee lock so two
        concurrent requests cannot both pass the check.

        Raises:
            ValidationError: end date before start date
            NotFoundError: unknown or inactive employee
            ForbiddenError: non-admin filing for someone else
            ConflictError: overlapping pending/approved request
        """
        days_requested = calculate_days_requested(payload.start_date, payload.end_date)
        if days_requested <= 0:
            raise ValidationError(
                "End date must be after start date",
                errors=[{"field": "end_date", "message": "End date must not be before start date"}],
            )

        try:
            await lock_employee_for_write(self.db, payload.employee_id)

            employee = await self.directory.get_active(payload.employee_id)
            if employee is None:
                raise NotFoundError("Employee not found")

            if not is_admin(identity) and payload.employee_id != identity.id:
                raise ForbiddenError("You can only create leave requests for yourself")

            overlapping = await self._find_overlapping(
                payload.employee_id, payload.start_date, payload.end_date
            )
            if overlapping is not None:
                logger.info(
                    f"Leave request for employee {payload.employee_id} "
                    f"overlaps request {overlapping.id}"
                )
                raise ConflictError(OVERLAP_MESSAGE)
        except LeaveServiceError:
            await self.db.rollback()
            raise

        now = utcnow()
        record = LeaveRequest(
            employee_id=payload.employee_id,
            leave_type=payload.leave_type,
            start_date=payload.start_date,
            end_date=payload.end_date,
            days_requested=days_requested,
            reason=payload.reason,
            status=RequestStatus.pending,
            created_at=now,
            updated_at=now,
        )
        self.db.add(record)
        await self.db.commit()
        logger.info(
            f"Leave request {record.id} created for employee {record.employee_id} "
            f"({record.start_date} to {record.end_date}, {days_requested} days)"
        )
        return await self._get_with_employee(record.id)

    # ==================== Read ====================

    async def list(
        self, identity: Identity, filters: Optional[LeaveRequestFilters] = None
    ) -> List[LeaveRequest]:
        """Leave requests visible to the caller, newest first."""
        filters = filters or LeaveRequestFilters()
        criteria = filters.model_dump()
        criteria["employee_id"] = scoped_employee_id(identity, filters.employee_id)

        stmt = self._base_query()
        for key, value in criteria.items():
            if value is None or value == "":
                continue
            stmt = stmt.where(self.FILTER_COLUMNS[key] == value)

        result = await self.db.execute(self._newest_first(stmt))
        return list(result.scalars().all())

    async def get_by_id(self, identity: Identity, leave_request_id: Union[int, str]) -> LeaveRequest:
        # Same answer for "missing" and "not yours"
        record = await self._get_with_employee(leave_request_id)
        if record is None or not can_access_leave_request(identity, record):
            raise NotFoundError(NOT_FOUND_MESSAGE)
        return record

    async def search(self, identity: Identity, query: str) -> List[LeaveRequest]:
        """Case-insensitive substring search over names, leave type and reason."""
        pattern = f"%{_escape_like(query)}%"
        stmt = (
            self._base_query()
            .outerjoin(Employee, LeaveRequest.employee_id == Employee.id)
            .where(
                or_(
                    Employee.first_name.ilike(pattern, escape="\\"),
                    Employee.last_name.ilike(pattern, escape="\\"),
                    LeaveRequest.leave_type.ilike(pattern, escape="\\"),
                    LeaveRequest.reason.ilike(pattern, escape="\\"),
                )
            )
        )
        scope = scoped_employee_id(identity)
        if scope is not None:
            stmt = stmt.where(LeaveRequest.employee_id == scope)

        result = await self.db.execute(self._newest_first(stmt))
        return list(result.scalars().all())

    async def stats_overview(self, identity: Identity) -> LeaveStatsResponse:
        scope = scoped_employee_id(identity)

        def scoped(stmt):
            if scope is None:
                return stmt
            return stmt.where(LeaveRequest.employee_id == scope)

        status_rows = await self.db.execute(
            scoped(
                select(LeaveRequest.status, func.count(LeaveRequest.id))
                .group_by(LeaveRequest.status)
            )
        )
        by_status: Dict[RequestStatus, int] = {
            RequestStatus(row_status): count for row_status, count in status_rows.all()
        }

        count_column = func.count(LeaveRequest.id)
        breakdown_rows = await self.db.execute(
            scoped(
                select(
                    LeaveRequest.leave_type,
                    count_column,
                    func.avg(LeaveRequest.days_requested),
                ).group_by(LeaveRequest.leave_type)
            ).order_by(count_column.desc(), LeaveRequest.leave_type)
        )
        breakdown = [
            LeaveTypeBreakdown(
                leave_type=leave_type,
                count=count,
                avg_days=round(float(avg_days or 0), 2),
            )
            for leave_type, count, avg_days in breakdown_rows.all()
        ]

        window_start = utcnow() - timedelta(days=self.config.RECENT_REQUESTS_WINDOW_DAYS)
        recent = await self.db.execute(
            scoped(
                select(func.count(LeaveRequest.id))
                .where(LeaveRequest.created_at >= window_start)
            )
        )

        return LeaveStatsResponse(
            total_requests=sum(by_status.values()),
            pending_requests=by_status.get(RequestStatus.pending, 0),
            approved_requests=by_status.get(RequestStatus.approved, 0),
            rejected_requests=by_status.get(RequestStatus.rejected, 0),
            leave_type_breakdown=breakdown,
            recent_requests=recent.scalar_one(),
        )

    # ==================== Decisions ====================

    async def update_status(
        self,
        identity: Identity,
        leave_request_id: Union[int, str],
        status: str,
        reason: Optional[str] = None,
    ) -> LeaveRequest:
        """
        Record an admin decision on a leave request.

        Any status may move to any other. Leaving a decided status is logged,
        and refused when ALLOW_DECISION_REOPEN is off. A rejected request that
        becomes active again is re-checked for overlaps.
        """
        if not is_admin(identity):
            raise ForbiddenError("Admin access required")

        try:
            new_status = RequestStatus(status)
        except ValueError:
            raise ValidationError(
                "Valid status is required",
                errors=[{
                    "field": "status",
                    "message": "Status must be one of: pending, approved, rejected",
                }],
            )

        record = await self._get_with_employee(leave_request_id)
        if record is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        previous = record.status
        if previous in DECIDED_REQUEST_STATUSES and new_status != previous:
            if not self.config.ALLOW_DECISION_REOPEN:
                raise InvalidStateError(f"Leave request is already {previous.value}")
            logger.warning(
                f"Leave request {record.id} moved from {previous.value} to "
                f"{new_status.value} by {identity.id}"
            )

        if previous == RequestStatus.rejected and new_status in ACTIVE_REQUEST_STATUSES:
            try:
                await lock_employee_for_write(self.db, record.employee_id)
                overlapping = await self._find_overlapping(
                    record.employee_id, record.start_date, record.end_date,
                    exclude_id=record.id,
                )
                if overlapping is not None:
                    raise ConflictError(OVERLAP_MESSAGE)
            except LeaveServiceError:
                await self.db.rollback()
                raise

        now = utcnow()
        record.status = new_status
        record.approved_by = identity.id
        record.approved_at = now
        record.updated_at = now
        if reason is not None:
            record.review_note = reason
        await self.db.commit()
        logger.info(f"Leave request {record.id} set to {new_status.value} by {identity.id}")
        return record

    async def delete(self, identity: Identity, leave_request_id: Union[int, str]) -> None:
        """Hard delete a pending request. Decided requests stay as audit records."""
        record = None
        record_id = _record_id(leave_request_id)
        if record_id is not None:
            result = await self.db.execute(
                select(LeaveRequest).where(LeaveRequest.id == record_id)
            )
            record = result.scalar_one_or_none()
        if record is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        if record.status != RequestStatus.pending:
            raise InvalidStateError("Only pending leave requests can be deleted")

        if not can_access_leave_request(identity, record):
            raise ForbiddenError("You can only delete your own leave requests")

        await self.db.delete(record)
        await self.db.commit()
        logger.info(f"Leave request {leave_request_id} deleted by {identity.id}")
