# services/leave_service.py
"""
Employee leave rules, shared by the /calendar and /leaves routers.

- A date is taken when the employee already has a non-rejected leave on it.
- Only Approved leave blocks visit scheduling.
- Reviewers: admin, sub_admin or the employee's reporting manager, never
  the employee themself, and only while the leave is Pending.
"""
import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, aliased

from models import Employee, EmployeeLeave, LeaveStatus, MANAGER_ROLES
from services.notification_service import notify_employees, manager_ids

logger = logging.getLogger("emperium.leaves")


class LeaveError(ValueError):
     """Leave rule violation; `status_code` is the HTTP status to report."""

     def __init__(self, message: str, status_code: int = 400):
          self.status_code = status_code
          super().__init__(message)


def taken_dates(db: Session, employee_id: int, dates: Iterable[date]) -> set:
     dates = list(dates)
     if not dates:
          return set()
     rows = (
          db.query(EmployeeLeave.leave_date)
          .filter(
               EmployeeLeave.employee_id == employee_id,
               EmployeeLeave.leave_date.in_(dates),
               EmployeeLeave.status != LeaveStatus.REJECTED,
          )
          .all()
     )
     return {row[0] for row in rows}


def has_approved_leave(db: Session, employee_id: int, on: date) -> bool:
     return (
          db.query(EmployeeLeave.id)
          .filter(
               EmployeeLeave.employee_id == employee_id,
               EmployeeLeave.leave_date == on,
               EmployeeLeave.status == LeaveStatus.APPROVED,
          )
          .first()
          is not None
     )


def approved_dates(db: Session, employee_id: Optional[int] = None, from_date: Optional[date] = None) -> list:
     query = db.query(EmployeeLeave).filter(EmployeeLeave.status == LeaveStatus.APPROVED)
     if employee_id is not None:
          query = query.filter(EmployeeLeave.employee_id == employee_id)
     if from_date is not None:
          query = query.filter(EmployeeLeave.leave_date >= from_date)
     return query.order_by(EmployeeLeave.leave_date).all()


def leave_approvers(db: Session, employee: Employee) -> list:
     """The reporting manager when there is an active one, otherwise every active manager."""
     if employee.reporting_manager_id:
          manager = (
               db.query(Employee)
               .filter(Employee.id == employee.reporting_manager_id, Employee.is_active.is_(True))
               .first()
          )
          if manager is not None:
               return [manager.id]
     return [mid for mid in manager_ids(db) if mid != employee.id]


def apply_for_leave(
     db: Session,
     employee: Employee,
     dates: Iterable[date],
     leave_type: str,
     reason: Optional[str],
) -> Tuple[List[EmployeeLeave], List[date]]:
     """
     Create one Pending leave row per date. Dates that already carry a
     non-rejected leave are skipped.

     Returns:
          (inserted leaves, skipped dates)
     """
     unique_dates = sorted(set(dates))
     existing = taken_dates(db, employee.id, unique_dates)

     inserted, skipped = [], []
     for leave_date in unique_dates:
          if leave_date in existing:
               skipped.append(leave_date)
               continue
          leave = EmployeeLeave(
               employee_id=employee.id,
               leave_date=leave_date,
               leave_type=leave_type,
               reason=reason,
               status=LeaveStatus.PENDING,
          )
          db.add(leave)
          inserted.append(leave)

     if inserted:
          db.flush()
          first, last = inserted[0].leave_date, inserted[-1].leave_date
          span = first.isoformat() if first == last else f"{first.isoformat()} to {last.isoformat()}"
          notify_employees(
               db,
               leave_approvers(db, employee),
               "Leave Request",
               f"{employee.name} applied for {leave_type} leave ({len(inserted)} day(s): {span})",
               "info",
          )
          logger.info("Employee #%s applied for %d leave day(s)", employee.id, len(inserted))

     return inserted, skipped


def can_review(db: Session, reviewer: dict, leave: EmployeeLeave) -> bool:
     if reviewer.get("type") != "employee":
          return False
     if leave.employee_id == reviewer.get("id"):
          return False
     if reviewer.get("role") in MANAGER_ROLES:
          return True
     applicant = db.query(Employee).filter(Employee.id == leave.employee_id).first()
     return applicant is not None and applicant.reporting_manager_id == reviewer.get("id")


def review_leave(
     db: Session,
     leave: EmployeeLeave,
     reviewer: dict,
     status: LeaveStatus,
     remarks: Optional[str] = None,
) -> EmployeeLeave:
     """
     Approve or reject a pending leave and notify the applicant.

     Raises:
          LeaveError: 403 when the reviewer may not act on this leave,
               409 when it is no longer pending, 400 for an invalid status.
     """
     if status not in (LeaveStatus.APPROVED, LeaveStatus.REJECTED):
          raise LeaveError("Status must be Approved or Rejected", 400)
     if not can_review(db, reviewer, leave):
          raise LeaveError("Not allowed to review this leave", 403)
     if leave.status != LeaveStatus.PENDING:
          raise LeaveError(f"Leave is already {leave.status.value}", 409)

     leave.status = status
     leave.reviewed_by_employee_id = reviewer.get("id")
     leave.reviewed_at = datetime.utcnow()
     leave.review_remarks = remarks

     approved = status == LeaveStatus.APPROVED
     notify_employees(
          db,
          [leave.employee_id],
          f"Leave {status.value}",
          f"Your leave on {leave.leave_date.isoformat()} was {status.value.lower()} by {reviewer.get('name')}"
          + (f": {remarks}" if remarks else ""),
          "success" if approved else "warning",
     )
     logger.info("Leave #%s %s by employee #%s", leave.id, status.value, reviewer.get("id"))
     return leave


def cancel_leave(db: Session, leave: EmployeeLeave, employee_id: int) -> None:
     """Delete one's own pending leave."""
     if leave.employee_id != employee_id:
          raise LeaveError("You can only cancel your own leave", 403)
     if leave.status != LeaveStatus.PENDING:
          raise LeaveError("Only pending leave can be cancelled", 409)
     db.delete(leave)


def leave_list_query(db: Session):
     """Leaves joined with applicant, reporting manager and reviewer names."""
     manager = aliased(Employee)
     reviewer = aliased(Employee)
     return (
          db.query(
               EmployeeLeave,
               Employee.name.label("employee_name"),
               Employee.department.label("department"),
               Employee.reporting_manager_id.label("reporting_manager_id"),
               manager.name.label("manager_name"),
               reviewer.name.label("reviewed_by_name"),
          )
          .join(Employee, Employee.id == EmployeeLeave.employee_id)
          .outerjoin(manager, manager.id == Employee.reporting_manager_id)
          .outerjoin(reviewer, reviewer.id == EmployeeLeave.reviewed_by_employee_id)
     )


def scope_leaves(query, user: dict, employee_id: Optional[int] = None):
     """
     Managers see every leave (optionally one employee's); everyone else
     sees their own and those of their direct reports.
     """
     if user.get("role") in MANAGER_ROLES:
          if employee_id is not None:
               query = query.filter(EmployeeLeave.employee_id == employee_id)
          return query
     query = query.filter(
          or_(EmployeeLeave.employee_id == user["id"], Employee.reporting_manager_id == user["id"])
     )
     if employee_id is not None:
          query = query.filter(EmployeeLeave.employee_id == employee_id)
     return query


def pending_review_count(db: Session, user: dict) -> int:
     """Pending leaves the caller could approve or reject."""
     query = (
          db.query(EmployeeLeave.id)
          .join(Employee, Employee.id == EmployeeLeave.employee_id)
          .filter(EmployeeLeave.status == LeaveStatus.PENDING, EmployeeLeave.employee_id != user["id"])
     )
     if user.get("role") not in MANAGER_ROLES:
          query = query.filter(Employee.reporting_manager_id == user["id"])
     return query.count()
