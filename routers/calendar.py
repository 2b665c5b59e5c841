# routers/calendar.py
"""
Visit calendar and the calendar's leave shortcuts.

Visits are complaints in Assigned / Scheduled / In Progress with a visit
date. Leave rules live in services.leave_service and are shared with
routers/leaves.py.
"""
from calendar import monthrange
from datetime import date, timedelta
from typing import Literal, Optional
from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import is_manager, require_employee
from models import Complaint, ComplaintCategory, ComplaintSubCategory, Customer, Employee, EmployeeLeave, LeaveStatus, Unit
from models.complaint import OPEN_STATUSES
from schemas.leave import CalendarLeaveApply, LeaveRemarks
from services.audit_service import write_audit_log
from services.leave_service import (
     LeaveError,
     apply_for_leave,
     approved_dates,
     cancel_leave,
     leave_list_query,
     pending_review_count,
     review_leave,
     scope_leaves,
)
from utils.serializers import row_to_dict

router = APIRouter(prefix="/api/calendar", tags=["calendar"])


def _window(view: str, year: Optional[int], month: Optional[int], week_start: Optional[date]):
     """(start, end) dates for the view, or (None, None) for 'all'."""
     today = date.today()
     if view == "today":
          return today, today
     if view == "week":
          start = week_start or (today - timedelta(days=today.weekday()))
          return start, start + timedelta(days=6)
     if view == "month":
          year = year or today.year
          month = month or today.month
          return date(year, month, 1), date(year, month, monthrange(year, month)[1])
     return None, None


def _get_leave_or_404(db: Session, leave_id: int) -> EmployeeLeave:
     leave = db.query(EmployeeLeave).filter(EmployeeLeave.id == leave_id).first()
     if not leave:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Leave not found")
     return leave


@router.get("", summary="Scheduled visits, approved leaves and a summary")
def get_calendar(
     view: Literal["month", "week", "today", "all"] = Query("month"),
     year: Optional[int] = Query(None, ge=2000, le=2100),
     month: Optional[int] = Query(None, ge=1, le=12),
     week_start: Optional[date] = Query(None),
     employee_id: Optional[int] = Query(None),
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     # Only managers may look at someone else's calendar
     target = employee_id if is_manager(user) else user["id"]
     start, end = _window(view, year, month, week_start)

     visits = (
          db.query(
               Complaint.id,
               Complaint.complaint_no,
               Complaint.visit_date,
               Complaint.visit_time,
               Complaint.status,
               Complaint.priority,
               Complaint.description,
               Complaint.sub_category_id,
               Unit.unit_no.label("unit_no"),
               ComplaintCategory.name.label("category_name"),
               ComplaintCategory.icon.label("category_icon"),
               ComplaintSubCategory.name.label("sub_category_name"),
               Customer.name.label("customer_name"),
               Customer.mobile1.label("customer_mobile"),
               Employee.id.label("employee_id"),
               Employee.name.label("employee_name"),
          )
          .join(Unit, Unit.id == Complaint.unit_id)
          .outerjoin(ComplaintCategory, ComplaintCategory.id == Complaint.category_id)
          .outerjoin(ComplaintSubCategory, ComplaintSubCategory.id == Complaint.sub_category_id)
          .outerjoin(Customer, Customer.id == Complaint.customer_id)
          .outerjoin(Employee, Employee.id == Complaint.assigned_to_employee_id)
          .filter(Complaint.visit_date.isnot(None), Complaint.status.in_(OPEN_STATUSES))
     )
     leaves = (
          db.query(EmployeeLeave, Employee.name.label("employee_name"))
          .join(Employee, Employee.id == EmployeeLeave.employee_id)
          .filter(EmployeeLeave.status == LeaveStatus.APPROVED)
     )
     if start is not None:
          visits = visits.filter(Complaint.visit_date >= start, Complaint.visit_date <= end)
          leaves = leaves.filter(EmployeeLeave.leave_date >= start, EmployeeLeave.leave_date <= end)
     if target is not None:
          visits = visits.filter(Complaint.assigned_to_employee_id == target)
          leaves = leaves.filter(EmployeeLeave.employee_id == target)

     visit_rows = [dict(row._mapping) for row in visits.order_by(Complaint.visit_date, Complaint.visit_time).all()]
     today = date.today()
     return {
          "visits": visit_rows,
          "leaves": [row_to_dict(row) for row in leaves.order_by(EmployeeLeave.leave_date).all()],
          "summary": {
               "total": len(visit_rows),
               "today": sum(1 for v in visit_rows if v["visit_date"] == today),
               "upcoming": sum(1 for v in visit_rows if v["visit_date"] > today),
               "overdue": sum(1 for v in visit_rows if v["visit_date"] < today),
          },
     }


@router.get("/leaves", summary="Leaves visible to the caller")
def list_leaves(
     status_filter: Optional[LeaveStatus] = Query(None, alias="status"),
     employee_id: Optional[int] = Query(None),
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     query = scope_leaves(leave_list_query(db), user, employee_id)
     if status_filter is not None:
          query = query.filter(EmployeeLeave.status == status_filter)
     rows = query.order_by(EmployeeLeave.leave_date.desc()).all()
     return {"leaves": [row_to_dict(row) for row in rows], "pending_count": pending_review_count(db, user)}


@router.post("/leaves", status_code=status.HTTP_201_CREATED, summary="Apply for a single day of leave")
def apply_leave(
     body: CalendarLeaveApply,
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     employee = db.query(Employee).filter(Employee.id == user["id"]).first()
     inserted, _ = apply_for_leave(db, employee, [body.leave_date], body.leave_type.value, body.reason)
     if not inserted:
          raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Leave already applied for this date")

     write_audit_log(
          db, "leave_applied", "employee", employee.id,
          f"Leave applied for {body.leave_date.isoformat()} ({body.leave_type.value})", user,
     )
     db.commit()
     return {"id": inserted[0].id, "message": "Leave application submitted"}


def _review(db: Session, leave_id: int, user: dict, new_status: LeaveStatus, remarks: Optional[str]) -> dict:
     leave = _get_leave_or_404(db, leave_id)
     try:
          review_leave(db, leave, user, new_status, remarks)
     except LeaveError as e:
          raise HTTPException(status_code=e.status_code, detail=str(e))

     write_audit_log(
          db, f"leave_{new_status.value.lower()}", "employee", leave.employee_id,
          f"Leave {new_status.value.lower()} for {leave.leave_date.isoformat()}", user,
     )
     db.commit()
     return {"message": f"Leave {new_status.value.lower()}"}


@router.post("/leaves/{leave_id}/approve", summary="Approve a pending leave")
def approve_leave(
     leave_id: int,
     body: Optional[LeaveRemarks] = Body(None),
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     return _review(db, leave_id, user, LeaveStatus.APPROVED, body.remarks if body else None)


@router.post("/leaves/{leave_id}/reject", summary="Reject a pending leave")
def reject_leave(
     leave_id: int,
     body: Optional[LeaveRemarks] = Body(None),
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     return _review(db, leave_id, user, LeaveStatus.REJECTED, body.remarks if body else None)


@router.delete("/leaves/{leave_id}", summary="Cancel one's own pending leave")
def delete_leave(
     leave_id: int,
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     leave = _get_leave_or_404(db, leave_id)
     try:
          cancel_leave(db, leave, user["id"])
     except LeaveError as e:
          raise HTTPException(status_code=e.status_code, detail=str(e))
     db.commit()
     return {"message": "Leave cancelled"}


@router.get("/leaves/approved-dates", summary="Approved leave dates (blocked for scheduling)")
def approved_leave_dates(
     employee_id: Optional[int] = Query(None),
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     leaves = approved_dates(db, employee_id or user["id"])
     return {
          "blocked_dates": [
               {"leave_date": leave.leave_date, "leave_type": leave.leave_type}
               for leave in leaves
          ]
     }
